"""Global pytest fixtures.
 - Sets env vars to disable logging side effects (file logs, JSONL events).
 - Puts the project root on sys.path so tests run without installation.
"""
from __future__ import annotations
import os
import sys, pathlib
import pytest

# Add project root and this directory (for the fakes module) to sys.path
ROOT = pathlib.Path(__file__).resolve().parents[2]
HERE = pathlib.Path(__file__).resolve().parent
for p in (ROOT, HERE):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


@pytest.fixture(autouse=True, scope="session")
def test_env_setup():
    os.environ.setdefault('SCRAPER_DISABLE_FILE_LOGS', '1')
    os.environ.setdefault('SCRAPER_DISABLE_EVENTS', '1')
    yield


@pytest.fixture
def events():
    """Recording event sink: list of (event, fields)."""
    recorded = []

    def _sink(event, **fields):
        recorded.append((event, fields))
    _sink.recorded = recorded
    return _sink
