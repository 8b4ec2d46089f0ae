"""Logging setup and the structured event sink.

``setup_logging`` configures the root logger once per process (rotating file
under ``scraper/logs`` plus console). Env switches are read at call time, not
import time, so tests can toggle them. Structured events go through
``EventLog`` instances; components receive one as their ``events`` argument,
and ``log_event`` is the shared default writing ``scraper.events.jsonl``.
"""
from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
import json
from datetime import datetime, timezone

LOG_DIR = Path(__file__).resolve().parent.parent / 'logs'

STRUCTURED_LOG_FILE = LOG_DIR / 'scraper.events.jsonl'

_DEF_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logging(debug: bool = False):
    root = logging.getLogger()
    if root.handlers:
        # already configured
        return
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    if not os.getenv('SCRAPER_DISABLE_FILE_LOGS'):
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        # human readable rotating log
        fh = RotatingFileHandler(LOG_DIR / 'scraper.log', maxBytes=1_000_000, backupCount=5, encoding='utf-8')
        fh.setFormatter(logging.Formatter(_DEF_FORMAT))
        root.addHandler(fh)
    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter('%(levelname)s %(message)s'))
    ch.setLevel(logging.DEBUG if debug else logging.INFO)
    root.addHandler(ch)
    logging.getLogger('playwright').setLevel(logging.WARNING)


class EventLog:
    """Append-only structured JSON event sink (one object per line)."""

    def __init__(self, path: Path = STRUCTURED_LOG_FILE, enabled: bool | None = None):
        self.path = Path(path)
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        if self._enabled is not None:
            return self._enabled
        return not os.getenv('SCRAPER_DISABLE_EVENTS')

    def __call__(self, event: str, **fields):
        if not self.enabled:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open('a', encoding='utf-8') as f:
                rec = {'ts': datetime.now(timezone.utc).isoformat(timespec='seconds'), 'event': event}
                rec.update(fields)
                f.write(json.dumps(rec, ensure_ascii=False, default=str) + '\n')
        except Exception:
            logging.getLogger(__name__).debug('Failed to write structured log line', exc_info=True)


log_event = EventLog()

__all__ = ['setup_logging', 'EventLog', 'log_event']
