"""Run history logging utilities.

Each scrape/workflow run appends one JSON line (JSONL) summary, so runs can be
compared later without a database.
"""
from __future__ import annotations
from pathlib import Path
from datetime import datetime, timezone
import json
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)


def append_history(summary: Dict[str, Any], history_path: Path) -> bool:
    rec = dict(summary)
    rec['timestamp_utc'] = datetime.now(timezone.utc).isoformat()
    try:
        history_path.parent.mkdir(parents=True, exist_ok=True)
        with history_path.open('a', encoding='utf-8') as f:
            f.write(json.dumps(rec, ensure_ascii=False, default=str) + '\n')
        return True
    except Exception as e:
        # Non-fatal
        logger.warning(f"Failed to append run history: {e}")
        return False


def write_jobs_json(jobs, path: Path) -> Path:
    """Write JobRecord list as pretty JSON (the raw-jobs file consumers read)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([j.to_json() for j in jobs], ensure_ascii=False, indent=2), encoding='utf-8')
    return path


__all__ = ['append_history', 'write_jobs_json']
