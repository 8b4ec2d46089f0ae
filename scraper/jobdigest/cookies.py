"""Best-effort cookie persistence between runs.

Cookies are stored as the JSON list Playwright returns from
``BrowserContext.cookies()``. Nothing here raises: a missing or corrupt file
simply means the run starts without cookies.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging


class CookieStore:
    def __init__(self, path: Path, logger: Optional[logging.Logger] = None):
        self.path = Path(path)
        self.logger = logger or logging.getLogger('jobdigest.cookies')

    def load(self) -> Optional[List[Dict[str, Any]]]:
        """Return saved cookies, or None when absent/unreadable."""
        if not self.path.exists():
            self.logger.debug(f"No cookie file at {self.path}")
            return None
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except Exception as e:
            self.logger.warning(f"Failed to load cookies: {e}")
            return None
        if not isinstance(data, list) or not all(isinstance(c, dict) for c in data):
            self.logger.warning(f"Ignoring malformed cookie file {self.path}")
            return None
        return data

    def save(self, cookies: List[Dict[str, Any]]) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(cookies, ensure_ascii=False), encoding='utf-8')
            return True
        except Exception as e:
            self.logger.warning(f"Failed to save cookies: {e}")
            return False


__all__ = ['CookieStore']
