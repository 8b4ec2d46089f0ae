"""One browser process + one context shared by every adapter in a run.

Playwright is imported lazily inside ``open()`` so helpers (models, dedupe,
selector utilities) stay cheap to import in tests and scripts.
"""
from __future__ import annotations
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional, TYPE_CHECKING
import logging
from .cookies import CookieStore
from .errors import SessionInitError
from .logging_config import log_event as default_events
from .settings import ScrapingSettings

if TYPE_CHECKING:  # pragma: no cover
    from playwright.async_api import Browser, BrowserContext, Page, Playwright  # type: ignore

LAUNCH_ARGS = ['--no-sandbox', '--disable-setuid-sandbox']
VIEWPORT = {'width': 1920, 'height': 1080}
LOCALE = 'en-IN'
TIMEZONE_ID = 'Asia/Kolkata'
EXTRA_HEADERS = {
    'accept-language': 'en-IN,en;q=0.9',
    'upgrade-insecure-requests': '1',
}


def _default_playwright_factory():
    from playwright.async_api import async_playwright  # type: ignore
    return async_playwright()


class PageSession:
    """Owns the browser lifecycle; the aggregator alone calls open/close."""

    def __init__(
        self,
        settings: ScrapingSettings,
        cookie_store: Optional[CookieStore] = None,
        logger: Optional[logging.Logger] = None,
        events: Optional[Callable[..., None]] = None,
        playwright_factory: Optional[Callable[[], Any]] = None,
    ):
        self.settings = settings
        self.logger = logger or logging.getLogger('jobdigest.session')
        self.cookie_store = cookie_store if cookie_store is not None else CookieStore(settings.cookies_path, logger=self.logger)
        self.events = events or default_events
        self._playwright_factory = playwright_factory or _default_playwright_factory
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._context is not None and not self._closed

    @property
    def context(self) -> BrowserContext:
        if not self.is_open:
            raise RuntimeError('session is not open')
        return self._context  # type: ignore[return-value]

    async def open(self) -> None:
        if self._context is not None:
            raise RuntimeError('session already opened')
        try:
            self._playwright = await self._playwright_factory().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.headless,
                args=LAUNCH_ARGS,
            )
            self._context = await self._browser.new_context(
                user_agent=self.settings.user_agent,
                viewport=VIEWPORT,
                locale=LOCALE,
                timezone_id=TIMEZONE_ID,
                java_script_enabled=True,
                extra_http_headers=EXTRA_HEADERS,
            )
        except Exception as e:
            self.logger.error(f"Failed to initialize browser: {e}")
            self.events('error', stage='session_open', message=str(e))
            await self._release()
            raise SessionInitError(f"Browser could not be launched: {e}") from e
        self.logger.info('Browser initialized successfully')
        self.events('session_open', headless=self.settings.headless)
        await self.load_cookies()

    async def new_page(self) -> Page:
        return await self.context.new_page()

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        page = await self.new_page()
        try:
            yield page
        finally:
            try:
                await page.close()
            except Exception:
                self.logger.debug('Failed closing page', exc_info=True)

    async def load_cookies(self) -> bool:
        try:
            cookies = self.cookie_store.load()
            if not cookies:
                return False
            await self.context.add_cookies(cookies)
        except Exception as e:
            self.logger.warning(f"Failed to load cookies: {e}")
            return False
        self.logger.info(f"Cookies loaded ({len(cookies)})")
        self.events('cookies_loaded', count=len(cookies))
        return True

    async def save_cookies(self) -> bool:
        try:
            cookies = await self.context.cookies()
        except Exception as e:
            self.logger.warning(f"Failed to read cookies from context: {e}")
            return False
        ok = self.cookie_store.save(cookies)
        if ok:
            self.logger.info('Cookies saved successfully')
            self.events('cookies_saved', count=len(cookies))
        return ok

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._release()
        self.logger.info('Browser cleanup completed')
        self.events('session_close')

    async def _release(self) -> None:
        # context is owned by the browser; closing the browser tears it down
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                self.logger.error(f"Error closing browser: {e}")
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception:
                self.logger.debug('Failed stopping playwright driver', exc_info=True)
        self._browser = None
        self._playwright = None


__all__ = ['PageSession', 'LAUNCH_ARGS', 'LOCALE', 'TIMEZONE_ID']
