"""Runs every enabled source adapter against one shared browser session.

Adapters are started together and awaited with settle-all semantics: a failing
adapter contributes nothing but never cancels the others. Results are merged
in the fixed adapter order, deduplicated, cookies are persisted, and the
session is closed exactly once whatever happened in between.
"""
from __future__ import annotations
from typing import Callable, List, Optional, Sequence
import asyncio
import logging
import time
from .dedupe import dedupe_jobs
from .errors import AggregationError, SessionInitError
from .logging_config import log_event as default_events
from .models import AdapterResult, JobRecord
from .session import PageSession
from .settings import AppConfig
from .sources import SourceAdapter, build_adapters


class Aggregator:
    def __init__(
        self,
        config: AppConfig,
        logger: Optional[logging.Logger] = None,
        events: Optional[Callable[..., None]] = None,
        adapters: Optional[Sequence[SourceAdapter]] = None,
        session_factory: Optional[Callable[[], PageSession]] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger('jobdigest.aggregator')
        self.events = events or default_events
        self.adapters = list(adapters) if adapters is not None else build_adapters(config, events=self.events)
        self._session_factory = session_factory or self._default_session

    def _default_session(self) -> PageSession:
        return PageSession(self.config.scraping, logger=self.logger, events=self.events)

    async def _run_adapter(self, adapter: SourceAdapter, session) -> AdapterResult:
        try:
            jobs = await adapter.scrape(session)
            return AdapterResult(source=adapter.source, jobs=list(jobs or []))
        except Exception as e:
            self.logger.warning(f"{adapter.source.value} adapter failed: {e}")
            self.events('adapter_failed', source=adapter.source.value, message=str(e))
            return AdapterResult(source=adapter.source, error=e)

    async def scrape_all_sites(self) -> List[JobRecord]:
        session = self._session_factory()
        try:
            await session.open()
        except SessionInitError as e:
            raise AggregationError(f"Could not start browser session: {e}") from e
        start = time.time()
        try:
            enabled = [a for a in self.adapters if a.is_enabled()]
            results = await asyncio.gather(*(self._run_adapter(a, session) for a in enabled))
            merged = [job for r in results for job in r.jobs]
            unique = dedupe_jobs(merged)
            await session.save_cookies()
            failed = [r.source.value for r in results if not r.ok]
            self.logger.info(f"Total unique jobs scraped: {len(unique)} (raw={len(merged)}, failed_sources={failed or 'none'})")
            self.events(
                'aggregate_complete',
                raw=len(merged),
                unique=len(unique),
                per_source={r.source.value: len(r.jobs) for r in results},
                failed=failed,
                elapsed_s=round(time.time() - start, 2),
            )
            return unique
        finally:
            await session.close()


def scrape_all_sites(config: AppConfig, logger: Optional[logging.Logger] = None, **kwargs) -> List[JobRecord]:
    """Blocking entry point for callers outside an event loop."""
    return asyncio.run(Aggregator(config, logger=logger, **kwargs).scrape_all_sites())


__all__ = ['Aggregator', 'scrape_all_sites']
