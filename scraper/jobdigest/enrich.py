"""Full-description enrichment for scraped job records.

A capped prefix of the records (``max_detail_fetch``) is processed by a small
pool of asyncio workers pulling from a queue, so at most ``concurrency`` detail
pages are open in the shared browser context at any moment. Each record gets
exactly one fetch attempt; a failed attempt leaves the sentinel
``DESCRIPTION_UNAVAILABLE`` instead of raising.
"""
from __future__ import annotations
from typing import Callable, List, Optional, Sequence
import asyncio
import logging
import re
import time
from .logging_config import log_event as default_events
from .models import DESCRIPTION_UNAVAILABLE, JobRecord

BODY_TEXT_JS = "() => document.body ? document.body.innerText : ''"

_NEWLINES = re.compile(r"\n+")
_SPACES = re.compile(r"[ \t]{2,}")
_CONTROL = re.compile(r"[\r\t\f\v\u00a0\x00-\x08\x0e-\x1f]")


def clean_text(text: Optional[str], max_chars: Optional[int] = None) -> str:
    """Collapse control characters and runs of whitespace, trim, truncate."""
    if not text:
        return ''
    out = _CONTROL.sub(' ', str(text))
    out = _NEWLINES.sub('\n', out)
    out = _SPACES.sub(' ', out)
    out = '\n'.join(line.strip() for line in out.split('\n')).strip()
    if max_chars is not None:
        out = out[:max_chars].rstrip()
    return out


class DescriptionEnricher:
    def __init__(
        self,
        session,
        max_detail_fetch: int = 20,
        concurrency: int = 3,
        timeout: int = 30000,
        selector_timeout: int = 5000,
        settle_ms: int = 1500,
        max_chars: int = 4000,
        logger: Optional[logging.Logger] = None,
        events: Optional[Callable[..., None]] = None,
    ):
        self.session = session
        self.max_detail_fetch = max(0, int(max_detail_fetch))
        self.concurrency = max(1, int(concurrency))
        self.timeout = timeout
        self.selector_timeout = selector_timeout
        self.settle_ms = settle_ms
        self.max_chars = max_chars
        self.logger = logger or logging.getLogger('jobdigest.enrich')
        self.events = events or default_events

    @classmethod
    def from_settings(cls, session, settings, **kwargs) -> 'DescriptionEnricher':
        return cls(
            session,
            max_detail_fetch=settings.max_detail_fetch,
            concurrency=settings.detail_concurrency,
            timeout=settings.timeout,
            selector_timeout=settings.selector_timeout,
            settle_ms=settings.detail_settle,
            max_chars=settings.description_max_chars,
            **kwargs,
        )

    async def enrich(self, jobs: List[JobRecord], selectors: Sequence[str], label: str = '') -> int:
        """Fill ``description`` for the first ``max_detail_fetch`` jobs.

        Returns the number of records that received real text (not the sentinel).
        Records beyond the cap are left untouched.
        """
        targets = jobs[:self.max_detail_fetch]
        if not targets:
            return 0
        label = label or targets[0].source.value
        queue: asyncio.Queue[JobRecord] = asyncio.Queue()
        for job in targets:
            queue.put_nowait(job)
        counters = {'done': 0, 'ok': 0}
        start = time.time()

        async def worker():
            while True:
                try:
                    job = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                desc = await self._describe(job, selectors)
                job.description = desc
                counters['done'] += 1
                if desc != DESCRIPTION_UNAVAILABLE:
                    counters['ok'] += 1
                if counters['done'] % 5 == 0:
                    self.logger.info(f"Enriched {counters['done']}/{len(targets)} {label} jobs with descriptions")

        workers = [asyncio.create_task(worker()) for _ in range(min(self.concurrency, len(targets)))]
        await asyncio.gather(*workers)
        elapsed_ms = int((time.time() - start) * 1000)
        self.logger.info(f"Description enrichment completed for {label}: {counters['done']} items in {elapsed_ms}ms")
        self.events('enrich_complete', source=label, attempted=counters['done'], enriched=counters['ok'], elapsed_ms=elapsed_ms)
        return counters['ok']

    async def _describe(self, job: JobRecord, selectors: Sequence[str]) -> str:
        try:
            text = await self.fetch_description(job.link, selectors)
        except Exception as e:
            self.logger.warning(f"Failed to fetch job description for {job.source.value}: {job.link} - {e}")
            return DESCRIPTION_UNAVAILABLE
        return clean_text(text, self.max_chars) or DESCRIPTION_UNAVAILABLE

    async def fetch_description(self, url: str, selectors: Sequence[str]) -> str:
        """Open a fresh page, try each content selector, fall back to body text."""
        async with self.session.page() as page:
            await page.goto(url, wait_until='domcontentloaded', timeout=self.timeout)
            if self.settle_ms:
                await page.wait_for_timeout(self.settle_ms)
            for sel in selectors:
                try:
                    loc = page.locator(sel)
                    if await loc.count() == 0:
                        continue
                    text = await loc.first.inner_text(timeout=self.selector_timeout)
                except Exception:
                    self.logger.debug(f"Description selector failed: {sel}", exc_info=True)
                    continue
                if text and text.strip():
                    return text
            return await page.evaluate(BODY_TEXT_JS) or ''


__all__ = ['DescriptionEnricher', 'clean_text']
