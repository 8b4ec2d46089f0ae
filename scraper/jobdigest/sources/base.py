"""Shared scrape template for browser-driven listing sites.

Each concrete adapter is pure data: where to search, which selectors mark a
results page, which selectors identify cards, and an ordered list of
``FieldStrategy`` entries per field. The base class owns the control flow:

    candidate URLs -> navigate -> settle -> dismiss popups -> auto-scroll -> probe
      -> first successful URL wins -> bounded, paced card extraction
      -> description enrichment

Site markup changes without notice, so every lookup is a fallback chain
(first non-empty match wins) and every failure below the adapter degrades to
"N/A" / fewer records instead of an exception.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, ClassVar, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import quote, quote_plus, urljoin
import asyncio
import logging
import re
from ..enrich import DescriptionEnricher
from ..logging_config import log_event as default_events
from ..models import NOT_AVAILABLE, JobRecord, JobSource, is_valid_title
from ..settings import AppConfig, SiteSettings

UNKNOWN_LOCATIONS = {'', NOT_AVAILABLE.lower(), 'unknown'}
REMOTE_HINTS = ('remote', 'work from home')
# infinite feeds keep growing scrollHeight; stop after this many steps
MAX_SCROLL_STEPS = 40

AUTO_SCROLL_JS = """
async (maxSteps) => {
  await new Promise((resolve) => {
    let totalHeight = 0;
    let steps = 0;
    const distance = 600;
    const timer = setInterval(() => {
      const scrollHeight = document.body.scrollHeight;
      window.scrollBy(0, distance);
      totalHeight += distance;
      steps += 1;
      if (totalHeight >= scrollHeight || steps >= maxSteps) {
        clearInterval(timer);
        resolve();
      }
    }, 300);
  });
}
"""


@dataclass(frozen=True)
class FieldStrategy:
    """One extraction attempt: text of the first match, or one of its attributes."""
    selector: str
    attribute: Optional[str] = None

    async def apply(self, scope, timeout: Optional[int] = None) -> Optional[str]:
        loc = scope.locator(self.selector)
        if await loc.count() == 0:
            return None
        first = loc.first
        if self.attribute:
            value = await first.get_attribute(self.attribute, timeout=timeout)
        else:
            value = await first.text_content(timeout=timeout)
        if value is None:
            return None
        value = value.strip()
        return value or None


def texts(*selectors: str) -> Tuple[FieldStrategy, ...]:
    return tuple(FieldStrategy(s) for s in selectors)


def attrs(attribute: str, *selectors: str) -> Tuple[FieldStrategy, ...]:
    return tuple(FieldStrategy(s, attribute) for s in selectors)


async def extract_field(scope, strategies: Iterable[FieldStrategy], default: str = NOT_AVAILABLE, timeout: Optional[int] = None) -> str:
    for strategy in strategies:
        try:
            value = await strategy.apply(scope, timeout=timeout)
        except Exception:
            continue
        if value:
            return value
    return default


def is_relevant_location(location: Optional[str], accepted: Sequence[str]) -> bool:
    """Unknown, remote and accepted-substring locations are relevant."""
    loc = (location or '').strip().lower()
    if loc in UNKNOWN_LOCATIONS:
        return True
    if any(h in loc for h in REMOTE_HINTS):
        return True
    return any(a and a.lower() in loc for a in accepted)


def absolute_link(link: Optional[str], base_url: str) -> str:
    link = (link or '').strip()
    if link.startswith('http://') or link.startswith('https://'):
        return link
    if not link or link == '#':
        return base_url
    return urljoin(base_url, link)


def slugify(text: str) -> str:
    return re.sub(r'[^a-z0-9]+', '-', text.lower()).strip('-')


class SourceAdapter:
    """Base adapter; subclasses fill in the class-level selector data."""

    name: ClassVar[str]
    source: ClassVar[JobSource]
    base_url: ClassVar[str]
    # (url template, fixed query or None for the candidate's primary role)
    search_plan: ClassVar[Tuple[Tuple[str, Optional[str]], ...]] = ()
    popup_selectors: ClassVar[Tuple[str, ...]] = ()
    results_selectors: ClassVar[Tuple[str, ...]] = ()
    card_selectors: ClassVar[Tuple[str, ...]] = ()
    title_strategies: ClassVar[Tuple[FieldStrategy, ...]] = ()
    company_strategies: ClassVar[Tuple[FieldStrategy, ...]] = ()
    location_strategies: ClassVar[Tuple[FieldStrategy, ...]] = ()
    link_strategies: ClassVar[Tuple[FieldStrategy, ...]] = ()
    description_selectors: ClassVar[Tuple[str, ...]] = ()
    auto_scroll: ClassVar[bool] = True
    filter_locations_default: ClassVar[bool] = False
    network_idle_timeout: ClassVar[Optional[int]] = None
    probe_timeout: ClassVar[Optional[int]] = None

    def __init__(
        self,
        config: AppConfig,
        enricher: Optional[DescriptionEnricher] = None,
        logger: Optional[logging.Logger] = None,
        events: Optional[Callable[..., None]] = None,
    ):
        self.config = config
        self.settings = config.scraping
        self.enricher = enricher
        self.logger = logger or logging.getLogger(f'jobdigest.sources.{self.name}')
        self.events = events or default_events

    @property
    def site(self) -> SiteSettings:
        return self.config.sites.get(self.name)

    def is_enabled(self) -> bool:
        return bool(self.site.enabled)

    @property
    def filters_locations(self) -> bool:
        if self.site.filter_locations is not None:
            return self.site.filter_locations
        return self.filter_locations_default

    # --- search URL plan -------------------------------------------------
    def _format(self, template: str, query: str) -> str:
        return template.format(q=quote(query, safe=''), q_plus=quote_plus(query), q_slug=slugify(query))

    def search_urls(self) -> List[str]:
        roles = self.config.user.preferred_roles
        primary = roles[0].strip() if roles and roles[0].strip() else None
        urls: List[str] = []
        for template, fixed_query in self.search_plan:
            if fixed_query is None:
                custom = self.site.search_url
                if custom:
                    # user templates may carry other braces; only {query} is substituted
                    if primary is None and '{query}' in custom:
                        continue
                    url = custom.replace('{query}', quote(primary or '', safe=''))
                elif primary is None:
                    continue
                else:
                    url = self._format(template, primary)
            else:
                url = self._format(template, fixed_query)
            if url not in urls:
                urls.append(url)
        return urls

    # --- navigation --------------------------------------------------------
    async def _settle(self, page) -> None:
        timeout = self.network_idle_timeout or self.settings.network_idle_timeout
        try:
            await page.wait_for_load_state('networkidle', timeout=timeout)
        except Exception:
            self.logger.debug(f"{self.source.value}: network did not settle, continuing")

    async def _dismiss_popups(self, page) -> None:
        for sel in self.popup_selectors:
            try:
                el = page.locator(sel).first
                if await el.is_visible():
                    await el.click()
                    await page.wait_for_timeout(1000)
            except Exception:
                continue

    async def _auto_scroll(self, page) -> None:
        try:
            await asyncio.wait_for(page.evaluate(AUTO_SCROLL_JS, MAX_SCROLL_STEPS), self.settings.timeout / 1000.0)
        except asyncio.TimeoutError:
            self.logger.debug(f"{self.source.value}: auto-scroll did not finish in {self.settings.timeout}ms, continuing")
        except Exception:
            self.logger.debug(f"{self.source.value}: auto-scroll failed", exc_info=True)

    async def _probe(self, page) -> bool:
        timeout = self.probe_timeout or self.settings.probe_timeout
        try:
            await page.locator(', '.join(self.results_selectors)).first.wait_for(state='visible', timeout=timeout)
            return True
        except Exception:
            return False

    async def navigate(self, page) -> Optional[str]:
        """Visit candidate URLs in order; return the first that shows results."""
        for url in self.search_urls():
            try:
                await page.goto(url, wait_until='domcontentloaded', timeout=self.settings.timeout)
                await self._settle(page)
                await self._dismiss_popups(page)
                if self.auto_scroll:
                    await self._auto_scroll(page)
                if await self._probe(page):
                    return url
                self.logger.warning(f"{self.source.value} URL failed: {url}")
            except Exception as e:
                self.logger.warning(f"{self.source.value} URL error: {url} - {e}")
        return None

    # --- extraction ----------------------------------------------------------
    async def _pace(self) -> None:
        delay = self.settings.delay_between_requests / 1000.0
        if delay > 0:
            await asyncio.sleep(delay)

    async def extract_card(self, card) -> Optional[JobRecord]:
        timeout = self.settings.selector_timeout
        title = await extract_field(card, self.title_strategies, timeout=timeout)
        if not is_valid_title(title):
            return None
        location = await extract_field(card, self.location_strategies, timeout=timeout)
        if self.filters_locations and not is_relevant_location(location, self.config.locations.primary):
            self.logger.debug(f"{self.source.value}: skipping '{title}' at '{location}' (location filter)")
            return None
        company = await extract_field(card, self.company_strategies, timeout=timeout)
        link = await extract_field(card, self.link_strategies, default='', timeout=timeout)
        return JobRecord(
            title=title,
            company=company,
            location=location,
            link=absolute_link(link, self.base_url),
            source=self.source,
        )

    async def extract(self, page, into: List[JobRecord]) -> List[JobRecord]:
        """Append extracted records to ``into`` (kept on failure as partial output)."""
        cards = await page.locator(', '.join(self.card_selectors)).all()
        limit = min(len(cards), self.settings.max_jobs_per_site)
        self.logger.info(f"Found {len(cards)} job cards on {self.source.value}")
        for i in range(limit):
            try:
                job = await self.extract_card(cards[i])
                if job is not None:
                    into.append(job)
            except Exception as e:
                self.logger.warning(f"Error scraping {self.source.value} job {i}: {e}")
            if i < limit - 1:
                await self._pace()
        return into

    async def scrape(self, session) -> List[JobRecord]:
        jobs: List[JobRecord] = []
        if not self.is_enabled():
            return jobs
        self.logger.info(f"Starting {self.source.value} scraping...")
        self.events('adapter_start', source=self.source.value)
        try:
            async with session.page() as page:
                url = await self.navigate(page)
                if url is None:
                    self.logger.warning(f"No job listings found on {self.source.value}; skipping")
                    self.events('adapter_no_results', source=self.source.value)
                    return jobs
                await self.extract(page, jobs)
        except Exception as e:
            self.logger.error(f"{self.source.value} scraping failed: {e}")
            self.events('adapter_failed', source=self.source.value, message=str(e), partial=len(jobs))
        if jobs:
            enricher = self.enricher or DescriptionEnricher.from_settings(session, self.settings, logger=self.logger, events=self.events)
            try:
                await enricher.enrich(jobs, self.description_selectors, label=self.source.value)
            except Exception as e:
                self.logger.warning(f"{self.source.value} description enrichment failed: {e}")
        self.logger.info(f"{self.source.value} scraping completed: {len(jobs)} jobs found")
        self.events('adapter_complete', source=self.source.value, jobs=len(jobs))
        return jobs


__all__ = [
    'FieldStrategy', 'SourceAdapter', 'texts', 'attrs', 'extract_field',
    'is_relevant_location', 'absolute_link', 'slugify', 'AUTO_SCROLL_JS', 'MAX_SCROLL_STEPS',
]
