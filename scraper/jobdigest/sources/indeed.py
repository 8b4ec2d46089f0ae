from __future__ import annotations
from ..models import JobSource
from .base import SourceAdapter, attrs, texts


class IndeedAdapter(SourceAdapter):
    """in.indeed.com search results, newest first, past seven days."""

    name = 'indeed'
    source = JobSource.INDEED
    base_url = 'https://in.indeed.com'
    search_plan = (
        ('https://in.indeed.com/jobs?q={q_plus}&l=Delhi%2C+Delhi&fromage=7&sort=date', None),
        ('https://in.indeed.com/jobs?q={q_plus}&l=Delhi%2C+Delhi&fromage=7&sort=date', 'software engineer'),
        ('https://in.indeed.com/jobs?q={q_plus}&l=Delhi%2C+Delhi&fromage=7&sort=date', 'developer'),
        ('https://in.indeed.com/jobs?q={q_plus}&l=Delhi%2C+Delhi&fromage=7&sort=date', 'full stack developer'),
        ('https://in.indeed.com/jobs?q={q_plus}&l=India&fromage=7&sort=date', 'software engineer'),
    )
    popup_selectors = (
        '[data-testid="popup-close-button"]',
        '.popover-x-button-close',
        '.icl-CloseButton',
    )
    results_selectors = (
        '.job_seen_beacon',
        '.slider_container',
        '[data-jk]',
        '.jobsearch-SerpJobCard',
        '.result',
    )
    card_selectors = (
        '.jobsearch-SerpJobCard',
        '[data-testid="job-tile"]',
        '.job_seen_beacon',
        '.slider_container .slider_item',
    )
    title_strategies = texts(
        'h2 a span',
        '.jobTitle a span',
        '[data-testid="job-title"]',
        'h2 a',
        '.jobTitle a',
    ) + attrs('aria-label', 'a[data-jk]')
    company_strategies = texts(
        '[data-testid="company-name"]',
        '.companyName',
        'span[title]',
    )
    location_strategies = texts(
        '[data-testid="job-location"]',
        '.companyLocation',
        '.locationsContainer',
    )
    link_strategies = attrs('href', 'h2 a', '.jobTitle a', 'a[data-jk]')
    description_selectors = (
        '#jobDescriptionText',
        '.jobsearch-jobDescriptionText',
        '[id="jobDescriptionText"]',
    )
    auto_scroll = False
    probe_timeout = 8000
