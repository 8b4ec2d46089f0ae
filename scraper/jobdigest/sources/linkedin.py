"""LinkedIn public job search (guest view).

The guest search page renders ``base-search-card`` items without login; the
logged-in layout uses ``job-card-container``. Both are covered by the
selector chains below.
"""
from __future__ import annotations
from ..models import JobSource
from .base import SourceAdapter, attrs, texts


class LinkedInAdapter(SourceAdapter):
    name = 'linkedin'
    source = JobSource.LINKEDIN
    base_url = 'https://www.linkedin.com'
    search_plan = (
        ('https://www.linkedin.com/jobs/search?keywords={q}&location=Delhi%2C%20India&geoId=102713980&f_TPR=r604800&position=1&pageNum=0', None),
        ('https://www.linkedin.com/jobs/search?keywords={q}&location=Delhi%2C%20India&f_TPR=r604800', 'software engineer'),
        ('https://www.linkedin.com/jobs/search?keywords={q}&location=India&f_TPR=r604800', 'developer'),
    )
    results_selectors = (
        '.jobs-search__results-list',
        '.job-card-container',
        '.base-search-card',
        '.job-search-card',
    )
    card_selectors = (
        '.job-card-container',
        '.jobs-search-results__list-item',
        '.job-card-list__entity',
        '.base-search-card',
        '.job-search-card',
    )
    title_strategies = texts(
        'h3 a',
        'h3.base-search-card__title',
        '.job-card-list__title',
        '.job-card-container__link',
    )
    company_strategies = texts(
        '.job-card-container__company-name',
        '.job-card-list__company-name',
        'h4.base-search-card__subtitle',
    )
    location_strategies = texts(
        '.job-card-container__metadata-item',
        '.job-card-list__metadata',
        '.job-search-card__location',
    )
    link_strategies = attrs('href', 'a.base-card__full-link', 'a')
    description_selectors = (
        '.show-more-less-html__markup',
        '.jobs-description__content',
        '[data-test-job-description-text]',
        '[class*="description"]',
    )
