from __future__ import annotations
from ..models import JobSource
from .base import SourceAdapter, attrs, texts


class NaukriAdapter(SourceAdapter):
    """naukri.com Delhi NCR listings.

    Naukri mixes in nationwide results, so cards are filtered against
    ``locations.primary`` unless the site config turns the filter off.
    """

    name = 'naukri'
    source = JobSource.NAUKRI
    base_url = 'https://www.naukri.com'
    search_plan = (
        ('https://www.naukri.com/jobs-in-delhi-ncr?k={q}', None),
        ('https://www.naukri.com/{q_slug}-jobs-in-delhi-ncr', 'software engineer'),
        ('https://www.naukri.com/{q_slug}-jobs-in-delhi-ncr', 'developer'),
        ('https://www.naukri.com/{q_slug}-jobs-in-delhi-ncr', 'full stack developer'),
        ('https://www.naukri.com/jobs-in-delhi-ncr?k={q}&experience=2&salary=3,00,000,15,00,000', 'software engineer'),
    )
    popup_selectors = (
        '.crossIcon',
        '.close',
        '[data-test="modal-close"]',
        '.popupCloseIcon',
        '.closeIcon',
    )
    results_selectors = (
        '.jobTuple',
        '.srp-jobtuple-wrapper',
        '[data-job-id]',
        '.jobTupleHeader',
        '.job-tuple',
    )
    card_selectors = results_selectors
    title_strategies = texts(
        '.title',
        '.jobTupleHeader .ellipsis',
        '[data-test="job-title"]',
    )
    company_strategies = texts(
        '.subTitle',
        '.comp-name',
        '.companyInfo .ellipsis',
        '[data-test="company-name"]',
    )
    location_strategies = texts(
        '.location',
        '.locWdth',
        '.locationsContainer',
        '[data-test="job-location"]',
    )
    link_strategies = attrs('href', '.title a', 'a.title', '.jobTupleHeader a')
    description_selectors = (
        '.dang-inner-html',
        '.job-description',
        '.jd-description',
        '[class*="job-desc"]',
    )
    filter_locations_default = True
    network_idle_timeout = 12000
