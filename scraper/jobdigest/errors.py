"""Exception types surfaced by the scraping pipeline.

Only session establishment failures reach the caller. Everything below the
session (adapters, cards, description fetches, cookies) degrades to partial
data and is logged instead.
"""
from __future__ import annotations


class ScraperError(Exception):
    """Base error for the job digest scraper."""


class ConfigError(ScraperError):
    pass


class SessionInitError(ScraperError):
    """Browser process or context could not be created."""


class AggregationError(ScraperError):
    """Raised by the aggregator when no session could be opened."""


__all__ = ['ScraperError', 'ConfigError', 'SessionInitError', 'AggregationError']
