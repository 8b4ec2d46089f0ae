"""Multi-source job scraping and description enrichment."""
from .aggregator import Aggregator, scrape_all_sites
from .errors import AggregationError, ConfigError, ScraperError, SessionInitError
from .models import JobRecord, JobSource
from .settings import AppConfig, load_config

__all__ = [
    'Aggregator', 'scrape_all_sites', 'AggregationError', 'ConfigError', 'ScraperError',
    'SessionInitError', 'JobRecord', 'JobSource', 'AppConfig', 'load_config',
]
