"""Job digest scraper package public API."""
from importlib import metadata as _metadata

try:
    __version__ = _metadata.version("job-digest-scraper")
except Exception:  # fallback when not installed
    __version__ = "0.1.0"

from .jobdigest.aggregator import Aggregator, scrape_all_sites  # re-export
from .jobdigest.models import JobRecord  # re-export

__all__ = ["__version__", "Aggregator", "scrape_all_sites", "JobRecord"]
