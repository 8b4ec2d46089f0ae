"""Browser-driven listing-site adapters.

The set of adapters is closed and ordered; that order is the tie-break for
duplicate postings found on several sites.
"""
from __future__ import annotations
from typing import Callable, List, Optional
import logging
from ..enrich import DescriptionEnricher
from ..settings import AppConfig
from .base import SourceAdapter
from .indeed import IndeedAdapter
from .linkedin import LinkedInAdapter
from .naukri import NaukriAdapter

ADAPTER_CLASSES = (LinkedInAdapter, IndeedAdapter, NaukriAdapter)


def build_adapters(
    config: AppConfig,
    enricher: Optional[DescriptionEnricher] = None,
    logger: Optional[logging.Logger] = None,
    events: Optional[Callable[..., None]] = None,
) -> List[SourceAdapter]:
    return [cls(config, enricher=enricher, logger=logger, events=events) for cls in ADAPTER_CLASSES]


__all__ = ['ADAPTER_CLASSES', 'build_adapters', 'SourceAdapter', 'LinkedInAdapter', 'IndeedAdapter', 'NaukriAdapter']
