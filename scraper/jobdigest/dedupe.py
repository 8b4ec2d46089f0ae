"""Cross-source duplicate removal.

Two records are the same posting when their (title, company) pair matches
case-insensitively. Location and source are not part of the key, so the same
role listed on two sites collapses to the record from the earlier adapter in
concatenation order.
"""
from __future__ import annotations
from typing import Iterable, List, Set, Tuple
from .models import JobRecord


def dedupe_jobs(jobs: Iterable[JobRecord]) -> List[JobRecord]:
    """Keep the first record per dedup key, preserving input order."""
    seen: Set[Tuple[str, str]] = set()
    out: List[JobRecord] = []
    for job in jobs:
        key = job.dedup_key
        if key in seen:
            continue
        seen.add(key)
        out.append(job)
    return out


__all__ = ['dedupe_jobs']
