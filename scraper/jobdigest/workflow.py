"""Scrape -> score -> report, with the scorer and sender supplied by the caller.

The relevance scorer and the report sender live outside this package; they are
described here only by the protocols the runner calls.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, runtime_checkable
from datetime import datetime, timezone
import json
import logging
from .aggregator import scrape_all_sites
from .errors import ScraperError
from .history import append_history, write_jobs_json
from .models import DeliveryResult, JobRecord, ScoredJob
from .settings import AppConfig

RAW_JOBS_FILE = 'raw-jobs.json'
WORKFLOW_RESULT_FILE = 'workflow-result.json'
HISTORY_FILE = 'run_history.jsonl'


class DeliveryError(ScraperError):
    pass


@runtime_checkable
class JobScorer(Protocol):
    def analyze(self, job: JobRecord) -> ScoredJob:  # pragma: no cover - interface definition
        ...


@runtime_checkable
class ReportSender(Protocol):
    def send(self, jobs: Sequence[ScoredJob], summary: Dict[str, Any]) -> DeliveryResult:  # pragma: no cover
        ...


def summarize(scored: List[ScoredJob], relevant: List[ScoredJob]) -> Dict[str, Any]:
    avg = round(sum(s.relevance_score for s in scored) / len(scored), 2) if scored else 0.0
    companies: Dict[str, int] = {}
    for s in relevant:
        companies[s.job.company] = companies.get(s.job.company, 0) + 1
    top = sorted(companies.items(), key=lambda kv: (-kv[1], kv[0]))[:5]
    return {
        'total_jobs': len(scored),
        'relevant_count': len(relevant),
        'average_score': avg,
        'fallback_count': sum(1 for s in scored if s.fallback),
        'top_companies': [c for c, _ in top],
    }


def run_workflow(
    config: AppConfig,
    scorer: JobScorer,
    sender: ReportSender,
    data_dir: Optional[Path] = None,
    scrape: Optional[Callable[[], List[JobRecord]]] = None,
    logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """Run one full pass and return the workflow result written to disk."""
    logger = logger or logging.getLogger('jobdigest.workflow')
    data_dir = Path(data_dir or config.scraping.data_dir)
    jobs = scrape() if scrape is not None else scrape_all_sites(config, logger=logger)
    write_jobs_json(jobs, data_dir / RAW_JOBS_FILE)
    logger.info(f"Scraped {len(jobs)} unique jobs")
    if not jobs:
        logger.warning('No jobs found to analyze')
        result = {'jobs_scraped': 0, 'relevant_jobs': [], 'analysis_summary': summarize([], []), 'email_sent': False}
        append_history({'jobs_scraped': 0, 'relevant': 0}, data_dir / HISTORY_FILE)
        return result

    scored: List[ScoredJob] = []
    for job in jobs:
        scored.append(scorer.analyze(job))
    threshold = config.reporting.min_relevance_score
    relevant = [s for s in scored if s.relevance_score >= threshold]
    summary = summarize(scored, relevant)
    logger.info(f"Relevant jobs: {len(relevant)}/{len(jobs)}")

    email_sent = False
    message_id = None
    if relevant or config.reporting.send_empty_reports:
        delivery = sender.send(relevant, summary)
        if not delivery.success:
            append_history({'jobs_scraped': len(jobs), 'relevant': len(relevant), 'error': delivery.error}, data_dir / HISTORY_FILE)
            raise DeliveryError(f"Report delivery failed: {delivery.error}")
        email_sent = True
        message_id = delivery.message_id
        logger.info(f"Report sent. Message ID: {message_id}")
    else:
        logger.warning('No relevant jobs found. Skipping report (empty reports disabled).')

    result = {
        'jobs_scraped': len(jobs),
        'relevant_jobs': [s.model_dump(mode='json') for s in relevant],
        'analysis_summary': summary,
        'email_sent': email_sent,
        'message_id': message_id,
        'workflow_completed_at': datetime.now(timezone.utc).isoformat(),
    }
    (data_dir / WORKFLOW_RESULT_FILE).write_text(json.dumps(result, ensure_ascii=False, indent=2), encoding='utf-8')
    append_history({
        'jobs_scraped': len(jobs),
        'relevant': len(relevant),
        'average_score': summary['average_score'],
        'email_sent': email_sent,
    }, data_dir / HISTORY_FILE)
    return result


__all__ = ['JobScorer', 'ReportSender', 'DeliveryError', 'run_workflow', 'summarize']
