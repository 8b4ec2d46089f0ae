"""Scrape all enabled job sites once and write the merged list as JSON.

Usage:
  python -m scraper.scripts.run_scrape --headless
  python scraper/scripts/run_scrape.py --config my_settings.yml --max-jobs 10 --output data/raw-jobs.json
"""
from __future__ import annotations
from pathlib import Path
import sys
import argparse
import asyncio
import logging
import time

# Ensure project root is on path when executing this file directly
ROOT = Path(__file__).resolve().parent.parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scraper.jobdigest.aggregator import Aggregator
from scraper.jobdigest.errors import AggregationError, ConfigError
from scraper.jobdigest.history import append_history, write_jobs_json
from scraper.jobdigest.logging_config import setup_logging, log_event
from scraper.jobdigest.settings import load_config
from scraper.jobdigest.workflow import HISTORY_FILE, RAW_JOBS_FILE


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument('--config', type=Path, help='Settings YAML (default scraper/config/settings.yml)')
    ap.add_argument('--debug', action='store_true', help='Enable debug logging')
    ap.add_argument('--headless', action='store_true', default=None, help='Force headless browser')
    ap.add_argument('--max-jobs', type=int, help='Override scraping.max_jobs_per_site')
    ap.add_argument('--output', type=Path, help='Output JSON path (default <data_dir>/raw-jobs.json)')
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug)
    logger = logging.getLogger('jobdigest.cli')
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(str(e))
        return 2
    overrides = {}
    if args.headless:
        overrides['headless'] = True
    if args.max_jobs is not None:
        overrides['max_jobs_per_site'] = args.max_jobs
    if overrides:
        cfg = cfg.model_copy(update={'scraping': cfg.scraping.model_copy(update=overrides)})
    out_path = args.output or Path(cfg.scraping.data_dir) / RAW_JOBS_FILE
    started = time.time()
    try:
        jobs = asyncio.run(Aggregator(cfg, logger=logger).scrape_all_sites())
    except AggregationError as e:
        logger.error(f"Scraping failed: {e}")
        append_history({'jobs_scraped': 0, 'error': str(e)}, out_path.parent / HISTORY_FILE)
        return 1
    write_jobs_json(jobs, out_path)
    elapsed = round(time.time() - started, 2)
    logger.info(f"Scraped {len(jobs)} unique jobs -> {out_path} ({elapsed}s)")
    log_event('run_complete', jobs=len(jobs), output=str(out_path), elapsed_s=elapsed)
    append_history({'jobs_scraped': len(jobs), 'elapsed_s': elapsed, 'trigger': 'cli'}, out_path.parent / HISTORY_FILE)
    return 0


if __name__ == '__main__':
    sys.exit(main())
