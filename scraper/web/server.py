from __future__ import annotations
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from datetime import datetime, timezone
from pathlib import Path
import json
import logging
import os
import time

# Internal imports
from scraper.jobdigest.aggregator import Aggregator
from scraper.jobdigest.errors import AggregationError, ConfigError
from scraper.jobdigest.history import append_history, write_jobs_json
from scraper.jobdigest.settings import AppConfig, load_config
from scraper.jobdigest.workflow import HISTORY_FILE, RAW_JOBS_FILE

app = FastAPI(title="Job Digest Scraper")
logger = logging.getLogger('jobdigest.web')

CONFIG_PATH = os.environ.get('SCRAPER_CONFIG')

_CONFIG: AppConfig | None = None


def get_config() -> AppConfig:
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config(Path(CONFIG_PATH) if CONFIG_PATH else None)
    return _CONFIG


def _config_or_500() -> AppConfig:
    try:
        return get_config()
    except ConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))


def _raw_jobs_path(cfg: AppConfig) -> Path:
    return Path(cfg.scraping.data_dir) / RAW_JOBS_FILE


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/config")
def config_view():
    cfg = _config_or_500()
    scraping = cfg.scraping
    return {
        "sites": {name: getattr(cfg.sites, name).enabled for name in ("linkedin", "indeed", "naukri")},
        "scraping": {
            "headless": scraping.headless,
            "max_jobs_per_site": scraping.max_jobs_per_site,
            "delay_between_requests": scraping.delay_between_requests,
            "max_detail_fetch": scraping.max_detail_fetch,
            "detail_concurrency": scraping.detail_concurrency,
            "timeout": scraping.timeout,
        },
        "locations": list(cfg.locations.primary),
        "preferred_roles": list(cfg.user.preferred_roles),
    }


@app.post("/api/scrape")
async def scrape():
    cfg = _config_or_500()
    started = time.time()
    try:
        jobs = await Aggregator(cfg, logger=logger).scrape_all_sites()
    except AggregationError as e:
        logger.error(f"Scrape failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    write_jobs_json(jobs, _raw_jobs_path(cfg))
    elapsed = round(time.time() - started, 2)
    append_history({'jobs_scraped': len(jobs), 'elapsed_s': elapsed, 'trigger': 'api'}, Path(cfg.scraping.data_dir) / HISTORY_FILE)
    if not jobs:
        logger.warning('No jobs found during scraping')
    return {"success": True, "count": len(jobs), "elapsed_s": elapsed, "jobs": [j.to_json() for j in jobs]}


@app.get("/api/results/latest")
def latest_results():
    path = _raw_jobs_path(_config_or_500())
    if not path.exists():
        raise HTTPException(status_code=404, detail="No results yet")
    try:
        jobs = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError:
        raise HTTPException(status_code=500, detail="Results file is corrupt")
    return JSONResponse({"count": len(jobs), "jobs": jobs, "modified": datetime.fromtimestamp(path.stat().st_mtime, timezone.utc).isoformat()})


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host="127.0.0.1", port=port)
