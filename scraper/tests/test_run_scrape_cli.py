import json
import pytest
from scraper.jobdigest.errors import AggregationError
from scraper.jobdigest.models import JobRecord, JobSource
from scraper.scripts import run_scrape


class StubAggregator:
    jobs = []
    error = None
    seen_config = None

    def __init__(self, config, logger=None):
        StubAggregator.seen_config = config

    async def scrape_all_sites(self):
        if self.error:
            raise self.error
        return list(self.jobs)


@pytest.fixture
def cfg_file(tmp_path, monkeypatch):
    monkeypatch.setattr(run_scrape, 'Aggregator', StubAggregator)
    monkeypatch.setattr(StubAggregator, 'jobs', [])
    monkeypatch.setattr(StubAggregator, 'error', None)
    p = tmp_path / 'settings.yml'
    p.write_text(f"scraping:\n  data_dir: {tmp_path.as_posix()}\nuser:\n  preferred_roles: [Backend Engineer]\n", encoding='utf-8')
    return p


def test_writes_output_and_history(cfg_file, tmp_path):
    StubAggregator.jobs = [JobRecord(title='SDE', company='Acme', source=JobSource.LINKEDIN, link='https://www.linkedin.com')]
    out = tmp_path / 'out' / 'jobs.json'
    assert run_scrape.main(['--config', str(cfg_file), '--output', str(out), '--max-jobs', '3', '--headless']) == 0
    assert json.loads(out.read_text(encoding='utf-8'))[0]['title'] == 'SDE'
    assert StubAggregator.seen_config.scraping.max_jobs_per_site == 3
    assert StubAggregator.seen_config.scraping.headless is True
    assert (out.parent / 'run_history.jsonl').exists()


def test_default_output_goes_to_data_dir(cfg_file, tmp_path):
    assert run_scrape.main(['--config', str(cfg_file)]) == 0
    assert json.loads((tmp_path / 'raw-jobs.json').read_text(encoding='utf-8')) == []


def test_session_failure_exit_code(cfg_file, tmp_path):
    StubAggregator.error = AggregationError('Could not start browser session')
    assert run_scrape.main(['--config', str(cfg_file)]) == 1
    rec = json.loads((tmp_path / 'run_history.jsonl').read_text(encoding='utf-8').splitlines()[-1])
    assert rec['jobs_scraped'] == 0 and 'browser' in rec['error']


def test_bad_config_exit_code(tmp_path):
    p = tmp_path / 'bad.yml'
    p.write_text("scraping: {detail_concurrency: 0}\n", encoding='utf-8')
    assert run_scrape.main(['--config', str(p)]) == 2
