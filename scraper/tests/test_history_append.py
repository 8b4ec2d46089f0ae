from pathlib import Path
import tempfile, json
from scraper.jobdigest.history import append_history, write_jobs_json
from scraper.jobdigest.models import JobRecord, JobSource


def test_history_append_increments_lines():
    with tempfile.TemporaryDirectory() as td:
        history = Path(td) / 'hist.jsonl'
        summary = {'jobs_scraped': 3, 'trigger': 'cli'}
        assert append_history(summary, history)
        append_history(summary, history)
        lines = history.read_text(encoding='utf-8').strip().splitlines()
        assert len(lines) == 2
        rec = json.loads(lines[0])
        assert 'timestamp_utc' in rec
        assert rec['jobs_scraped'] == 3


def test_history_append_failure_is_non_fatal(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('', encoding='utf-8')
    assert append_history({'jobs_scraped': 0}, blocker / 'hist.jsonl') is False


def test_write_jobs_json(tmp_path):
    jobs = [JobRecord(title='SDE II', company='Acme', source=JobSource.NAUKRI, link='https://www.naukri.com/job-listings-2')]
    out = write_jobs_json(jobs, tmp_path / 'data' / 'raw-jobs.json')
    data = json.loads(out.read_text(encoding='utf-8'))
    assert data[0]['title'] == 'SDE II'
    assert data[0]['source'] == 'Naukri'
    assert data[0]['location'] == 'N/A'
