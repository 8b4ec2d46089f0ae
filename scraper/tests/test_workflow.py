import json
import pytest
from fakes import make_config
from scraper.jobdigest.models import DeliveryResult, JobRecord, JobSource, ScoredJob
from scraper.jobdigest.workflow import (
    HISTORY_FILE, RAW_JOBS_FILE, WORKFLOW_RESULT_FILE, DeliveryError, JobScorer, ReportSender, run_workflow, summarize,
)


def job(title, company='Acme'):
    return JobRecord(title=title, company=company, source=JobSource.LINKEDIN, link='https://www.linkedin.com/jobs/view/1')


class KeywordScorer:
    def analyze(self, job):
        score = 9 if 'Backend' in job.title else 3
        return ScoredJob(job=job, relevance_score=score, commentary={'reason': 'keyword'})


class RecordingSender:
    def __init__(self, result=None):
        self.sent = []
        self.result = result or DeliveryResult(success=True, message_id='msg-1')

    def send(self, jobs, summary):
        self.sent.append((list(jobs), summary))
        return self.result


def test_stubs_satisfy_protocols():
    assert isinstance(KeywordScorer(), JobScorer)
    assert isinstance(RecordingSender(), ReportSender)


def test_relevant_jobs_are_reported(tmp_path):
    sender = RecordingSender()
    jobs = [job('Backend Engineer'), job('Sales Associate', 'Globex')]
    result = run_workflow(make_config(), KeywordScorer(), sender, data_dir=tmp_path, scrape=lambda: jobs)
    assert result['jobs_scraped'] == 2
    assert result['email_sent'] is True and result['message_id'] == 'msg-1'
    assert [s['job']['title'] for s in result['relevant_jobs']] == ['Backend Engineer']
    sent_jobs, summary = sender.sent[0]
    assert summary['relevant_count'] == 1 and summary['average_score'] == 6.0
    assert len(json.loads((tmp_path / RAW_JOBS_FILE).read_text(encoding='utf-8'))) == 2
    assert json.loads((tmp_path / WORKFLOW_RESULT_FILE).read_text(encoding='utf-8'))['email_sent'] is True
    assert len((tmp_path / HISTORY_FILE).read_text(encoding='utf-8').splitlines()) == 1


def test_no_jobs_stops_early(tmp_path):
    sender = RecordingSender()
    result = run_workflow(make_config(), KeywordScorer(), sender, data_dir=tmp_path, scrape=lambda: [])
    assert result['jobs_scraped'] == 0 and result['email_sent'] is False
    assert sender.sent == []
    assert not (tmp_path / WORKFLOW_RESULT_FILE).exists()


def test_no_relevant_jobs_skips_report_unless_configured(tmp_path):
    jobs = [job('Sales Associate')]
    quiet = RecordingSender()
    assert run_workflow(make_config(), KeywordScorer(), quiet, data_dir=tmp_path, scrape=lambda: jobs)['email_sent'] is False
    assert quiet.sent == []
    loud = RecordingSender()
    cfg = make_config(reporting={'send_empty_reports': True})
    assert run_workflow(cfg, KeywordScorer(), loud, data_dir=tmp_path, scrape=lambda: jobs)['email_sent'] is True
    assert loud.sent[0][0] == []


def test_delivery_failure_raises_and_is_recorded(tmp_path):
    sender = RecordingSender(DeliveryResult(success=False, error='SMTP auth failed'))
    with pytest.raises(DeliveryError):
        run_workflow(make_config(), KeywordScorer(), sender, data_dir=tmp_path, scrape=lambda: [job('Backend Engineer')])
    rec = json.loads((tmp_path / HISTORY_FILE).read_text(encoding='utf-8').splitlines()[-1])
    assert rec['error'] == 'SMTP auth failed'


def test_summarize_counts_companies_and_fallbacks():
    scored = [
        ScoredJob(job=job('A', 'Acme'), relevance_score=8),
        ScoredJob(job=job('B', 'Acme'), relevance_score=7),
        ScoredJob(job=job('C', 'Initech'), relevance_score=1, fallback=True),
    ]
    s = summarize(scored, scored[:2])
    assert s['total_jobs'] == 3 and s['relevant_count'] == 2
    assert s['fallback_count'] == 1
    assert s['top_companies'] == ['Acme']
    assert summarize([], [])['average_score'] == 0.0
