import json
from scraper.jobdigest.cookies import CookieStore


def test_missing_file_returns_none(tmp_path):
    assert CookieStore(tmp_path / 'none.json').load() is None


def test_corrupt_file_returns_none(tmp_path):
    p = tmp_path / 'cookies.json'
    p.write_text('{not json', encoding='utf-8')
    assert CookieStore(p).load() is None


def test_non_list_payload_is_ignored(tmp_path):
    p = tmp_path / 'cookies.json'
    p.write_text(json.dumps({'name': 'a'}), encoding='utf-8')
    assert CookieStore(p).load() is None


def test_save_then_load(tmp_path):
    store = CookieStore(tmp_path / 'nested' / 'cookies.json')
    cookies = [{'name': 'NID', 'value': '1', 'domain': '.naukri.com', 'path': '/'}]
    assert store.save(cookies) is True
    assert store.load() == cookies


def test_save_failure_returns_false(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('', encoding='utf-8')
    assert CookieStore(blocker / 'cookies.json').save([]) is False
