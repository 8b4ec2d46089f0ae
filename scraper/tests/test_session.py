import asyncio
import json
import pytest
from scraper.jobdigest.errors import SessionInitError
from scraper.jobdigest.session import LAUNCH_ARGS, LOCALE, TIMEZONE_ID, PageSession
from scraper.jobdigest.settings import ScrapingSettings


class Ctx:
    def __init__(self):
        self.added = []
        self.jar = [{'name': 'JSESSIONID', 'value': 'abc', 'domain': '.indeed.com', 'path': '/'}]
        self.pages = []

    async def add_cookies(self, cookies):
        self.added.extend(cookies)

    async def cookies(self):
        return list(self.jar)

    async def new_page(self):
        page = Page()
        self.pages.append(page)
        return page


class Page:
    closed = False

    async def close(self):
        self.closed = True


class Browser:
    def __init__(self):
        self.ctx = Ctx()
        self.context_kwargs = None
        self.closes = 0

    async def new_context(self, **kw):
        self.context_kwargs = kw
        return self.ctx

    async def close(self):
        self.closes += 1


class Chromium:
    def __init__(self, fail=False):
        self.fail = fail
        self.browser = Browser()
        self.launch_kwargs = None

    async def launch(self, **kw):
        self.launch_kwargs = kw
        if self.fail:
            raise RuntimeError("Executable doesn't exist at /ms-playwright/chromium")
        return self.browser


class Driver:
    def __init__(self, fail=False):
        self.chromium = Chromium(fail)
        self.stops = 0

    async def stop(self):
        self.stops += 1


class Manager:
    def __init__(self, driver):
        self.driver = driver

    async def start(self):
        return self.driver


def make_session(tmp_path, fail=False, headless=True):
    driver = Driver(fail)
    settings = ScrapingSettings(headless=headless, cookies_path=tmp_path / 'cookies.json')
    return PageSession(settings, playwright_factory=lambda: Manager(driver)), driver


def test_open_launches_with_regional_context(tmp_path):
    session, driver = make_session(tmp_path, headless=False)

    async def go():
        await session.open()
        assert session.is_open
        await session.close()
    asyncio.run(go())
    assert driver.chromium.launch_kwargs == {'headless': False, 'args': LAUNCH_ARGS}
    kw = driver.chromium.browser.context_kwargs
    assert kw['locale'] == LOCALE == 'en-IN'
    assert kw['timezone_id'] == TIMEZONE_ID == 'Asia/Kolkata'
    assert kw['viewport'] == {'width': 1920, 'height': 1080}
    assert kw['user_agent'].startswith('Mozilla/5.0')


def test_launch_failure_releases_driver(tmp_path):
    session, driver = make_session(tmp_path, fail=True)
    with pytest.raises(SessionInitError):
        asyncio.run(session.open())
    assert driver.stops == 1
    assert not session.is_open


def test_close_is_idempotent(tmp_path):
    session, driver = make_session(tmp_path)

    async def go():
        await session.open()
        await session.close()
        await session.close()
    asyncio.run(go())
    assert driver.chromium.browser.closes == 1
    assert driver.stops == 1
    assert not session.is_open


def test_cookies_round_trip_through_store(tmp_path):
    saved = [{'name': 'li_at', 'value': 'token', 'domain': '.linkedin.com', 'path': '/'}]
    (tmp_path / 'cookies.json').write_text(json.dumps(saved), encoding='utf-8')
    session, driver = make_session(tmp_path)

    async def go():
        await session.open()
        ok = await session.save_cookies()
        await session.close()
        return ok
    assert asyncio.run(go()) is True
    assert driver.chromium.browser.ctx.added == saved
    assert json.loads((tmp_path / 'cookies.json').read_text(encoding='utf-8')) == driver.chromium.browser.ctx.jar


def test_missing_cookie_file_is_not_an_error(tmp_path):
    session, driver = make_session(tmp_path)

    async def go():
        await session.open()
        loaded = await session.load_cookies()
        await session.close()
        return loaded
    assert asyncio.run(go()) is False
    assert driver.chromium.browser.ctx.added == []


def test_page_context_manager_closes_page(tmp_path):
    session, driver = make_session(tmp_path)

    async def go():
        await session.open()
        async with session.page() as page:
            assert not page.closed
        await session.close()
        return page
    page = asyncio.run(go())
    assert page.closed


def test_using_unopened_session_fails(tmp_path):
    session, _ = make_session(tmp_path)
    with pytest.raises(RuntimeError):
        asyncio.run(session.new_page())
