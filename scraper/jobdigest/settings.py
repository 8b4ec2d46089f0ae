"""Typed configuration with YAML file + environment overlay.

The file lives at ``scraper/config/settings.yml`` by default. Environment
variables override the scraping knobs (useful for CI or one-off runs):

    SCRAPER_HEADLESS=0 SCRAPER_MAX_JOBS_PER_SITE=5 python -m scraper.scripts.run_scrape

The resulting ``AppConfig`` is passed explicitly to the aggregator, adapters
and enricher; nothing in the pipeline reads a module-level settings object.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional
import os
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from .errors import ConfigError

CONFIG_DIR = Path(__file__).resolve().parent.parent / 'config'
DEFAULT_CONFIG_FILE = CONFIG_DIR / 'settings.yml'
DATA_DIR = Path(__file__).resolve().parent.parent / 'data'

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class ScrapingSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    max_jobs_per_site: int = 25
    delay_between_requests: int = 1500  # ms between card extractions
    max_detail_fetch: int = 20
    detail_concurrency: int = 3
    timeout: int = 30000  # ms, navigation
    network_idle_timeout: int = 10000
    probe_timeout: int = 5000
    selector_timeout: int = 5000
    detail_settle: int = 1500  # ms to let a detail page render before reading it
    description_max_chars: int = 4000
    cookies_path: Path = DATA_DIR / 'cookies.json'
    data_dir: Path = DATA_DIR

    @field_validator('detail_concurrency')
    @classmethod
    def _at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError('must be >= 1')
        return v

    @field_validator('max_jobs_per_site', 'max_detail_fetch', 'delay_between_requests', 'timeout',
                     'network_idle_timeout', 'probe_timeout', 'selector_timeout', 'detail_settle',
                     'description_max_chars')
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError('must be >= 0')
        return v


class SiteSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    search_url: Optional[str] = None  # may contain {query}
    filter_locations: Optional[bool] = None  # None -> adapter default


class SitesSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    linkedin: SiteSettings = SiteSettings()
    indeed: SiteSettings = SiteSettings()
    naukri: SiteSettings = SiteSettings()

    def get(self, name: str) -> SiteSettings:
        return getattr(self, name, None) or SiteSettings(enabled=False)


class LocationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: List[str] = Field(default_factory=lambda: ['Delhi', 'Noida', 'Gurgaon', 'Gurugram', 'NCR'])


class UserSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    preferred_roles: List[str] = Field(default_factory=list)


class ReportingSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_relevance_score: float = 6.0
    send_empty_reports: bool = False


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    scraping: ScrapingSettings = ScrapingSettings()
    sites: SitesSettings = SitesSettings()
    locations: LocationSettings = LocationSettings()
    user: UserSettings = UserSettings()
    reporting: ReportingSettings = ReportingSettings()


def _env_bool(name: str) -> Optional[bool]:
    v = os.getenv(name)
    if v is None:
        return None
    v = v.strip().lower()
    if v in ('1', 'true', 'yes', 'on'):
        return True
    if v in ('0', 'false', 'no', 'off'):
        return False
    return None


def _env_int(name: str) -> Optional[int]:
    v = os.getenv(name)
    if v is None:
        return None
    try:
        return int(v)
    except ValueError:
        return None


_ENV_INT_KEYS = {
    'SCRAPER_MAX_JOBS_PER_SITE': 'max_jobs_per_site',
    'SCRAPER_DELAY_MS': 'delay_between_requests',
    'SCRAPER_MAX_DETAIL_FETCH': 'max_detail_fetch',
    'SCRAPER_DETAIL_CONCURRENCY': 'detail_concurrency',
    'SCRAPER_TIMEOUT_MS': 'timeout',
    'SCRAPER_DETAIL_SETTLE_MS': 'detail_settle',
}


def _apply_env(scraping: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(scraping)
    headless = _env_bool('SCRAPER_HEADLESS')
    if headless is not None:
        out['headless'] = headless
    for env_name, key in _ENV_INT_KEYS.items():
        v = _env_int(env_name)
        if v is not None:
            out[key] = v
    cookies = os.getenv('SCRAPER_COOKIES_PATH')
    if cookies:
        out['cookies_path'] = Path(cookies)
    return out


def config_from_dict(raw: Dict[str, Any] | None, apply_env: bool = True) -> AppConfig:
    raw = dict(raw or {})
    if apply_env:
        raw['scraping'] = _apply_env(raw.get('scraping') or {})
    try:
        return AppConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Path | None = None, apply_env: bool = True) -> AppConfig:
    cfg_file = Path(path) if path else DEFAULT_CONFIG_FILE
    raw: Dict[str, Any] = {}
    if cfg_file.exists():
        try:
            raw = yaml.safe_load(cfg_file.read_text(encoding='utf-8')) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {cfg_file}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{cfg_file} must contain a mapping at top level")
    return config_from_dict(raw, apply_env=apply_env)


__all__ = [
    'AppConfig', 'ScrapingSettings', 'SiteSettings', 'SitesSettings', 'LocationSettings',
    'UserSettings', 'ReportingSettings', 'config_from_dict', 'load_config',
]
