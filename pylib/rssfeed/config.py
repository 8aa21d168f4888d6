'''Configuration: feed URLs, refresh interval, page size. Loaded from env / .env.'''

import os
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from dotenv import dotenv_values

from rssfeed.errors import ConfigError
from rssfeed.models import Source


logger = structlog.get_logger()

FEEDS_LIST_KEY = 'RSS_FEEDS_LIST'
UPDATE_INTERVAL_KEY = 'RSS_UPDATE_INTERVAL'
ITEMS_VISIBLE_KEY = 'RSS_ITEMS_VISIBLE'
FETCH_TIMEOUT_KEY = 'RSS_FETCH_TIMEOUT'

DEFAULT_UPDATE_INTERVAL = 5  # minutes
DEFAULT_ITEMS_VISIBLE = 5
DEFAULT_FETCH_TIMEOUT = 30.0  # seconds


@dataclass(frozen=True)
class FeedConfig:
    '''Validated feed settings. Replaced wholesale on every settings change.'''

    source_urls: tuple[str, ...] = ()
    refresh_interval_minutes: int = DEFAULT_UPDATE_INTERVAL
    items_visible_per_page: int = DEFAULT_ITEMS_VISIBLE
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    sources: tuple[Source, ...] = field(init=False, repr=False, compare=False)
    effective_timeout: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        urls = self.source_urls
        if isinstance(urls, str):
            # Same whitespace-separated form as RSS_FEEDS_LIST
            urls = urls.split()
        object.__setattr__(self, 'source_urls', tuple(u.strip() for u in urls if u.strip()))
        if self.refresh_interval_minutes <= 0:
            raise ConfigError(f'refresh interval must be positive, got {self.refresh_interval_minutes}')
        if self.items_visible_per_page <= 0:
            raise ConfigError(f'items visible per page must be positive, got {self.items_visible_per_page}')
        if self.fetch_timeout <= 0:
            raise ConfigError(f'fetch timeout must be positive, got {self.fetch_timeout}')
        object.__setattr__(self, 'sources', tuple(Source.from_url(u) for u in self.source_urls))
        # Fetch deadline, kept below the refresh interval so cycles don't pile up
        timeout = self.fetch_timeout
        if timeout >= self.interval_seconds:
            timeout = self.interval_seconds / 2
            logger.warning('fetch timeout capped below refresh interval', requested=self.fetch_timeout, timeout=timeout)
        object.__setattr__(self, 'effective_timeout', timeout)

    @property
    def interval_seconds(self) -> float:
        return self.refresh_interval_minutes * 60


def _parse_int(key: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigError(f'{key} must be an integer, got {raw!r}') from None


def _parse_float(key: str, raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        raise ConfigError(f'{key} must be a number, got {raw!r}') from None


def load_config(
    env_file: Path | str | None = None,
    environ: dict[str, str] | None = None,
    **overrides,
) -> FeedConfig:
    '''
    Build FeedConfig from a .env file, then the environment, then explicit overrides.

    env_file: optional path to a .env file (lowest precedence)
    environ: mapping to read instead of os.environ (mainly for tests)
    overrides: FeedConfig field values that win over everything else; None is ignored

    RSS_FEEDS_LIST holds whitespace-separated URLs, each optionally with a query string.
    '''
    values: dict[str, str] = {}
    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.exists():
            raise ConfigError(f'Config file not found: {env_path}')
        values.update({k: v for k, v in dotenv_values(env_path).items() if v is not None})
    env = os.environ if environ is None else environ
    for key in (FEEDS_LIST_KEY, UPDATE_INTERVAL_KEY, ITEMS_VISIBLE_KEY, FETCH_TIMEOUT_KEY):
        if key in env:
            values[key] = env[key]

    kwargs: dict = {}
    if FEEDS_LIST_KEY in values:
        kwargs['source_urls'] = tuple(values[FEEDS_LIST_KEY].split())
    if UPDATE_INTERVAL_KEY in values:
        kwargs['refresh_interval_minutes'] = _parse_int(UPDATE_INTERVAL_KEY, values[UPDATE_INTERVAL_KEY])
    if ITEMS_VISIBLE_KEY in values:
        kwargs['items_visible_per_page'] = _parse_int(ITEMS_VISIBLE_KEY, values[ITEMS_VISIBLE_KEY])
    if FETCH_TIMEOUT_KEY in values:
        kwargs['fetch_timeout'] = _parse_float(FETCH_TIMEOUT_KEY, values[FETCH_TIMEOUT_KEY])
    kwargs.update({k: v for k, v in overrides.items() if v is not None})
    return FeedConfig(**kwargs)
