'''
rssfeed: periodic, concurrent RSS retrieval into a paginated, read-only view.

Rendering and opening links are left to the caller; see rssfeed.cli for a terminal one.
'''

from rssfeed.aggregator import FeedScheduler
from rssfeed.config import FeedConfig, load_config
from rssfeed.errors import (
    ConfigError,
    FeedError,
    FetchError,
    FetchTimeoutError,
    HttpStatusError,
    NetworkError,
    ParseError,
)
from rssfeed.fetchers import FeedFetcher, HttpFeedFetcher, parse_feed
from rssfeed.models import Feed, FeedItem, Page, PageEntry, Source
from rssfeed.view import Pager, format_last_update, next_start, page, previous_start

__all__ = [
    'ConfigError',
    'Feed',
    'FeedConfig',
    'FeedError',
    'FeedFetcher',
    'FeedItem',
    'FeedScheduler',
    'FetchError',
    'FetchTimeoutError',
    'HttpFeedFetcher',
    'HttpStatusError',
    'NetworkError',
    'Page',
    'PageEntry',
    'Pager',
    'ParseError',
    'Source',
    'format_last_update',
    'load_config',
    'next_start',
    'page',
    'parse_feed',
    'previous_start',
]
