'''Feed fetchers: HTTP retrieval and RSS parsing. Pluggable fetcher protocol.'''

from rssfeed.fetchers.http import HttpFeedFetcher
from rssfeed.fetchers.protocol import FeedFetcher, create_fetcher
from rssfeed.fetchers.rss import parse_feed

__all__ = [
    'FeedFetcher',
    'HttpFeedFetcher',
    'create_fetcher',
    'parse_feed',
]
