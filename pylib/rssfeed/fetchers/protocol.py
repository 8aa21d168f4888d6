'''
Feed fetcher protocol: one HTTP GET per source, raw payload out.

Provides a pluggable interface so the aggregator can be driven by other transports
(or by fakes in tests).
'''

from abc import ABC, abstractmethod

from rssfeed.models import Source


class FeedFetcher(ABC):
    '''Protocol for feed payload fetchers.'''

    @abstractmethod
    async def fetch(self, source: Source) -> bytes:
        '''
        Fetch the raw payload for one source.

        Args:
            source: endpoint and query parameters to request

        Returns:
            Response body as bytes

        Raises:
            NetworkError, FetchTimeoutError, HttpStatusError
        '''

    async def aclose(self) -> None:
        '''Release any shared connection resources.'''

    async def __aenter__(self) -> 'FeedFetcher':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_fetcher(fetcher_type: str = 'http', **kwargs) -> FeedFetcher:
    '''
    Factory function to create a feed fetcher.

    Args:
        fetcher_type: 'http' (httpx-backed)
        **kwargs: Additional arguments for the fetcher

    Returns:
        FeedFetcher instance
    '''
    if fetcher_type in ('http', 'httpx'):
        from rssfeed.fetchers.http import HttpFeedFetcher
        return HttpFeedFetcher(**kwargs)
    raise ValueError(f'Unknown fetcher type: {fetcher_type}')
