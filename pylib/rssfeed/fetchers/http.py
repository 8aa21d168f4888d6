'''HTTP feed fetcher using httpx.'''

import httpx
import structlog

from rssfeed.errors import FetchTimeoutError, HttpStatusError, NetworkError
from rssfeed.fetchers.protocol import FeedFetcher
from rssfeed.models import Source


logger = structlog.get_logger()

DEFAULT_TIMEOUT = 30.0
USER_AGENT = 'rssfeed/0.1 (+https://pypi.org/project/rssfeed/)'


class HttpFeedFetcher(FeedFetcher):
    '''
    Fetch feeds with one shared httpx.AsyncClient.

    The client pools connections and is safe to use from concurrent tasks. No retries;
    the periodic refresh is the retry mechanism.
    '''

    def __init__(
        self,
        timeout: float | None = DEFAULT_TIMEOUT,
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=follow_redirects,
            headers={'User-Agent': USER_AGENT},
            transport=transport,
        )

    async def fetch(self, source: Source) -> bytes:
        '''GET source.url with source.query_params, map httpx failures to fetch errors.'''
        try:
            response = await self._client.get(source.url, params=dict(source.query_params))
        except httpx.TimeoutException as e:
            raise FetchTimeoutError(f'timed out after {self.timeout}s: {source.url}') from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f'{type(e).__name__}: {e} ({source.url})') from e

        if not response.is_success:
            raise HttpStatusError(response.status_code, str(response.url))
        logger.debug('fetched feed', url=str(response.url), size=len(response.content))
        return response.content

    async def aclose(self) -> None:
        await self._client.aclose()

