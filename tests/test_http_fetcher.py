import httpx
import pytest

from rssfeed.errors import FetchTimeoutError, HttpStatusError, NetworkError
from rssfeed.fetchers import HttpFeedFetcher, create_fetcher
from rssfeed.models import Source

from feedfixtures import rss


def _fetcher(handler) -> HttpFeedFetcher:
    return HttpFeedFetcher(timeout=5.0, transport=httpx.MockTransport(handler))


async def test_get_with_query_params():
    seen = []
    body = rss('Example', ('a', 'http://example.com/a'))

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=body)

    async with _fetcher(handler) as fetcher:
        payload = await fetcher.fetch(Source.from_url('http://x/feed?a=1&b=2'))

    assert payload == body
    request = seen[0]
    assert request.method == 'GET'
    assert request.url.path == '/feed'
    assert dict(request.url.params) == {'a': '1', 'b': '2'}
    assert request.headers['user-agent'].startswith('rssfeed/')


async def test_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == '/old':
            return httpx.Response(301, headers={'Location': 'http://x/new'})
        return httpx.Response(200, content=b'<rss/>')

    async with _fetcher(handler) as fetcher:
        assert await fetcher.fetch(Source('http://x/old')) == b'<rss/>'


@pytest.mark.parametrize('status', [404, 500, 503])
async def test_non_2xx_raises_http_status_error(status):
    async with _fetcher(lambda request: httpx.Response(status)) as fetcher:
        with pytest.raises(HttpStatusError) as excinfo:
            await fetcher.fetch(Source('http://x/feed'))
    assert excinfo.value.status_code == status
    assert 'http://x/feed' in excinfo.value.url


async def test_transport_failure_raises_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError('connection refused', request=request)

    async with _fetcher(handler) as fetcher:
        with pytest.raises(NetworkError):
            await fetcher.fetch(Source('http://x/feed'))


async def test_deadline_raises_fetch_timeout_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout('too slow', request=request)

    async with _fetcher(handler) as fetcher:
        with pytest.raises(FetchTimeoutError) as excinfo:
            await fetcher.fetch(Source('http://x/feed'))
    assert isinstance(excinfo.value, TimeoutError)


def test_create_fetcher():
    assert isinstance(create_fetcher('http', timeout=3.0), HttpFeedFetcher)
    with pytest.raises(ValueError):
        create_fetcher('gopher')
