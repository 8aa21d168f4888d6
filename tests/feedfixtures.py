'''Sample payloads and fake fetchers shared by the tests.'''

import asyncio
from collections import defaultdict

from rssfeed.fetchers.protocol import FeedFetcher
from rssfeed.models import Source


def rss(title: str, *items: tuple[str, str | None]) -> bytes:
    '''Build an RSS 2.0 document; an item link of None leaves the <link> out.'''
    parts = []
    for item_title, link in items:
        link_xml = f'<link>{link}</link>' if link is not None else ''
        parts.append(f'<item><title>{item_title}</title>{link_xml}</item>')
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f'<title>{title}</title><link>http://example.com/</link><description>d</description>'
        + ''.join(parts)
        + '</channel></rss>'
    ).encode('utf-8')


OLD_RSS = rss('Old', ('old item', 'http://old.example/1'))
NEW_RSS = rss('New', ('new item', 'http://new.example/1'))


class FakeFetcher(FeedFetcher):
    '''Answers immediately from a url -> payload-or-exception mapping.'''

    def __init__(self, responses: dict | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[Source] = []
        self.closed = False

    async def fetch(self, source: Source) -> bytes:
        self.calls.append(source)
        result = self.responses[source.url]
        if isinstance(result, Exception):
            raise result
        return result

    async def aclose(self) -> None:
        self.closed = True


class ControlledFetcher(FeedFetcher):
    '''Each call waits on its own future; tests resolve them in whatever order they like.'''

    def __init__(self) -> None:
        self.pending: dict[str, list[asyncio.Future]] = defaultdict(list)

    async def fetch(self, source: Source) -> bytes:
        fut = asyncio.get_running_loop().create_future()
        self.pending[source.url].append(fut)
        result = await fut
        if isinstance(result, Exception):
            raise result
        return result


class LateFetcher(ControlledFetcher):
    '''A transport whose response still arrives after it has been cancelled.'''

    async def fetch(self, source: Source) -> bytes:
        try:
            return await super().fetch(source)
        except asyncio.CancelledError:
            return OLD_RSS


async def settle(rounds: int = 5) -> None:
    '''Let freshly created tasks run up to their first suspension point.'''
    for _ in range(rounds):
        await asyncio.sleep(0)
