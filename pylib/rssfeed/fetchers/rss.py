'''RSS parsing using feedparser.'''

import io

import feedparser
import structlog

from rssfeed.errors import ParseError
from rssfeed.models import Feed, FeedItem


logger = structlog.get_logger()


def parse_feed(payload: bytes | str) -> Feed:
    '''
    Parse a raw RSS/Atom payload into a Feed.

    Missing channel title, item title or item link become empty strings. A document
    with no items is a valid, empty Feed. Raises ParseError only when feedparser
    cannot make sense of the payload as any feed format.
    '''
    if isinstance(payload, str):
        payload = payload.encode('utf-8')
    # feedparser tries a bare str or bytes argument as a URL or local path first
    parsed = feedparser.parse(io.BytesIO(payload))

    if parsed.get('bozo') and not parsed.get('version'):
        raise ParseError(f'not a feed document: {parsed.get("bozo_exception")}')
    if parsed.get('bozo'):
        logger.debug('feed recovered from malformed markup', error=str(parsed.get('bozo_exception')))

    items = tuple(
        FeedItem(title=entry.get('title', '') or '', link=entry.get('link', '') or '')
        for entry in parsed.entries
    )
    return Feed(publisher_title=parsed.feed.get('title', '') or '', items=items)
