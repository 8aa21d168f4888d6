'''Plain data shared between the fetch pipeline and whatever renders it.'''

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


def split_source_url(raw: str) -> tuple[str, dict[str, str]]:
    '''
    Split a configured URL into base URL and query parameters.

    Splits on the first "?", then on "&", then on the first "=". Values are passed
    through untouched (no unquoting). A key without "=" maps to an empty string.
    '''
    raw = raw.strip()
    if '?' not in raw:
        return raw, {}
    base, query = raw.split('?', 1)
    params: dict[str, str] = {}
    for pair in query.split('&'):
        if not pair:
            continue
        key, _, value = pair.partition('=')
        params[key] = value
    return base, params


@dataclass(frozen=True)
class Source:
    '''A configured feed endpoint.'''

    url: str
    query_params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only view so a Source can't be mutated after loading
        object.__setattr__(self, 'query_params', MappingProxyType(dict(self.query_params)))

    @classmethod
    def from_url(cls, raw: str) -> 'Source':
        base, params = split_source_url(raw)
        return cls(url=base, query_params=params)


@dataclass(frozen=True)
class FeedItem:
    '''One article.'''

    title: str = ''
    link: str = ''


@dataclass(frozen=True)
class Feed:
    '''Parse result for one source.'''

    publisher_title: str = ''
    items: tuple[FeedItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class PageEntry:
    '''One visible source on a page; feed is None when no data is available yet.'''

    source_index: int
    feed: Feed | None = None

    @property
    def available(self) -> bool:
        return self.feed is not None


Page = tuple[PageEntry, ...]
