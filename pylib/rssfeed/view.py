'''Paginated, read-only projection of the slot array.'''

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from rssfeed.errors import ConfigError
from rssfeed.models import Feed, Page, PageEntry


def page(slots: Sequence[Feed | None], start_index: int, page_size: int) -> Page:
    '''
    Return up to page_size entries starting at start_index (clamped to 0).

    Absent slots stay in the page as entries with feed=None so positions line up
    with the configured source order. Never reads past the end of slots.
    '''
    start = max(0, start_index)
    stop = min(len(slots), start + max(0, page_size))
    return tuple(PageEntry(source_index=i, feed=slots[i]) for i in range(start, stop))


def next_start(start_index: int, page_size: int, total: int) -> int:
    '''Advance one page, or stay put when the current page is the last one.'''
    if start_index + page_size < total:
        return start_index + page_size
    return start_index


def previous_start(start_index: int, page_size: int) -> int:
    '''Go back one page, never below 0.'''
    return max(0, start_index - page_size)


def _check_page_size(page_size: int) -> None:
    if page_size <= 0:
        raise ConfigError(f'page size must be positive, got {page_size}')


@dataclass
class Pager:
    '''Pagination state kept by a rendering collaborator.'''

    page_size: int
    start_index: int = 0

    def __post_init__(self) -> None:
        _check_page_size(self.page_size)

    def next(self, total: int) -> int:
        self.start_index = next_start(self.start_index, self.page_size, total)
        return self.start_index

    def previous(self) -> int:
        self.start_index = previous_start(self.start_index, self.page_size)
        return self.start_index

    def reset(self, page_size: int | None = None) -> None:
        if page_size is not None:
            _check_page_size(page_size)
            self.page_size = page_size
        self.start_index = 0

    def current(self, slots: Sequence[Feed | None]) -> Page:
        return page(slots, self.start_index, self.page_size)


def format_last_update(when: datetime | None) -> str:
    '''Last-update label as HH:MM, zero padded; "--:--" before the first update.'''
    if when is None:
        return '--:--'
    return f'{when.hour:02d}:{when.minute:02d}'
