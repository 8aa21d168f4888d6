'''
Feed aggregator: refresh every configured source on a timer, concurrently, into a
slot array indexed by source position.

Each refresh cycle starts one asyncio task per source. A task's result lands in its
slot as soon as it is parsed; there is no barrier on the rest of the cycle. Results
are tagged with the configuration generation and cycle number they were launched
under, and are dropped if either has been superseded.
'''

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime

import structlog

from rssfeed.config import DEFAULT_ITEMS_VISIBLE, FeedConfig
from rssfeed.errors import ConfigError, FeedError
from rssfeed.fetchers.protocol import FeedFetcher
from rssfeed.fetchers.rss import parse_feed
from rssfeed.models import Feed, Page, Source
from rssfeed.scheduler import Scheduler, get_scheduler
from rssfeed.view import Pager, format_last_update


logger = structlog.get_logger()

Listener = Callable[['FeedScheduler'], None]


class FeedScheduler:
    '''Owns the sources, the slot array and the repeating refresh cycle.'''

    def __init__(
        self,
        fetcher: FeedFetcher,
        *,
        timer_kind: str = 'asyncio',
        page_size: int = DEFAULT_ITEMS_VISIBLE,
        parser: Callable[[bytes], Feed] = parse_feed,
    ) -> None:
        self._fetcher = fetcher
        self._timer_kind = timer_kind
        self._parse = parser
        self._sources: tuple[Source, ...] = ()
        self._slots: list[Feed | None] = []
        self._applied_cycle: list[int] = []
        self._generation = 0
        self._cycle = 0
        self._timer: Scheduler | None = None
        self._started = False
        self._inflight: set[asyncio.Task[None]] = set()
        self._listeners: list[Listener] = []
        self.pager = Pager(page_size=page_size)
        self.last_updated: datetime | None = None
        self.last_errors: dict[int, FeedError] = {}

    async def __aenter__(self) -> 'FeedScheduler':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    @property
    def sources(self) -> tuple[Source, ...]:
        return self._sources

    @property
    def slots(self) -> tuple[Feed | None, ...]:
        '''Snapshot of the slot array.'''
        return tuple(self._slots)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def running(self) -> bool:
        return self._timer is not None and self._timer.running

    def current_page(self) -> Page:
        return self.pager.current(self._slots)

    def last_update_label(self) -> str:
        return format_last_update(self.last_updated)

    def subscribe(self, listener: Listener) -> None:
        '''Call listener(self) after every slot change.'''
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def start(self, sources: Sequence[Source], interval_seconds: float) -> None:
        '''
        Supersede any running cycle: fresh empty slots, one immediate refresh, then a
        refresh every interval_seconds. Raises ConfigError (bad interval) or ValueError
        (unknown timer kind) without touching state.
        '''
        if interval_seconds <= 0:
            raise ConfigError(f'refresh interval must be positive, got {interval_seconds}')
        timer = get_scheduler(self._timer_kind, interval_seconds=interval_seconds, run_immediately=False)
        await self.stop()

        self._sources = tuple(sources)
        self._slots = [None] * len(self._sources)
        self._applied_cycle = [0] * len(self._sources)
        self.last_errors = {}
        self.pager.reset()
        logger.info(
            'feed scheduler started',
            sources=len(self._sources),
            interval=interval_seconds,
            generation=self._generation,
        )

        self._started = True
        self.trigger_refresh()
        self._timer = timer
        self._timer.schedule(self._tick)
        await self._timer.start()

    async def apply_config(self, config: FeedConfig, fetcher: FeedFetcher | None = None) -> None:
        '''
        Settings-change hook: full restart with the new sources, interval and page size.
        Pass fetcher to swap the transport (e.g. a new timeout); the caller owns closing
        the old one.
        '''
        await self.stop()
        if fetcher is not None:
            self._fetcher = fetcher
        self.pager.reset(config.items_visible_per_page)
        await self.start(config.sources, config.interval_seconds)

    async def stop(self) -> None:
        '''Cancel the timer and every in-flight fetch. Safe to call repeatedly.'''
        self._started = False
        self._generation += 1
        if self._timer is not None:
            await self._timer.stop()
            self._timer = None
        tasks = list(self._inflight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug('cancelled in-flight fetches', count=len(tasks))

    def trigger_refresh(self) -> list[asyncio.Task[None]]:
        '''
        Launch one refresh cycle without waiting for it. Returns the per-source tasks;
        none while stopped.
        '''
        if not self._started:
            logger.debug('refresh ignored, scheduler is stopped')
            return []
        self._cycle += 1
        generation, cycle = self._generation, self._cycle
        tasks = []
        for index, source in enumerate(self._sources):
            task = asyncio.create_task(
                self._refresh_source(generation, cycle, index, source),
                name=f'rssfeed-refresh-{cycle}-{index}',
            )
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)
            tasks.append(task)
        logger.debug('refresh cycle launched', cycle=cycle, sources=len(tasks))
        return tasks

    async def refresh(self) -> None:
        '''Run one refresh cycle and wait until every source in it has finished.'''
        tasks = self.trigger_refresh()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def drain(self) -> None:
        '''Wait for every in-flight fetch, from any cycle.'''
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    async def _tick(self) -> None:
        # Don't await the cycle; a stuck source must not hold back the next tick
        self.trigger_refresh()

    async def _refresh_source(self, generation: int, cycle: int, index: int, source: Source) -> None:
        log = logger.bind(url=source.url, index=index, cycle=cycle)
        try:
            payload = await self._fetcher.fetch(source)
            if generation != self._generation:
                log.debug('discarding fetch from superseded configuration')
                return
            feed = self._parse(payload)
        except FeedError as e:
            if generation == self._generation:
                self.last_errors[index] = e
                log.warning('feed refresh failed', error=str(e), error_type=type(e).__name__)
            return
        except Exception:
            log.exception('unexpected error refreshing feed')
            return
        self._apply(generation, cycle, index, feed)

    def _apply(self, generation: int, cycle: int, index: int, feed: Feed) -> bool:
        if generation != self._generation or cycle <= self._applied_cycle[index]:
            logger.debug('discarding stale feed result', index=index, cycle=cycle)
            return False
        self._slots[index] = feed
        self._applied_cycle[index] = cycle
        self.last_errors.pop(index, None)
        self.last_updated = datetime.now()
        logger.info('feed updated', url=self._sources[index].url, title=feed.publisher_title, items=len(feed))
        self._notify()
        return True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception('feed listener failed')
