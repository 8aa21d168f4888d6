'''CLI: fetch configured RSS feeds once, or keep them refreshed in the terminal.'''

import asyncio
import logging
import signal
import sys

import fire
import structlog
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree

from rssfeed.aggregator import FeedScheduler
from rssfeed.config import FeedConfig, load_config
from rssfeed.errors import ConfigError
from rssfeed.fetchers import create_fetcher
from rssfeed.models import Feed, Page
from rssfeed.view import page


NO_DATA = 'No data available'


def _configure_logging(level: str = 'warning') -> None:
    '''Plain tracebacks, timestamps, and stderr output so logs stay out of the rendered feeds.'''
    from structlog.contextvars import merge_contextvars
    from structlog.dev import ConsoleRenderer, plain_traceback, set_exc_info
    from structlog.processors import StackInfoRenderer, TimeStamper, add_log_level

    structlog.configure(
        processors=[
            merge_contextvars,
            add_log_level,
            StackInfoRenderer(),
            set_exc_info,
            TimeStamper(fmt='%Y-%m-%d %H:%M:%S', utc=False),
            ConsoleRenderer(exception_formatter=plain_traceback),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def feed_label(feed: Feed) -> str:
    return f'{feed.publisher_title} ({len(feed)})'


def render_page(entries: Page, last_update: str, title: str = 'RSS Feed') -> Panel:
    '''One page of sources: each feed as a tree of its items, absent ones as "No data available".'''
    rows = []
    for entry in entries:
        if entry.feed is None:
            rows.append(Text(NO_DATA, style='dim italic'))
            continue
        tree = Tree(Text(feed_label(entry.feed), style='bold'))
        for item in entry.feed.items:
            tree.add(Text.assemble(item.title, ' ', (item.link, 'dim cyan')))
        rows.append(tree)
    return Panel(Group(*rows), title=title, subtitle=f'Last update: {last_update}')


def render_all(scheduler: FeedScheduler) -> Group:
    '''Every page of the scheduler's current slots, in order.'''
    slots = scheduler.slots
    size = scheduler.pager.page_size
    total_pages = max(1, -(-len(slots) // size))
    panels = []
    for start in range(0, max(len(slots), 1), size):
        number = start // size + 1
        panels.append(render_page(page(slots, start, size), scheduler.last_update_label(),
                                  title=f'RSS Feed {number}/{total_pages}'))
    return Group(*panels)


def _resolve_config(feeds: str, env_file: str, interval, items_visible, timeout) -> FeedConfig:
    return load_config(
        env_file=env_file or None,
        source_urls=tuple(feeds.split()) if feeds else None,
        refresh_interval_minutes=interval,
        items_visible_per_page=items_visible,
        fetch_timeout=timeout,
    )


def main() -> None:
    '''rssfeed: periodic RSS reader for the terminal.'''
    fire.Fire({
        'show': show,
        'serve': serve,
    })


def show(
    feeds: str = '',
    env_file: str = '',
    interval: int | None = None,
    items_visible: int | None = None,
    timeout: float | None = None,
    log_level: str = 'warning',
) -> None:
    '''
    Fetch every configured feed once and print all pages.
    feeds: whitespace-separated feed URLs (default: RSS_FEEDS_LIST from env / env_file)
    env_file: optional .env file with RSS_FEEDS_LIST, RSS_UPDATE_INTERVAL, RSS_ITEMS_VISIBLE
    interval: refresh interval in minutes
    items_visible: sources shown per page
    timeout: per-fetch timeout in seconds
    '''
    _configure_logging(log_level)
    console = Console()
    try:
        config = _resolve_config(feeds, env_file, interval, items_visible, timeout)
    except ConfigError as e:
        console.print(f'[bold red]Configuration error:[/] {e}')
        raise SystemExit(2)
    asyncio.run(_show(config, console))


async def _show(config: FeedConfig, console: Console) -> None:
    async with create_fetcher('http', timeout=config.effective_timeout) as fetcher:
        async with FeedScheduler(fetcher, page_size=config.items_visible_per_page) as scheduler:
            await scheduler.apply_config(config)
            await scheduler.drain()
            console.print(render_all(scheduler))
            for index, error in sorted(scheduler.last_errors.items()):
                console.print(f'[yellow]{scheduler.sources[index].url}[/]: {error}')


def serve(
    feeds: str = '',
    env_file: str = '',
    interval: int | None = None,
    items_visible: int | None = None,
    timeout: float | None = None,
    scheduler: str = 'asyncio',
    log_level: str = 'warning',
) -> None:
    '''
    Keep feeds refreshed every interval minutes and redraw on each update.
    Send SIGHUP to reload configuration (env / env_file) without restarting.
    scheduler: timer implementation, asyncio (default) or apscheduler.
    Other options as for show.
    '''
    _configure_logging(log_level)
    console = Console()

    def resolve() -> FeedConfig:
        return _resolve_config(feeds, env_file, interval, items_visible, timeout)

    try:
        config = resolve()
    except ConfigError as e:
        console.print(f'[bold red]Configuration error:[/] {e}')
        raise SystemExit(2)
    try:
        asyncio.run(_serve(config, resolve, scheduler, console))
    except KeyboardInterrupt:
        pass


async def _serve(config: FeedConfig, resolve, timer_kind: str, console: Console) -> None:
    log = structlog.get_logger()
    fetcher = create_fetcher('http', timeout=config.effective_timeout)
    feeds = FeedScheduler(fetcher, timer_kind=timer_kind, page_size=config.items_visible_per_page)
    reload_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGHUP, reload_requested.set)
    except (NotImplementedError, AttributeError):
        log.info('configuration reload on SIGHUP not supported on this platform')

    with Live(render_all(feeds), console=console, refresh_per_second=4) as live:
        feeds.subscribe(lambda s: live.update(render_all(s)))
        await feeds.apply_config(config)
        live.update(render_all(feeds))
        try:
            while True:
                await reload_requested.wait()
                reload_requested.clear()
                try:
                    new_config = resolve()
                except ConfigError as e:
                    log.error('configuration reload rejected', error=str(e))
                    continue
                old_fetcher = fetcher
                fetcher = create_fetcher('http', timeout=new_config.effective_timeout)
                await feeds.apply_config(new_config, fetcher=fetcher)
                await old_fetcher.aclose()
                live.update(render_all(feeds))
                log.info('configuration reloaded', sources=len(new_config.sources))
        except asyncio.CancelledError:
            pass
        finally:
            await feeds.stop()
            await fetcher.aclose()


if __name__ == '__main__':
    main()
