'''Simple asyncio-based recurring timer.'''

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import structlog

from rssfeed.scheduler.base import Scheduler


logger = structlog.get_logger()


class AsyncioLoopScheduler(Scheduler):
    '''Runs a callback on a fixed interval using an asyncio task.'''

    def __init__(self, interval_seconds: float = 300, run_immediately: bool = True) -> None:
        '''
        interval_seconds: delay between ticks.
        run_immediately: fire the first tick on start rather than after one interval.
        '''
        self._interval = interval_seconds
        self._run_immediately = run_immediately
        self._callback: Callable[..., Coroutine[Any, Any, None]] | None = None
        self._args: tuple[Any, ...] = ()
        self._kwargs: dict[str, Any] = {}
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    def schedule(
        self,
        callback: Callable[..., Coroutine[Any, Any, None]],
        *args: Any,
        **kwargs: Any,
    ) -> None:
        self._callback = callback
        self._args = args
        self._kwargs = kwargs

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if not self._callback:
            raise RuntimeError('No callback scheduled; call schedule() first')
        if self.running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop())

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _wait_interval(self) -> None:
        stop_waiter = asyncio.create_task(self._stop_event.wait())
        sleeper = asyncio.create_task(asyncio.sleep(self._interval))
        try:
            await asyncio.wait([stop_waiter, sleeper], return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop_waiter.cancel()
            sleeper.cancel()

    async def _run_loop(self) -> None:
        if not self._run_immediately:
            await self._wait_interval()
        while not self._stop_event.is_set():
            try:
                await self._callback(*self._args, **self._kwargs)
            except Exception:
                # Log but don't crash the loop
                logger.exception('timer callback failed')
            await self._wait_interval()
