'''APScheduler-based timer. Install with: pip install rssfeed[scheduler-apscheduler]'''

from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from rssfeed.scheduler.base import Scheduler


class APSchedulerImpl(Scheduler):
    '''Uses APScheduler's interval trigger.'''

    def __init__(self, interval_seconds: float = 300, run_immediately: bool = True) -> None:
        self._interval = interval_seconds
        self._run_immediately = run_immediately
        self._scheduler: AsyncIOScheduler | None = None
        self._callback: Callable[..., Coroutine[Any, Any, None]] | None = None
        self._args: tuple[Any, ...] = ()
        self._kwargs: dict[str, Any] = {}

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
        return self._scheduler is not None and self._scheduler.running

    async def _job_wrapper(self) -> None:
        if self._callback:
            await self._callback(*self._args, **self._kwargs)

    async def start(self) -> None:
        if not self._callback:
            raise RuntimeError('No callback scheduled; call schedule() first')
        if self.running:
            return
        # A shut-down AsyncIOScheduler can't be restarted, so build a fresh one
        self._scheduler = AsyncIOScheduler()
        job_kwargs: dict[str, Any] = {'id': 'rssfeed_refresh'}
        if self._run_immediately:
            job_kwargs['next_run_time'] = datetime.now()
        self._scheduler.add_job(
            self._job_wrapper,
            IntervalTrigger(seconds=self._interval),
            **job_kwargs,
        )
        self._scheduler.start()

    async def stop(self) -> None:
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
