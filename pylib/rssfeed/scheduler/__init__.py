'''Timer implementations. Swap via kind= param.'''

from rssfeed.scheduler.base import Scheduler
from rssfeed.scheduler.asyncio_loop import AsyncioLoopScheduler

__all__ = ['Scheduler', 'AsyncioLoopScheduler', 'get_scheduler']


def get_scheduler(kind: str = 'asyncio', interval_seconds: float = 300, run_immediately: bool = True) -> Scheduler:
    '''
    Factory for the repeating timer. kind: asyncio (default), apscheduler (if installed).
    '''
    if kind == 'asyncio':
        return AsyncioLoopScheduler(interval_seconds=interval_seconds, run_immediately=run_immediately)
    if kind == 'apscheduler':
        from rssfeed.scheduler.apscheduler_impl import APSchedulerImpl
        return APSchedulerImpl(interval_seconds=interval_seconds, run_immediately=run_immediately)
    raise ValueError(f'unknown scheduler: {kind}')
