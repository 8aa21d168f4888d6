'''Repeating-timer abstraction. Implementations can use asyncio, APScheduler, etc.'''

from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from typing import Any


class Scheduler(ABC):
    '''Abstract repeating timer. Run a callback every interval until stopped.'''

    @abstractmethod
    async def start(self) -> None:
        '''Start the timer.'''

    @abstractmethod
    async def stop(self) -> None:
        '''Stop the timer. Safe to call when not started; no callback fires afterward.'''

    @abstractmethod
    def schedule(
        self,
        callback: Callable[..., Coroutine[Any, Any, None]],
        *args: Any,
        **kwargs: Any,
    ) -> None:
        '''Register the callback to run on each tick.'''

    @property
    @abstractmethod
    def running(self) -> bool:
        '''True between start() and stop().'''
