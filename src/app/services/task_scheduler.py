"""Task Scheduler Interface

Deferred, cancellable work used to coalesce discount resyncs and to
debounce catalog searches.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


class ScheduledTask(ABC):
    """Handle of a pending unit of deferred work"""

    @abstractmethod
    def cancel(self) -> None:
        """Cancel the work if it has not finished yet"""
        pass

    @abstractmethod
    def done(self) -> bool:
        """True once the work ran to completion or was cancelled"""
        pass


class TaskScheduler(ABC):
    """Schedules callbacks to run after a delay on the event loop"""

    @abstractmethod
    def schedule(self, delay_seconds: float, callback: Callable[[], Any]) -> ScheduledTask:
        """
        Run callback after delay_seconds

        Args:
            delay_seconds: Delay before the callback runs
            callback: Zero-argument callable; may return an awaitable

        Returns:
            ScheduledTask handle that cancels the pending work
        """
        pass
