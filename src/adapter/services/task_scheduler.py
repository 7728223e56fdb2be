"""Asyncio Task Scheduler

Runs deferred callbacks as tasks on the running event loop.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Set
from src.app.services.task_scheduler import ScheduledTask, TaskScheduler

logger = logging.getLogger(__name__)


class AsyncioScheduledTask(ScheduledTask):
    """ScheduledTask backed by an asyncio.Task"""

    def __init__(self, task: asyncio.Task):
        self.task = task

    def cancel(self) -> None:
        if not self.task.done():
            self.task.cancel()

    def done(self) -> bool:
        return self.task.done()


class AsyncioTaskScheduler(TaskScheduler):
    """
    TaskScheduler on the asyncio event loop

    Must be used from inside a running loop. A failing callback is logged
    and never propagates to the code that scheduled it. Tasks are held until
    they finish, whether or not the caller keeps the returned handle.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def schedule(self, delay_seconds: float, callback: Callable[[], Any]) -> ScheduledTask:
        task = asyncio.create_task(self._run(delay_seconds, callback))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return AsyncioScheduledTask(task)

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    async def _run(self, delay_seconds: float, callback: Callable[[], Any]) -> None:
        await asyncio.sleep(delay_seconds)
        try:
            result = callback()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"Scheduled callback {callback!r} failed")
