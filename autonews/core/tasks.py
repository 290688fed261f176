"""
Task group used for fire-and-forget work tied to a view's lifetime.
"""
import asyncio
import logging
from typing import Coroutine, Optional, Set

logger = logging.getLogger(__name__)


class TaskGroup:
    """
    Tracks background tasks so they can be cancelled or awaited together.

    Tasks run independently; an exception in one is logged and never reaches
    the caller of spawn() or the other tasks. When max_concurrent is set, at
    most that many spawned coroutines run their body at once.
    """
    def __init__(self, max_concurrent: Optional[int] = None, name: str = "tasks"):
        self.name = name
        self._semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent else None
        self._tasks: Set[asyncio.Task] = set()

    def spawn(self, coro: Coroutine) -> asyncio.Task:
        """
        Schedule a coroutine on the running loop.

        Args:
            coro: The coroutine to run

        Returns:
            The created task
        """
        task = asyncio.ensure_future(self._run(coro))
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._on_done(t, coro))
        return task

    async def _run(self, coro: Coroutine):
        if self._semaphore is None:
            return await coro
        async with self._semaphore:
            return await coro

    def _on_done(self, task: asyncio.Task, coro: Coroutine):
        self._tasks.discard(task)
        if task.cancelled():
            # Cancelled before it started
            coro.close()
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Task in group '{self.name}' failed: {exc!r}")

    def cancel(self):
        """Cancel every task that is still running."""
        if self._tasks:
            logger.debug(f"Cancelling {len(self._tasks)} task(s) in group '{self.name}'")
        for task in list(self._tasks):
            task.cancel()

    async def join(self):
        """Wait until every task spawned so far, and any they spawn, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def __len__(self) -> int:
        return len(self._tasks)
