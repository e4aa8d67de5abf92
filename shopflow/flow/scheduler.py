"""Cancellable delayed callbacks on the asyncio event loop."""
import asyncio
from typing import Callable, Optional

from shopflow.logging import get_logger

logger = get_logger(__name__)


class ScheduledTask:
    """One pending callback; `cancel()` is safe to call at any time."""

    def __init__(self, callback: Callable[[], None]):
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self.fired = False
        self.cancelled = False

    @property
    def pending(self) -> bool:
        return not (self.fired or self.cancelled)

    def cancel(self) -> None:
        if not self.pending:
            return
        self.cancelled = True
        if self._handle is not None:
            self._handle.cancel()

    def _run(self) -> None:
        if not self.pending:
            return
        self.fired = True
        try:
            self._callback()
        except Exception as e:
            logger.error(f"Scheduled callback failed: {e}", exc_info=True)


class AsyncioScheduler:
    """
    Schedules callbacks with `loop.call_later`.

    The loop is taken from the running loop at scheduling time unless one
    is given. `cancel_all()` drops everything still pending.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._tasks: list[ScheduledTask] = []

    @property
    def pending_count(self) -> int:
        self._tasks = [task for task in self._tasks if task.pending]
        return len(self._tasks)

    def schedule_delayed(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledTask:
        loop = self._loop or asyncio.get_running_loop()
        task = ScheduledTask(callback)
        task._handle = loop.call_later(max(delay_ms, 0) / 1000, task._run)
        self._tasks.append(task)
        logger.debug(f"Scheduled callback in {delay_ms} ms")
        return task

    def cancel_all(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks = []
