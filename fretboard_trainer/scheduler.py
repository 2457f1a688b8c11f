"""Cooperative, single-threaded timer used for auto-advancing rounds."""

import time
from typing import Callable, List, Optional

from .core.interfaces import IScheduledTask, IScheduler
from .logger import get_logger

logger = get_logger(__name__)


class ScheduledTask(IScheduledTask):
    """A callback waiting in a LoopScheduler."""

    def __init__(self, due: float, callback: Callable[[], None], seq: int):
        self.due = due
        self.callback = callback
        self.seq = seq
        self._cancelled = False
        self.done = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> bool:
        return not (self._cancelled or self.done)


class LoopScheduler(IScheduler):
    """Timer queue polled from the UI loop.

    Nothing runs on its own: the owner calls run_pending() once per frame and
    due callbacks run right there, on the owner's thread.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """Initialize the scheduler.

        Args:
            clock: Returns the current time in seconds. Defaults to time.monotonic.
        """
        self._clock = clock or time.monotonic
        self._tasks: List[ScheduledTask] = []
        self._seq = 0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask:
        self._seq += 1
        task = ScheduledTask(self._clock() + delay_ms / 1000.0, callback, self._seq)
        self._tasks.append(task)
        logger.debug(f"Scheduled task {task.seq} in {delay_ms}ms")
        return task

    def run_pending(self) -> int:
        now = self._clock()
        due = sorted(
            (t for t in self._tasks if t.pending and t.due <= now),
            key=lambda t: (t.due, t.seq),
        )
        ran = 0
        for task in due:
            # An earlier callback may have cancelled this one
            if not task.pending:
                continue
            task.done = True
            task.callback()
            ran += 1
        self._tasks = [t for t in self._tasks if t.pending]
        return ran
