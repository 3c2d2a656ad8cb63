"""Deferred task scheduling for the simulation engine.

Effect expiry, probability self-correction and time normalization are
scheduled as delayed tasks. The scheduler is single-threaded and passive:
tasks only run when the owner calls `run_due()`, so every task executes to
completion between casts and never races a transition.

Tasks must read current state when they fire. Only the key (e.g. an effect
id) is captured at scheduling time.
"""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from aethercast_core.utils.logging import get_logger, log_error

logger = get_logger("scheduler")

Clock = Callable[[], float]
TaskCallback = Callable[[], None]


def wall_clock_ms() -> float:
    """Current wall-clock time in milliseconds."""
    return time.time() * 1000.0


@dataclass(order=True)
class DeferredTask:
    """A callback due at a point in time."""
    due_at: float
    sequence: int
    key: str = field(compare=False)
    callback: TaskCallback = field(compare=False, repr=False)


class DeferredScheduler:
    """Min-heap of delayed tasks ordered by due time, then insertion order.

    Usage:
        scheduler = DeferredScheduler(clock)
        scheduler.schedule(5000, callback, key="prob-correction")
        scheduler.run_due()
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock: Clock = clock or wall_clock_ms
        self._queue: list[DeferredTask] = []
        self._sequence = itertools.count()

    def schedule(self, delay: float, callback: TaskCallback, key: str = "") -> DeferredTask:
        """Schedule ``callback`` to run ``delay`` milliseconds from now.

        Args:
            delay: Milliseconds until the task is due
            callback: Zero-argument callable
            key: Label used in logs (e.g. the effect id)

        Returns:
            The scheduled task
        """
        if delay < 0:
            raise ValueError(f"Delay must be non-negative, got {delay}")
        task = DeferredTask(
            due_at=self.clock() + delay,
            sequence=next(self._sequence),
            key=key,
            callback=callback,
        )
        heapq.heappush(self._queue, task)
        logger.debug(f"Scheduled '{key}' in {delay}ms")
        return task

    def run_due(self, now: Optional[float] = None) -> int:
        """Run every task due at or before ``now``.

        A failing task is logged and does not prevent the others from running.

        Returns:
            Number of tasks run
        """
        if now is None:
            now = self.clock()

        ran = 0
        while self._queue and self._queue[0].due_at <= now:
            task = heapq.heappop(self._queue)
            try:
                task.callback()
            except Exception as e:
                log_error(logger, "deferred task", e, {"key": task.key})
            ran += 1
        return ran

    def pending(self) -> int:
        return len(self._queue)

    def next_due(self) -> Optional[float]:
        return self._queue[0].due_at if self._queue else None

    def clear(self) -> None:
        self._queue.clear()
