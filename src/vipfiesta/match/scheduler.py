"""TaskScheduler — delayed continuations fired from the global tick.

A task is "run callback at now + delay".  There is no timer thread: the mode
calls ``run_due(now)`` once per global tick and every task whose due time
has passed runs, in due order (ties in scheduling order).

Tasks may carry a key.  Scheduling under a key that is already pending
replaces the older task, and ``is_pending(key)`` lets callers treat a
pending task as a cooldown.  Callbacks must re-validate the world before
acting; anything may have happened between scheduling and firing.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Hashable

from loguru import logger


@dataclass(order=True)
class ScheduledTask:
    due: float
    seq: int
    key: Hashable | None = field(compare=False, default=None)
    callback: Callable[[], None] = field(compare=False, default=lambda: None)
    cancelled: bool = field(compare=False, default=False)


class TaskScheduler:
    """Min-heap of pending continuations."""

    def __init__(self) -> None:
        self._heap: list[ScheduledTask] = []
        self._by_key: dict[Hashable, ScheduledTask] = {}
        self._seq = itertools.count()

    def __len__(self) -> int:
        return sum(1 for t in self._heap if not t.cancelled)

    def schedule(
        self,
        now: float,
        delay: float,
        callback: Callable[[], None],
        key: Hashable | None = None,
    ) -> ScheduledTask:
        if key is not None:
            self.cancel(key)
        task = ScheduledTask(now + max(0.0, delay), next(self._seq), key, callback)
        heapq.heappush(self._heap, task)
        if key is not None:
            self._by_key[key] = task
        logger.debug(f"Scheduled task {key!r} due at {task.due:.2f}")
        return task

    def cancel(self, key: Hashable) -> bool:
        task = self._by_key.pop(key, None)
        if task is None:
            return False
        task.cancelled = True
        return True

    def is_pending(self, key: Hashable) -> bool:
        return key in self._by_key

    def next_due(self) -> float | None:
        for task in sorted(self._heap):
            if not task.cancelled:
                return task.due
        return None

    def run_due(self, now: float) -> int:
        """Run every task due at or before ``now``. Returns how many ran."""
        ran = 0
        while self._heap and self._heap[0].due <= now:
            task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            if task.key is not None and self._by_key.get(task.key) is task:
                del self._by_key[task.key]
            task.callback()
            ran += 1
        return ran

    def clear(self) -> None:
        self._heap.clear()
        self._by_key.clear()
