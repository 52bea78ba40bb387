"""Queue used between pipeline stages.

A ``maxsize`` above zero gives backpressure: hash workers block on
``put`` while the collector is behind instead of piling up finished
records in memory.
"""

from __future__ import annotations

import queue
from typing import Any

from hashvault.core.pipeline.utils.statistics import QueueStatistics


class BoundedQueue:
    """``queue.Queue`` that optionally reports its traffic to QueueStatistics.

    Args:
        maxsize: Capacity, 0 for unbounded
        stats: Counters updated on every put and get
    """

    def __init__(self, maxsize: int = 0, stats: QueueStatistics | None = None) -> None:
        self._items: queue.Queue[Any] = queue.Queue(maxsize=maxsize)
        self.stats = stats

    @property
    def maxsize(self) -> int:
        return self._items.maxsize

    def put(self, item: Any, block: bool = True, timeout: float | None = None) -> None:
        """Enqueue ``item``; raises queue.Full when no slot frees up in time."""
        self._items.put(item, block=block, timeout=timeout)
        stats = self.stats
        if stats is not None:
            stats.increment_items_put()
            stats.update_max_size(self._items.qsize())

    def get(self, block: bool = True, timeout: float | None = None) -> Any:
        """Dequeue an item; raises queue.Empty when none arrives in time."""
        item = self._items.get(block=block, timeout=timeout)
        if self.stats is not None:
            self.stats.increment_items_got()
        return item

    def task_done(self) -> None:
        self._items.task_done()

    def qsize(self) -> int:
        return self._items.qsize()

    def empty(self) -> bool:
        return self._items.empty()

    def full(self) -> bool:
        return self._items.full()
