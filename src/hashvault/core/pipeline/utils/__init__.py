"""Pipeline utilities package.

- BoundedQueue: Thread-safe queue with size limits for backpressure
- Statistics classes: scan/queue counters and the run's HashStatistics
"""

from __future__ import annotations

from hashvault.core.pipeline.utils.bounded_queue import BoundedQueue
from hashvault.core.pipeline.utils.statistics import (
    HashStatistics,
    QueueStatistics,
    ScanStatistics,
)

__all__ = [
    "BoundedQueue",
    "HashStatistics",
    "QueueStatistics",
    "ScanStatistics",
]
