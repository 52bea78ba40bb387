"""Counters kept while a run is in progress.

ScanStatistics and QueueStatistics are shared between threads and guard
their counters with a lock. HashStatistics is the run result and is only
ever touched by the collector thread.
"""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass
from typing import Any


class _LockedCounters:
    """Named integer counters behind a single lock."""

    _fields: tuple[str, ...] = ()

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values = dict.fromkeys(self._fields, 0)

    def _add(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._values[name] += amount

    def _raise_to(self, name: str, value: int) -> None:
        with self._lock:
            if value > self._values[name]:
                self._values[name] = value

    def _read(self, name: str) -> int:
        with self._lock:
            return self._values[name]

    def snapshot(self) -> dict[str, int]:
        """Return all counters at once."""
        with self._lock:
            return dict(self._values)


class ScanStatistics(_LockedCounters):
    """Directory walk counters."""

    _fields = ("files_scanned", "directories_scanned", "errors")

    def increment_files_scanned(self) -> None:
        self._add("files_scanned")

    def increment_directories_scanned(self) -> None:
        self._add("directories_scanned")

    def increment_errors(self) -> None:
        self._add("errors")

    @property
    def files_scanned(self) -> int:
        return self._read("files_scanned")

    @property
    def directories_scanned(self) -> int:
        return self._read("directories_scanned")

    @property
    def errors(self) -> int:
        """Entries that could not be stat'ed or listed."""
        return self._read("errors")


class QueueStatistics(_LockedCounters):
    """Traffic through one BoundedQueue."""

    _fields = ("items_put", "items_got", "max_size")

    def increment_items_put(self) -> None:
        self._add("items_put")

    def increment_items_got(self) -> None:
        self._add("items_got")

    def update_max_size(self, size: int) -> None:
        """Remember ``size`` if it is the largest depth seen so far."""
        self._raise_to("max_size", size)

    @property
    def items_put(self) -> int:
        return self._read("items_put")

    @property
    def items_got(self) -> int:
        return self._read("items_got")

    @property
    def max_size(self) -> int:
        return self._read("max_size")


@dataclass
class HashStatistics:
    """Totals for one run, returned by the collector when it finishes."""

    num_hashes_reused: int = 0
    total_bytes: int = 0
    total_hashed_bytes: int = 0
    total_files: int = 0
    failed_files: int = 0
    elapsed_seconds: float = 0.0

    @property
    def throughput(self) -> float:
        """Bytes hashed per second; 0.0 until some time has elapsed."""
        if self.elapsed_seconds > 0:
            return self.total_hashed_bytes / self.elapsed_seconds
        return 0.0

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "throughput": self.throughput}
