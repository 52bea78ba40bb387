"""Result collector for the HashVault pipeline.

This module provides the ResultCollector class, the single consumer of the
ProgressRecord stream. It owns the output sink and the run statistics, and
drives the optional ProgressReporter on the diagnostic stream.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import TextIO

from hashvault.core.codec import encode_record
from hashvault.core.pipeline.utils import BoundedQueue, HashStatistics
from hashvault.shared.constants import FileSystem, Pipeline, Timeout
from hashvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    HashVaultError,
    InfrastructureError,
)
from hashvault.shared.file_records import ProgressRecord
from hashvault.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


class ProgressReporter:
    """Best-effort status line on a diagnostic stream.

    Every ``every`` files the line is rewritten in place with a carriage
    return. Write failures on the stream are ignored; the status is
    informational only.

    Args:
        stream: Diagnostic stream (usually standard error).
        every: Cadence in completed files, 0 disables the status line.
    """

    def __init__(self, stream: TextIO, every: int) -> None:
        if every < 0:
            raise ValueError(f"every must be >= 0, got {every}")
        self.stream = stream
        self.every = every
        self._written = False

    def update(self, stats: HashStatistics, elapsed_seconds: float) -> None:
        """Write the status line when the cadence is reached."""
        if not self.every or stats.total_files % self.every:
            return
        rate = stats.total_hashed_bytes / elapsed_seconds if elapsed_seconds > 0 else 0.0
        self._write(
            f"\r{stats.total_bytes // FileSystem.MEGABYTE:4} MB, "
            f"{stats.total_files:5} files, "
            f"{rate / FileSystem.MEGABYTE:.1f} MB/s"
        )

    def close(self) -> None:
        """End the status line, if one was written."""
        if self._written:
            self._write("\n")
            self._written = False

    def _write(self, text: str) -> None:
        try:
            self.stream.write(text)
            self.stream.flush()
        except (OSError, ValueError):
            logger.debug("Progress status could not be written", exc_info=True)
            return
        self._written = text != "\n"


class ResultCollector(threading.Thread):
    """Collector that drains progress records into the output sink.

    Records are consumed in arrival order. Each one is encoded in the
    current line format, written and flushed before the next is taken, so
    an interrupted run still leaves a readable report.

    A failing sink does not stop the thread: the first failure is kept in
    ``self.error``, writing stops, and the queue is drained until the
    sentinel so producers never block on a full queue.

    Args:
        output_queue: BoundedQueue instance to get progress records from.
        sink: Text stream receiving one encoded record per line.
        reporter: Optional ProgressReporter for the diagnostic stream.
        collector_id: Optional identifier for this collector.
    """

    def __init__(
        self,
        output_queue: BoundedQueue,
        sink: TextIO,
        reporter: ProgressReporter | None = None,
        collector_id: str | None = None,
    ) -> None:
        super().__init__()
        self.output_queue = output_queue
        self.sink = sink
        self.reporter = reporter
        self.collector_id = collector_id or f"collector_{id(self) & 0xFFFF}"
        self.statistics = HashStatistics()
        self.error: HashVaultError | None = None
        self._stopped = threading.Event()
        self._start_time = 0.0

    def run(self) -> None:
        """Main collector loop; returns after the sentinel is received."""
        self._start_time = time.perf_counter()
        context = ErrorContext(
            operation="collector_run",
            additional_data={"collector_id": self.collector_id},
        )

        try:
            while not self._stopped.is_set():
                try:
                    item = self.output_queue.get(timeout=Timeout.PIPELINE_QUEUE)
                except queue.Empty:
                    continue

                if item is Pipeline.SENTINEL:
                    break
                self.consume(item)
        except Exception as e:  # pylint: disable=broad-exception-caught
            # The thread ends here; the orchestrator reports the failure
            self.error = InfrastructureError(
                ErrorCode.COLLECTOR_ERROR,
                f"Collector run failed: {e}",
                context,
                original_error=e,
            )
            log_operation_error(logger, self.error)
            return
        finally:
            self.statistics.elapsed_seconds = time.perf_counter() - self._start_time
            if self.reporter is not None:
                self.reporter.close()

        log_operation_success(
            logger,
            "collector_run",
            self.statistics.elapsed_seconds * 1000,
            result_info=self.statistics.to_dict(),
            context=context,
        )

    def consume(self, progress: ProgressRecord) -> None:
        """Account for one progress record and write its line."""
        record = progress.record
        stats = self.statistics

        stats.total_files += 1
        stats.total_bytes += record.size
        if progress.previously_known:
            stats.num_hashes_reused += 1
        else:
            stats.total_hashed_bytes += record.size
        if progress.error is not None:
            stats.failed_files += 1

        if self.error is None:
            self._write_record(progress)

        if self.reporter is not None:
            self.reporter.update(stats, time.perf_counter() - self._start_time)

    def _write_record(self, progress: ProgressRecord) -> None:
        try:
            self.sink.write(encode_record(progress.record) + "\n")
            self.sink.flush()
        except HashVaultError as e:
            self.error = e
            log_operation_error(logger, e)
        except (OSError, ValueError) as e:
            self.error = InfrastructureError(
                ErrorCode.FILE_WRITE_ERROR,
                f"Failed to write record to output: {e}",
                ErrorContext(
                    file_path=progress.record.path,
                    operation="write_record",
                    additional_data={"collector_id": self.collector_id},
                ),
                original_error=e,
            )
            log_operation_error(logger, self.error)

    def stop(self) -> None:
        """Ask the collector to leave its loop at the next poll."""
        self._stopped.set()

    def get_statistics(self) -> HashStatistics:
        """Return the run statistics."""
        return self.statistics
