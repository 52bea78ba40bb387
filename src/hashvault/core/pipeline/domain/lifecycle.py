"""Start, feed, drain and stop the threads of one run.

The orchestrator calls these in order:
start -> feed -> worker sentinels -> wait workers -> collector sentinel
-> wait collector. On failure it calls graceful_shutdown and, always,
force_shutdown_if_needed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from hashvault.core.pipeline.components import HashWorkerPool, ResultCollector
from hashvault.core.pipeline.utils import BoundedQueue, HashStatistics
from hashvault.shared.constants import Pipeline, Timeout
from hashvault.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from hashvault.shared.file_records import ScanEntry
from hashvault.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


def _fail(code: ErrorCode, message: str, context: ErrorContext, cause: Exception | None = None) -> InfrastructureError:
    error = InfrastructureError(code, message, context, original_error=cause)
    log_operation_error(logger=logger, error=error)
    return error


def start_pipeline_components(worker_pool: HashWorkerPool, collector: ResultCollector) -> None:
    """Start the collector, then the workers.

    Raises:
        InfrastructureError: PIPELINE_INITIALIZATION_ERROR if a thread
            cannot be started.
    """
    context = ErrorContext(
        operation="start_pipeline_components",
        additional_data={"num_workers": worker_pool.num_workers},
    )
    try:
        collector.start()
        worker_pool.start()
    except (RuntimeError, ValueError) as e:
        raise _fail(
            ErrorCode.PIPELINE_INITIALIZATION_ERROR,
            f"Could not start pipeline threads: {e}",
            context,
            e,
        ) from e
    logger.info("Started collector and %s hash worker(s)", worker_pool.num_workers)
    log_operation_success(logger, "start_pipeline_components", 0.0, context=context)


def feed_entries(entry_queue: BoundedQueue, entries: Iterable[ScanEntry]) -> int:
    """Put every candidate on the entry queue and return how many there were."""
    queued = 0
    for queued, entry in enumerate(entries, start=1):
        entry_queue.put(entry)
    logger.info("Queued %s file(s) for the hash workers", queued)
    return queued


def _put_sentinels(target: BoundedQueue, count: int, operation: str) -> None:
    try:
        for _ in range(count):
            target.put(Pipeline.SENTINEL, timeout=Timeout.PIPELINE_SENTINEL)
    except Exception as e:
        raise _fail(
            ErrorCode.QUEUE_OPERATION_ERROR,
            f"Could not queue end-of-input marker: {e}",
            ErrorContext(operation=operation, additional_data={"sentinels": count}),
            e,
        ) from e


def signal_worker_shutdown(entry_queue: BoundedQueue, num_workers: int) -> None:
    """Queue one sentinel per worker behind the last entry.

    Raises:
        InfrastructureError: QUEUE_OPERATION_ERROR if a sentinel times out.
    """
    _put_sentinels(entry_queue, num_workers, "signal_worker_shutdown")


def signal_collector_shutdown(result_queue: BoundedQueue) -> None:
    """Queue the single sentinel that ends the collector.

    Raises:
        InfrastructureError: QUEUE_OPERATION_ERROR if the sentinel times out.
    """
    _put_sentinels(result_queue, 1, "signal_collector_shutdown")


def wait_for_worker_completion(worker_pool: HashWorkerPool, collector: ResultCollector) -> None:
    """Block until every hash worker has exited.

    Workers block forever on a full result queue once the collector is
    gone, so a dead collector ends the wait with COLLECTOR_ERROR. Errors
    the workers recorded are raised as HASHER_ERROR after the join.
    """
    context = ErrorContext(operation="wait_for_worker_completion")

    while worker_pool.is_alive():
        worker_pool.join(timeout=Timeout.PIPELINE_QUEUE)
        if worker_pool.is_alive() and not collector.is_alive():
            raise _fail(
                ErrorCode.COLLECTOR_ERROR,
                "Result collector exited while hash workers were still running",
                context,
                collector.error,
            )

    failures = worker_pool.errors
    if failures:
        raise InfrastructureError(
            ErrorCode.HASHER_ERROR,
            f"{len(failures)} hash worker(s) failed: {failures[0].message}",
            context,
            original_error=failures[0],
        )
    logger.debug("All hash workers finished")


def wait_for_collector_completion(collector: ResultCollector) -> HashStatistics:
    """Join the collector and hand back its statistics.

    Raises:
        InfrastructureError: COLLECTOR_ERROR if the collector recorded an error.
    """
    collector.join()
    if collector.error is not None:
        raise _fail(
            ErrorCode.COLLECTOR_ERROR,
            f"Result collector failed: {collector.error.message}",
            ErrorContext(operation="wait_for_collector_completion"),
            collector.error,
        )

    statistics = collector.get_statistics()
    logger.info("Collector wrote %s record(s)", statistics.total_files)
    return statistics


def graceful_shutdown(worker_pool: HashWorkerPool, collector: ResultCollector) -> None:
    """Set the stop flag of every thread."""
    logger.info("Stopping pipeline threads")
    worker_pool.stop()
    collector.stop()


def force_shutdown_if_needed(worker_pool: HashWorkerPool, collector: ResultCollector) -> None:
    """Stop anything still running and give it a short grace period."""
    for name, component in (("hash pool", worker_pool), ("collector", collector)):
        if component.is_alive():
            logger.warning("%s still running, stopping it", name)
            component.stop()
            component.join(timeout=Timeout.PIPELINE_SHUTDOWN)

    if worker_pool.is_alive() or collector.is_alive():
        log_operation_error(
            logger=logger,
            error=InfrastructureError(
                ErrorCode.PIPELINE_SHUTDOWN_ERROR,
                "Pipeline threads still running after the grace period",
                ErrorContext(operation="force_shutdown_if_needed"),
            ),
            level=logging.WARNING,
        )
