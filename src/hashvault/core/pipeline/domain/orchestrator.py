"""Pipeline orchestration and component factory.

This module provides the factory and orchestration function for a run:
- PipelineFactory: Creates and wires up all pipeline components
- run_pipeline: Loads the cache, scans, hashes and collects one tree
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from hashvault.config.models import HashSettings
from hashvault.core.pipeline.components import (
    CacheStore,
    HashWorkerPool,
    ProgressReporter,
    ResultCollector,
    scan_tree,
)
from hashvault.core.pipeline.domain.lifecycle import (
    feed_entries,
    force_shutdown_if_needed,
    graceful_shutdown,
    signal_collector_shutdown,
    signal_worker_shutdown,
    start_pipeline_components,
    wait_for_collector_completion,
    wait_for_worker_completion,
)
from hashvault.core.pipeline.domain.statistics import format_statistics
from hashvault.core.pipeline.utils import (
    BoundedQueue,
    HashStatistics,
    QueueStatistics,
    ScanStatistics,
)
from hashvault.shared.constants import FileSystem
from hashvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    HashVaultError,
    InfrastructureError,
)
from hashvault.shared.file_records import ScanEntry
from hashvault.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


@dataclass
class PipelineComponents:
    """Wired components of one run."""

    entry_queue: BoundedQueue
    result_queue: BoundedQueue
    worker_pool: HashWorkerPool
    collector: ResultCollector


class PipelineFactory:
    """Factory for creating and wiring pipeline components."""

    @staticmethod
    def create_components(
        settings: HashSettings,
        cache: CacheStore,
        sink: TextIO,
        diagnostic_stream: TextIO | None = None,
        queue_stats: QueueStatistics | None = None,
    ) -> PipelineComponents:
        """Create and wire the queues, the worker pool and the collector.

        The entry queue is unbounded because the candidate list is already
        materialized; the result queue is bounded by
        ``settings.max_queue_size``.
        """
        entry_queue = BoundedQueue()
        result_queue = BoundedQueue(maxsize=settings.max_queue_size, stats=queue_stats)

        worker_pool = HashWorkerPool(
            num_workers=settings.num_workers,
            input_queue=entry_queue,
            output_queue=result_queue,
            cache=cache,
            compute_hashes=settings.compute_hashes,
            algorithm=settings.hash_algorithm,
            chunk_size=settings.chunk_size,
        )

        reporter = None
        if diagnostic_stream is not None and settings.progress_every:
            reporter = ProgressReporter(diagnostic_stream, settings.progress_every)

        collector = ResultCollector(
            output_queue=result_queue,
            sink=sink,
            reporter=reporter,
            collector_id="main_collector",
        )

        return PipelineComponents(
            entry_queue=entry_queue,
            result_queue=result_queue,
            worker_pool=worker_pool,
            collector=collector,
        )


def open_output(output_path: str | Path) -> TextIO:
    """Create (or truncate) the report file, creating parent directories.

    Raises:
        InfrastructureError: If the file cannot be created.
    """
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        return open(  # noqa: SIM115
            output_path,
            "w",
            encoding=FileSystem.REPORT_ENCODING,
            errors=FileSystem.REPORT_ERRORS,
            newline="\n",
        )
    except OSError as e:
        raise InfrastructureError(
            ErrorCode.FILE_CREATE_ERROR,
            f"Cannot create output file {output_path}: {e}",
            ErrorContext(file_path=str(output_path), operation="open_output"),
            original_error=e,
        ) from e


def run_pipeline(  # pylint: disable=too-many-arguments
    root_path: str | Path,
    settings: HashSettings,
    *,
    cache_path: str | Path | None = None,
    output_path: str | Path | None = None,
    output_stream: TextIO | None = None,
    diagnostic_stream: TextIO | None = None,
    scan_stats: ScanStatistics | None = None,
    queue_stats: QueueStatistics | None = None,
) -> HashStatistics:
    """Run one inventory of ``root_path``.

    The run:
    1. loads the cache from ``cache_path`` (when given),
    2. scans the tree into a candidate list,
    3. opens the output (``output_path``, else ``output_stream``, else stdout),
    4. hashes in the worker pool while the collector writes each record.

    Setup failures (missing root, unreadable cache, uncreatable output)
    abort before hashing starts. Loading the cache and scanning happen
    before the output is opened, so the output may be the cache file.

    Args:
        root_path: Directory (or single file) to inventory.
        settings: Hashing settings for this run.
        cache_path: Previous report to reuse hashes from.
        output_path: Report file to write.
        output_stream: Text stream to write to when no output_path is given.
        diagnostic_stream: Stream for the progress status (None disables it).
        scan_stats: Optional ScanStatistics to fill during the scan.
        queue_stats: Optional QueueStatistics for the result queue.

    Returns:
        Final statistics of the run.

    Raises:
        InfrastructureError: If setup fails or a pipeline thread fails.
    """
    root = str(root_path)
    context = ErrorContext(
        file_path=root,
        operation="run_pipeline",
        additional_data={
            "num_workers": settings.num_workers,
            "compute_hashes": settings.compute_hashes,
            "max_queue_size": settings.max_queue_size,
        },
    )
    logger.info(
        "Starting pipeline: root=%s, hashing=%s, workers=%s",
        root,
        settings.compute_hashes,
        settings.num_workers,
    )
    start_time = time.time()

    cache = CacheStore.load(cache_path)
    scan_stats = scan_stats if scan_stats is not None else ScanStatistics()
    entries = scan_tree(
        root,
        follow_links=settings.follow_links,
        max_entries=settings.max_entries,
        stats=scan_stats,
    )
    logger.info("Scan found %s files", len(entries))

    with ExitStack() as stack:
        if output_path is not None:
            sink = stack.enter_context(open_output(output_path))
        else:
            sink = output_stream if output_stream is not None else sys.stdout

        components = PipelineFactory.create_components(
            settings,
            cache,
            sink,
            diagnostic_stream=diagnostic_stream,
            queue_stats=queue_stats,
        )
        statistics = _execute_pipeline(components, entries, settings.num_workers, context)

    log_operation_success(
        logger=logger,
        operation="run_pipeline",
        duration_ms=(time.time() - start_time) * 1000,
        result_info=statistics.to_dict(),
        context=context,
    )
    logger.info(format_statistics(statistics, scan_stats, queue_stats))
    return statistics


def _execute_pipeline(
    components: PipelineComponents,
    entries: list[ScanEntry],
    num_workers: int,
    context: ErrorContext,
) -> HashStatistics:
    """Run the worker and collector stages over the candidate list."""
    worker_pool = components.worker_pool
    collector = components.collector

    try:
        start_pipeline_components(worker_pool, collector)
        feed_entries(components.entry_queue, entries)
        signal_worker_shutdown(components.entry_queue, num_workers)
        wait_for_worker_completion(worker_pool, collector)
        signal_collector_shutdown(components.result_queue)
        return wait_for_collector_completion(collector)

    except HashVaultError:
        graceful_shutdown(worker_pool, collector)
        raise

    except Exception as e:
        error = InfrastructureError(
            ErrorCode.PIPELINE_EXECUTION_ERROR,
            f"Pipeline execution failed: {e}",
            context,
            original_error=e,
        )
        log_operation_error(logger=logger, error=error)
        graceful_shutdown(worker_pool, collector)
        raise error from e

    finally:
        force_shutdown_if_needed(worker_pool, collector)
