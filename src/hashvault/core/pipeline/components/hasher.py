"""Hash worker and pool for the HashVault pipeline.

This module provides the HashWorker class (a threading.Thread subclass)
and HashWorkerPool. Workers consume ScanEntry items from the input queue,
reuse cached hashes where the cache allows it, stream everything else
through a hashlib digest and push one ProgressRecord per file to the
output queue.
"""

from __future__ import annotations

import hashlib
import logging
import queue
import threading
import time

from hashvault.core.pipeline.components.cache import CacheStore
from hashvault.core.pipeline.utils import BoundedQueue
from hashvault.shared.constants import Pipeline, ProcessingConfig, Timeout
from hashvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    HashVaultError,
    InfrastructureError,
)
from hashvault.shared.file_records import FileRecord, ProgressRecord, ScanEntry
from hashvault.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


def hash_file(
    path: str,
    algorithm: str = ProcessingConfig.DEFAULT_HASH_ALGORITHM,
    chunk_size: int = ProcessingConfig.DEFAULT_CHUNK_SIZE,
) -> str:
    """Stream a file through ``algorithm`` and return the hex digest.

    Raises:
        OSError: If the file cannot be opened or read to the end.
    """
    digest = hashlib.new(algorithm)
    with open(path, "rb") as handle:
        while chunk := handle.read(chunk_size):
            digest.update(chunk)
    return digest.hexdigest()


class HashWorker(threading.Thread):
    """Worker thread that turns scan entries into progress records.

    Args:
        input_queue: BoundedQueue of ScanEntry items, ended by one sentinel.
        output_queue: BoundedQueue receiving ProgressRecord items.
        cache: Read-only CacheStore shared by every worker.
        compute_hashes: Read file contents. When False only size and
            identity are inventoried and no cache lookup happens.
        algorithm: hashlib algorithm name.
        chunk_size: Read size used while streaming a file.
        worker_id: Optional identifier for this worker thread.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        input_queue: BoundedQueue,
        output_queue: BoundedQueue,
        cache: CacheStore,
        *,
        compute_hashes: bool = True,
        algorithm: str = ProcessingConfig.DEFAULT_HASH_ALGORITHM,
        chunk_size: int = ProcessingConfig.DEFAULT_CHUNK_SIZE,
        worker_id: str | None = None,
    ) -> None:
        super().__init__()
        self.input_queue = input_queue
        self.output_queue = output_queue
        self.cache = cache
        self.compute_hashes = compute_hashes
        self.algorithm = algorithm
        self.chunk_size = chunk_size
        self.worker_id = worker_id or f"worker_{id(self)}"
        self.error: HashVaultError | None = None
        self._stop_event = threading.Event()

    def run(self) -> None:
        """Main worker loop that processes entries until the sentinel."""
        while not self._stop_event.is_set():
            try:
                item = self.input_queue.get(timeout=Timeout.PIPELINE_QUEUE)
            except queue.Empty:
                continue

            try:
                if item is Pipeline.SENTINEL:
                    break
                self._put_result(self._process_safely(item))
            finally:
                self.input_queue.task_done()

    def stop(self) -> None:
        """Ask the worker to leave its loop at the next poll."""
        self._stop_event.set()

    def _put_result(self, progress: ProgressRecord) -> None:
        # A stopped worker gives up instead of blocking on a full queue
        while not self._stop_event.is_set():
            try:
                self.output_queue.put(progress, timeout=Timeout.PIPELINE_QUEUE)
            except queue.Full:
                continue
            return

    def process_entry(self, entry: ScanEntry) -> ProgressRecord:
        """Produce the progress record for one scan entry.

        A cached hash is reused when the cached record carries a hash and
        its size equals the current size. Modification time and content are
        not compared, so a same-size modification goes unnoticed.
        """
        if not self.compute_hashes:
            return ProgressRecord(FileRecord(entry.path, entry.size, entry.modified))

        cached = self.cache.lookup(entry.path)
        if cached is not None and cached.hash is not None and cached.size == entry.size:
            return ProgressRecord(
                FileRecord(entry.path, entry.size, entry.modified, cached.hash),
                previously_known=True,
            )

        return self._hash_entry(entry)

    def _hash_entry(self, entry: ScanEntry) -> ProgressRecord:
        start_time = time.perf_counter()
        try:
            digest = hash_file(entry.path, self.algorithm, self.chunk_size)
        except OSError as e:
            error = InfrastructureError(
                ErrorCode.FILE_READ_ERROR,
                f"Failed to hash file: {entry.path}",
                ErrorContext(
                    file_path=entry.path,
                    operation="hash_file",
                    additional_data={"worker_id": self.worker_id},
                ),
                original_error=e,
            )
            log_operation_error(logger, error, level=logging.WARNING)
            return ProgressRecord(
                FileRecord(entry.path, entry.size, entry.modified),
                error=e.strerror or str(e),
            )

        elapsed = time.perf_counter() - start_time
        log_operation_success(
            logger,
            "hash_file",
            elapsed * 1000,
            {"size": entry.size, "worker_id": self.worker_id},
            ErrorContext(file_path=entry.path),
        )
        return ProgressRecord(
            FileRecord(entry.path, entry.size, entry.modified, digest),
            throughput=entry.size / elapsed if elapsed > 0 else None,
        )

    def _process_safely(self, entry: ScanEntry) -> ProgressRecord:
        """Process an entry, keeping the worker alive on unexpected errors.

        The first unexpected error is kept in ``self.error`` so the
        orchestrator can fail the run once the queues are drained.
        """
        try:
            return self.process_entry(entry)
        except Exception as e:  # pylint: disable=broad-exception-caught
            error = InfrastructureError(
                ErrorCode.HASHER_ERROR,
                f"Unexpected error while processing: {entry.path}",
                ErrorContext(
                    file_path=entry.path,
                    operation="process_entry",
                    additional_data={"worker_id": self.worker_id},
                ),
                original_error=e,
            )
            log_operation_error(logger, error)
            if self.error is None:
                self.error = error
            return ProgressRecord(
                FileRecord(entry.path, entry.size, entry.modified),
                error=str(e),
            )


class HashWorkerPool:
    """Pool of HashWorker threads for concurrent hashing.

    Args:
        num_workers: Number of worker threads to create.
        input_queue: BoundedQueue instance to get scan entries from.
        output_queue: BoundedQueue instance to put progress records into.
        cache: CacheStore shared by all workers.
        compute_hashes: Whether workers read file contents.
        algorithm: hashlib algorithm name.
        chunk_size: Read size used while streaming a file.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        num_workers: int,
        input_queue: BoundedQueue,
        output_queue: BoundedQueue,
        cache: CacheStore,
        *,
        compute_hashes: bool = True,
        algorithm: str = ProcessingConfig.DEFAULT_HASH_ALGORITHM,
        chunk_size: int = ProcessingConfig.DEFAULT_CHUNK_SIZE,
    ) -> None:
        if num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")
        self.num_workers = num_workers
        self.input_queue = input_queue
        self.output_queue = output_queue
        self.cache = cache
        self.compute_hashes = compute_hashes
        self.algorithm = algorithm
        self.chunk_size = chunk_size
        self.workers: list[HashWorker] = []
        self._started = False

    def start(self) -> None:
        """Start all worker threads."""
        if self._started:
            raise RuntimeError("Worker pool has already been started")

        for i in range(self.num_workers):
            worker = HashWorker(
                input_queue=self.input_queue,
                output_queue=self.output_queue,
                cache=self.cache,
                compute_hashes=self.compute_hashes,
                algorithm=self.algorithm,
                chunk_size=self.chunk_size,
                worker_id=f"worker_{i}",
            )
            self.workers.append(worker)
            worker.start()

        self._started = True

    def join(self, timeout: float | None = None) -> None:
        """Wait for all worker threads to complete.

        Args:
            timeout: Maximum time to wait for each thread.
        """
        if not self.workers:
            raise RuntimeError("Worker pool has not been started")

        for worker in self.workers:
            worker.join(timeout=timeout)

    def stop(self) -> None:
        """Stop all worker threads."""
        for worker in self.workers:
            worker.stop()
        self._started = False

    def is_alive(self) -> bool:
        """Check if any worker thread is still alive."""
        return any(worker.is_alive() for worker in self.workers)

    @property
    def errors(self) -> list[HashVaultError]:
        """Unexpected errors recorded by the workers."""
        return [worker.error for worker in self.workers if worker.error is not None]
