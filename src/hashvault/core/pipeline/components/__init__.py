"""Pipeline components package.

This package contains the core pipeline components:
- DirectoryScanner / scan_tree: Materializes the candidate file list
- CacheStore: Records of a previous run, keyed by path
- HashWorkerPool: Hashes files with worker threads
- ResultCollector: Writes records and accumulates run statistics
"""

from __future__ import annotations

from hashvault.core.pipeline.components.cache import CacheLoadReport, CacheStore
from hashvault.core.pipeline.components.collector import ProgressReporter, ResultCollector
from hashvault.core.pipeline.components.hasher import HashWorker, HashWorkerPool, hash_file
from hashvault.core.pipeline.components.scanner import DirectoryScanner, scan_tree

__all__ = [
    "CacheLoadReport",
    "CacheStore",
    "DirectoryScanner",
    "HashWorker",
    "HashWorkerPool",
    "ProgressReporter",
    "ResultCollector",
    "hash_file",
    "scan_tree",
]
