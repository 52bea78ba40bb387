"""Hashing pipeline for HashVault.

This package contains the pipeline that inventories a file tree:
- run_pipeline: Main orchestration function for one run
- BoundedQueue: Thread-safe queue with size limits for backpressure
- Statistics classes: For collecting run metrics
- CacheStore: Records of a previous run
- HashWorkerPool / ResultCollector: The worker and consumer threads

Recommended imports:
    from hashvault.core.pipeline import run_pipeline
    from hashvault.core.pipeline.domain import PipelineFactory
    from hashvault.core.pipeline.components import CacheStore, scan_tree
"""

from hashvault.core.pipeline.domain.orchestrator import run_pipeline

__all__ = ["run_pipeline"]
