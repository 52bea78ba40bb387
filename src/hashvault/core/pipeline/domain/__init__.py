"""Pipeline domain logic package.

This package contains domain-specific logic for the pipeline:
- lifecycle: Component lifecycle management functions
- orchestrator: Pipeline component factory and orchestration
- statistics: Statistics formatting and aggregation
"""

from __future__ import annotations

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
from hashvault.core.pipeline.domain.orchestrator import (
    PipelineComponents,
    PipelineFactory,
    open_output,
    run_pipeline,
)
from hashvault.core.pipeline.domain.statistics import (
    StatisticsAggregator,
    format_statistics,
)

__all__ = [
    "PipelineComponents",
    "PipelineFactory",
    "StatisticsAggregator",
    "feed_entries",
    "force_shutdown_if_needed",
    "format_statistics",
    "graceful_shutdown",
    "open_output",
    "run_pipeline",
    "signal_collector_shutdown",
    "signal_worker_shutdown",
    "start_pipeline_components",
    "wait_for_collector_completion",
    "wait_for_worker_completion",
]
