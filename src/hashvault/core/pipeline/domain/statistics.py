"""End-of-run statistics: a text report and a dict/JSON export."""

from __future__ import annotations

import json
from typing import Any

from hashvault.core.pipeline.utils import (
    HashStatistics,
    QueueStatistics,
    ScanStatistics,
)
from hashvault.shared.constants import FileSystem


def _percent(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def format_statistics(
    hash_stats: HashStatistics,
    scan_stats: ScanStatistics | None = None,
    queue_stats: QueueStatistics | None = None,
) -> str:
    """Format run statistics into a human-readable report.

    Args:
        hash_stats: HashStatistics returned by the collector.
        scan_stats: Optional ScanStatistics of the directory walk.
        queue_stats: Optional QueueStatistics of the result queue.

    Returns:
        A formatted multi-line string containing all statistics.
    """
    reuse_rate = _percent(hash_stats.num_hashes_reused, hash_stats.total_files)
    mib = FileSystem.MEGABYTE

    lines = [
        "",
        "=" * 60,
        "                      HASH STATISTICS",
        "=" * 60,
        "",
        "Timing:",
        f"  - Total run time:       {hash_stats.elapsed_seconds:.2f}s",
        f"  - Hash throughput:      {hash_stats.throughput / mib:.1f} MB/s",
        "",
    ]

    if scan_stats is not None:
        lines += [
            "Scanner:",
            f"  - Files scanned:        {scan_stats.files_scanned:,}",
            f"  - Directories scanned:  {scan_stats.directories_scanned:,}",
            f"  - Unreadable entries:   {scan_stats.errors:,}",
            "",
        ]

    if queue_stats is not None:
        lines += [
            "Queue:",
            f"  - Items put:            {queue_stats.items_put:,}",
            f"  - Items got:            {queue_stats.items_got:,}",
            f"  - Peak size:            {queue_stats.max_size:,}",
            "",
        ]

    lines += [
        "Files:",
        f"  - Files processed:      {hash_stats.total_files:,}",
        f"  - Hashes reused:        {hash_stats.num_hashes_reused:,} ({reuse_rate:.2f}%)",
        f"  - Failed reads:         {hash_stats.failed_files:,}",
        "",
        "Bytes:",
        f"  - Total size:           {hash_stats.total_bytes // mib:,} MB",
        f"  - Hashed:               {hash_stats.total_hashed_bytes // mib:,} MB",
        "",
        "=" * 60,
        "",
    ]

    return "\n".join(lines)


class StatisticsAggregator:
    """Bundles the statistics objects of one run for export."""

    def __init__(
        self,
        hash_stats: HashStatistics,
        scan_stats: ScanStatistics | None = None,
        queue_stats: QueueStatistics | None = None,
    ) -> None:
        self.hash_stats = hash_stats
        self.scan_stats = scan_stats
        self.queue_stats = queue_stats

    def aggregate(self) -> dict[str, Any]:
        """Collect the counters into nested sections.

        Returns:
            Dictionary with a ``files`` section and, when available,
            ``scanner`` and ``queue`` sections.
        """
        data: dict[str, Any] = {
            "files": {
                **self.hash_stats.to_dict(),
                "reuse_rate": _percent(
                    self.hash_stats.num_hashes_reused,
                    self.hash_stats.total_files,
                ),
            },
        }
        if self.scan_stats is not None:
            data["scanner"] = self.scan_stats.snapshot()
        if self.queue_stats is not None:
            data["queue"] = self.queue_stats.snapshot()
        return data

    def to_json(self, indent: int = 2) -> str:
        """Export statistics as a JSON string."""
        return json.dumps(self.aggregate(), ensure_ascii=False, indent=indent)
