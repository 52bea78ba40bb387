"""Scan command handler for HashVault CLI.

Runs the pipeline with settings from the configuration file, overridden by
command-line flags. Records go to the output file or standard output;
progress and the final statistics go to standard error.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from hashvault.cli.common.context import get_cli_context
from hashvault.config import HashSettings
from hashvault.core.pipeline import run_pipeline
from hashvault.core.pipeline.domain import StatisticsAggregator
from hashvault.core.pipeline.utils import HashStatistics, QueueStatistics, ScanStatistics
from hashvault.shared.constants import CLICommands, CLIDefaults, CLIMessages, FileSystem
from hashvault.shared.errors import CliError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)


def build_hash_settings(base: HashSettings, overrides: dict[str, Any]) -> HashSettings:
    """Apply command-line overrides on top of the configured settings.

    Only overrides that are not None are applied; the result is validated.

    Raises:
        CliError: If an override is out of range.
    """
    update = {key: value for key, value in overrides.items() if value is not None}
    try:
        return HashSettings.model_validate({**base.model_dump(), **update})
    except ValidationError as e:
        raise CliError(
            ErrorCode.CLI_INVALID_ARGUMENTS,
            f"Invalid scan options: {e}",
            ErrorContext(operation="build_hash_settings"),
            original_error=e,
            command=CLICommands.SCAN,
            exit_code=CLIDefaults.EXIT_INVALID_ARGUMENTS,
        ) from e


def render_statistics(
    console: Console,
    hash_stats: HashStatistics,
    scan_stats: ScanStatistics,
) -> None:
    """Print the final statistics as a rich table."""
    mib = FileSystem.MEGABYTE
    table = Table(title=CLIMessages.STATS_TITLE, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Files scanned", f"{hash_stats.total_files:,}")
    table.add_row("Total size", f"{hash_stats.total_bytes / mib:,.1f} MB")
    table.add_row("Hashed", f"{hash_stats.total_hashed_bytes / mib:,.1f} MB")
    table.add_row("Hashes reused", f"{hash_stats.num_hashes_reused:,}")
    table.add_row("Failed reads", f"{hash_stats.failed_files:,}")
    table.add_row("Unreadable entries", f"{scan_stats.errors:,}")
    table.add_row("Elapsed", f"{hash_stats.elapsed_seconds:.2f}s")
    table.add_row("Throughput", f"{hash_stats.throughput / mib:.1f} MB/s")
    console.print(table)


def handle_scan_command(  # pylint: disable=too-many-arguments
    root: Path,
    *,
    compute_hashes: bool | None = None,
    follow_links: bool | None = None,
    count: int | None = None,
    load: Path | None = None,
    output: Path | None = None,
    progress_every: int | None = None,
    workers: int | None = None,
    algorithm: str | None = None,
    json_output: bool = False,
    console: Console | None = None,
) -> int:
    """Handle the scan command.

    Returns:
        Exit code (0 for success)
    """
    context = get_cli_context()
    settings = build_hash_settings(
        context.settings.hashing,
        {
            "compute_hashes": compute_hashes,
            "follow_links": follow_links,
            "max_entries": count,
            "progress_every": progress_every,
            "num_workers": workers,
            "hash_algorithm": algorithm,
        },
    )
    console = console or Console(stderr=True)

    scan_stats = ScanStatistics()
    queue_stats = QueueStatistics()
    logger.info("Scan command started for %s", root)
    hash_stats = run_pipeline(
        root,
        settings,
        cache_path=load,
        output_path=output,
        output_stream=sys.stdout,
        diagnostic_stream=sys.stderr,
        scan_stats=scan_stats,
        queue_stats=queue_stats,
    )

    if json_output:
        sys.stderr.write(StatisticsAggregator(hash_stats, scan_stats, queue_stats).to_json() + "\n")
    else:
        render_statistics(console, hash_stats, scan_stats)

    logger.info("Scan command completed")
    return CLIDefaults.EXIT_SUCCESS
