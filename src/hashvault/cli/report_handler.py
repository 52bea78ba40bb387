"""Inspect and convert command handlers for HashVault CLI."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from hashvault.core.pipeline.components import CacheStore
from hashvault.core.pipeline.domain import open_output
from hashvault.shared.constants import CLIDefaults, CLIMessages

logger = logging.getLogger(__name__)

_SUMMARY_LABELS = {
    "lines_read": "Lines read",
    "records_loaded": "Records loaded",
    "legacy_records": "Legacy-format records",
    "skipped_lines": "Skipped lines",
    "hashed_records": "Records with a hash",
    "total_bytes": "Total bytes",
}


def handle_inspect_command(
    report: Path,
    *,
    json_output: bool = False,
    console: Console | None = None,
) -> int:
    """Summarize a report file.

    Returns:
        Exit code (0 for success)
    """
    console = console or Console()
    summary = CacheStore.load(report).summary()

    if json_output:
        console.print_json(json.dumps({"path": str(report), **summary}))
        return CLIDefaults.EXIT_SUCCESS

    table = Table(title=CLIMessages.INSPECT_TITLE, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    for key, label in _SUMMARY_LABELS.items():
        table.add_row(label, f"{summary[key]:,}")
    console.print(table)
    return CLIDefaults.EXIT_SUCCESS


def handle_convert_command(
    source: Path,
    dest: Path,
    *,
    console: Console | None = None,
) -> int:
    """Rewrite a report (current or legacy) in the current format.

    The source is read completely before the destination is opened, so
    both may name the same file.

    Returns:
        Exit code (0 for success)
    """
    console = console or Console(stderr=True)
    store = CacheStore.load(source)

    with open_output(dest) as sink:
        count = store.dump(sink)

    logger.info("Converted %s records from %s to %s", count, source, dest)
    console.print(CLIMessages.CONVERTED.format(count=count, path=dest))
    return CLIDefaults.EXIT_SUCCESS
