"""
Reusable Typer Options Module

This module provides the Typer options shared by the main callback and
the commands. Use them as ``Annotated`` metadata:

    verbose: Annotated[int, verbose_option] = 0
"""

from __future__ import annotations

import typer

from hashvault.shared.constants import CLIDefaults, CLIHelp, CLIOptions


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=CLIDefaults.VERSION))
        raise typer.Exit


# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

# Log level option - enum-based with case-insensitive choices
log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: from config, else WARNING.",
)

log_file_option = typer.Option(
    CLIOptions.LOG_FILE,
    help=CLIHelp.LOG_FILE_HELP,
    dir_okay=False,
)

config_option = typer.Option(
    CLIOptions.CONFIG,
    help=CLIHelp.CONFIG_HELP,
    dir_okay=False,
)

# JSON output option - flag-based
json_output_option = typer.Option(
    CLIOptions.JSON,
    help=CLIHelp.JSON_HELP,
)

# Version option - for main app only
version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    callback=version_callback,
    is_eager=True,
)
