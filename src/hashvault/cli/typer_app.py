"""
HashVault Typer CLI Application

This is the main Typer-based CLI application for HashVault. The callback
loads settings and configures logging; each command delegates to its
handler and maps failures to exit codes through handle_cli_error.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from pathlib import Path
from typing import Annotated

import typer

from hashvault.cli.common.context import CliContext, LogLevel, set_cli_context
from hashvault.cli.common.error_handler import handle_cli_error
from hashvault.cli.common.options import (
    config_option,
    json_output_option,
    log_file_option,
    log_level_option,
    verbose_option,
    version_option,
)
from hashvault.cli.report_handler import handle_convert_command, handle_inspect_command
from hashvault.cli.scan_handler import handle_scan_command
from hashvault.config import load_settings
from hashvault.shared.constants import (
    CLICommands,
    CLIDefaults,
    CLIHelp,
    CLIOptions,
)
from hashvault.shared.logging import setup_structured_logger


def main_callback(
    verbose: int,
    log_level: LogLevel | None,
    log_file: Path | None,
    config_path: Path | None,
) -> None:
    """
    Load settings, configure logging and publish the CLI context.

    Args:
        verbose: Verbosity level (count-based)
        log_level: Logging level override
        log_file: JSON-lines log file override
        config_path: Explicit configuration file
    """
    settings = load_settings(config_path)
    context = CliContext(
        verbose=verbose,
        log_level=log_level,
        log_file=log_file,
        config_path=config_path,
        settings=settings,
    )
    setup_structured_logger(
        level=context.get_effective_log_level(),
        log_file=context.get_effective_log_file(),
        use_rich_console=settings.logging.rich_console,
    )
    set_cli_context(context)


app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel | None, log_level_option] = None,
    log_file: Annotated[Path | None, log_file_option] = None,
    config: Annotated[Path | None, config_option] = None,
    version: Annotated[bool, version_option] = False,  # pylint: disable=unused-argument
) -> None:
    """Main CLI callback with error handling.

    ``--version`` is handled by its eager callback before this runs.
    """
    try:
        main_callback(verbose, log_level, log_file, config)
    except Exception as e:
        exit_code = handle_cli_error(e, "main-callback")
        raise typer.Exit(exit_code) from e


def _run_handler(command: str, handler: Callable[[], int], *, json_output: bool = False) -> None:
    """Run a command handler and turn its outcome into an exit code."""
    try:
        exit_code = handler()
    except (Exception, KeyboardInterrupt) as e:  # pylint: disable=broad-exception-caught
        exit_code = handle_cli_error(e, command, json_output=json_output)
    if exit_code != CLIDefaults.EXIT_SUCCESS:
        raise typer.Exit(exit_code)


@app.command(CLICommands.SCAN)
def scan_command_typer(  # pylint: disable=too-many-arguments
    root: Path = typer.Argument(
        ...,
        help=CLIHelp.SCAN_ROOT_HELP,
    ),
    compute_hashes: bool | None = typer.Option(
        None,
        CLIOptions.HASH,
        CLIOptions.HASH_SHORT,
        help=CLIHelp.SCAN_HASH_HELP,
    ),
    follow_links: bool | None = typer.Option(
        None,
        CLIOptions.FOLLOW_LINKS,
        CLIOptions.FOLLOW_LINKS_SHORT,
        help=CLIHelp.SCAN_FOLLOW_LINKS_HELP,
    ),
    count: int | None = typer.Option(
        None,
        CLIOptions.COUNT,
        CLIOptions.COUNT_SHORT,
        help=CLIHelp.SCAN_COUNT_HELP,
    ),
    load: Path | None = typer.Option(
        None,
        CLIOptions.LOAD,
        CLIOptions.LOAD_SHORT,
        help=CLIHelp.SCAN_LOAD_HELP,
        dir_okay=False,
    ),
    output: Path | None = typer.Option(
        None,
        CLIOptions.OUTPUT,
        CLIOptions.OUTPUT_SHORT,
        help=CLIHelp.SCAN_OUTPUT_HELP,
        dir_okay=False,
    ),
    progress_every: int | None = typer.Option(
        None,
        CLIOptions.PROGRESS_EVERY,
        CLIOptions.PROGRESS_EVERY_SHORT,
        help=CLIHelp.SCAN_PROGRESS_HELP,
    ),
    workers: int | None = typer.Option(
        None,
        CLIOptions.WORKERS,
        CLIOptions.WORKERS_SHORT,
        help=CLIHelp.SCAN_WORKERS_HELP,
    ),
    algorithm: str | None = typer.Option(
        None,
        CLIOptions.ALGORITHM,
        help=CLIHelp.SCAN_ALGORITHM_HELP,
    ),
    json_output: Annotated[bool, json_output_option] = False,
) -> None:
    """
    Inventory a file tree, one record per regular file.

    Records are written to standard output (or --output) as they complete.
    With --hash, file contents are hashed; with --load, hashes from a
    previous report are reused for files whose size is unchanged.

    Examples:
        # Size-only inventory
        hashvault scan /data

        # Hash everything and keep the report
        hashvault scan /data --hash --output data.hashes

        # Re-run, reusing hashes of unchanged files
        hashvault scan /data --hash --load data.hashes --output data.new
    """
    _run_handler(
        CLICommands.SCAN,
        partial(
            handle_scan_command,
            root,
            compute_hashes=compute_hashes,
            follow_links=follow_links,
            count=count,
            load=load,
            output=output,
            progress_every=progress_every,
            workers=workers,
            algorithm=algorithm,
            json_output=json_output,
        ),
        json_output=json_output,
    )


@app.command(CLICommands.INSPECT)
def inspect_command_typer(
    report: Path = typer.Argument(
        ...,
        help=CLIHelp.INSPECT_FILE_HELP,
        dir_okay=False,
    ),
    json_output: Annotated[bool, json_output_option] = False,
) -> None:
    """
    Summarize a report file (current or legacy format).
    """
    _run_handler(
        CLICommands.INSPECT,
        partial(handle_inspect_command, report, json_output=json_output),
        json_output=json_output,
    )


@app.command(CLICommands.CONVERT)
def convert_command_typer(
    source: Path = typer.Argument(
        ...,
        help=CLIHelp.CONVERT_SOURCE_HELP,
        dir_okay=False,
    ),
    dest: Path = typer.Argument(
        ...,
        help=CLIHelp.CONVERT_DEST_HELP,
        dir_okay=False,
    ),
) -> None:
    """
    Rewrite a report in the current format.

    Legacy lines are upgraded; undecodable lines are dropped.
    """
    _run_handler(CLICommands.CONVERT, partial(handle_convert_command, source, dest))


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
