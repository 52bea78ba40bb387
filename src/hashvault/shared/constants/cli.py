"""
CLI Configuration Constants

This module contains all constants related to command-line interface
configuration, default values, and user interaction settings.
"""

from __future__ import annotations

from .system import Application


class CLICommands:
    """CLI command names."""

    SCAN = "scan"
    INSPECT = "inspect"
    CONVERT = "convert"


class CLIDefaults:
    """CLI default values."""

    VERSION = Application.VERSION

    # Exit codes
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_INVALID_ARGUMENTS = 2
    EXIT_INTERRUPTED = 130


class CLIOptions:
    """CLI option flags."""

    HASH = "--hash/--no-hash"
    HASH_SHORT = "-H"
    FOLLOW_LINKS = "--follow-links/--no-follow-links"
    FOLLOW_LINKS_SHORT = "-f"
    COUNT = "--count"
    COUNT_SHORT = "-n"
    LOAD = "--load"
    LOAD_SHORT = "-l"
    OUTPUT = "--output"
    OUTPUT_SHORT = "-o"
    PROGRESS_EVERY = "--progress-every"
    PROGRESS_EVERY_SHORT = "-p"
    WORKERS = "--workers"
    WORKERS_SHORT = "-w"
    ALGORITHM = "--algorithm"
    JSON = "--json"
    CONFIG = "--config"
    LOG_FILE = "--log-file"


class CLIHelp:
    """CLI help texts."""

    APP_NAME = "hashvault"
    APP_DESCRIPTION = Application.DESCRIPTION
    APP_STYLE = "rich"
    VERSION_TEXT = "HashVault v{version}"

    SCAN_ROOT_HELP = "Directory tree (or single file) to inventory"
    SCAN_HASH_HELP = "Compute content hashes, or force a size-only inventory with --no-hash (default: from configuration)"
    SCAN_FOLLOW_LINKS_HELP = "Follow symbolic links while walking the tree"
    SCAN_COUNT_HELP = "Scan at most this many files (0 = unlimited)"
    SCAN_LOAD_HELP = "Prior report to reuse hashes from"
    SCAN_OUTPUT_HELP = "Write the report here instead of standard output"
    SCAN_PROGRESS_HELP = "Print a progress status every N files (0 = never)"
    SCAN_WORKERS_HELP = "Number of hashing worker threads"
    SCAN_ALGORITHM_HELP = "hashlib algorithm used for content hashes"
    JSON_HELP = "Print final statistics as JSON"

    INSPECT_FILE_HELP = "Report file to summarize"
    CONVERT_SOURCE_HELP = "Report file to read (current or legacy format)"
    CONVERT_DEST_HELP = "Destination for the current-format report"

    CONFIG_HELP = "Path to a hashvault TOML configuration file"
    LOG_FILE_HELP = "Also write JSON-lines logs to this file"


class CLIMessages:
    """CLI message templates."""

    STATS_TITLE = "HashVault statistics"
    INSPECT_TITLE = "Report summary"
    CONVERTED = "[green]Converted {count} records to {path}[/green]"
    INTERRUPTED = "Command interrupted by user"
