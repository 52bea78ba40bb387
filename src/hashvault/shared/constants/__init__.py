"""
HashVault Constants Module

This module provides centralized constants for HashVault. All magic values
and configuration constants are defined here to ensure consistency across
the codebase.
"""

from .cli import CLICommands, CLIDefaults, CLIHelp, CLIMessages, CLIOptions
from .codec import LegacyRecordLine, PathEscape, RecordLine
from .system import (
    Application,
    FileSystem,
    Pipeline,
    ProcessingConfig,
    Timeout,
)

__all__ = [
    "CLICommands",
    "CLIDefaults",
    "CLIHelp",
    "CLIMessages",
    "CLIOptions",
    "Application",
    "FileSystem",
    "LegacyRecordLine",
    "PathEscape",
    "Pipeline",
    "ProcessingConfig",
    "RecordLine",
    "Timeout",
]
