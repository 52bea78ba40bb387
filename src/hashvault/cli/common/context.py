"""Per-invocation CLI state.

The root callback builds one ``CliContext`` from the global options and the
loaded settings and publishes it through a ContextVar; command handlers
read it back with ``get_cli_context``.
"""

from __future__ import annotations

import contextvars
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from hashvault.config import Settings


class LogLevel(str, Enum):
    """Values accepted by ``--log-level``."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """Global options of one invocation plus the settings they selected."""

    verbose: int = Field(default=0, ge=0, description="Number of -v flags")
    log_level: LogLevel | None = Field(default=None, description="--log-level, if given")
    log_file: Path | None = Field(default=None, description="--log-file, if given")
    config_path: Path | None = Field(default=None, description="--config, if given")
    settings: Settings = Field(default_factory=Settings)

    def is_verbose(self) -> bool:
        return self.verbose > 0

    def get_effective_log_level(self) -> str:
        """Resolve the log level: ``-v`` means DEBUG, then --log-level, then settings."""
        if self.is_verbose():
            return LogLevel.DEBUG.value
        if self.log_level is None:
            return self.settings.logging.level
        return self.log_level.value

    def get_effective_log_file(self) -> str | None:
        """Resolve the JSON log file: --log-file first, then settings."""
        if self.log_file is None:
            return self.settings.logging.file
        return str(self.log_file)


_current_context: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "hashvault_cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """Return the context published by the root callback.

    Raises:
        RuntimeError: If no command callback has run yet
    """
    context = _current_context.get()
    if context is None:
        raise RuntimeError("CLI context is not set; the root callback has not run")
    return context


def set_cli_context(context: CliContext) -> None:
    _current_context.set(context)


def clear_cli_context() -> None:
    _current_context.set(None)
