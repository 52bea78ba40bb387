"""Logger setup and structured log helpers.

Standard output is reserved for the record stream, so every console handler
installed here writes to standard error. A log file, when configured,
always receives one JSON object per line.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from hashvault.shared.errors import ErrorContext, HashVaultError

# LogRecord attributes set through ``extra=`` by the helpers below
STRUCTURED_FIELDS = ("error_code", "operation", "context", "duration_ms", "result_info")

LOG_THEME = Theme(
    {
        "logging.level.debug": "dim",
        "logging.level.info": "green",
        "logging.level.warning": "yellow",
        "logging.level.error": "bold red",
        "logging.level.critical": "reverse bold red",
        "log.time": "dim cyan",
    }
)


class StructuredFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _console_handler(use_rich_console: bool) -> logging.Handler:
    if not use_rich_console:
        plain = logging.StreamHandler()  # stderr
        plain.setFormatter(StructuredFormatter())
        return plain
    return RichHandler(
        console=Console(stderr=True, theme=LOG_THEME),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        log_time_format="[%H:%M:%S]",
    )


def setup_structured_logger(
    name: str = "hashvault",
    level: str = "WARNING",
    log_file: str | None = None,
    *,
    use_rich_console: bool = True,
) -> logging.Logger:
    """Install fresh handlers on the ``name`` logger.

    Args:
        name: Logger to configure
        level: Level name such as "INFO"
        log_file: Optional JSON-lines log file
        use_rich_console: RichHandler when True, JSON lines on stderr otherwise

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    numeric_level = logging.getLevelName(level.upper())
    logger.setLevel(numeric_level)

    console = _console_handler(use_rich_console)
    console.setLevel(numeric_level)
    logger.addHandler(console)

    if log_file:
        json_file = logging.FileHandler(log_file, encoding="utf-8")
        json_file.setFormatter(StructuredFormatter())
        logger.addHandler(json_file)

    logger.propagate = False
    return logger


def _as_dict(context: dict[str, Any] | ErrorContext | None) -> dict[str, Any]:
    if isinstance(context, ErrorContext):
        return context.safe_dict()
    return dict(context or {})


def log_operation_error(
    logger: logging.Logger,
    error: HashVaultError,
    operation: str | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
    *,
    level: int = logging.ERROR,
) -> None:
    """Log ``error`` with its code and merged context.

    The traceback of the wrapped exception is attached only at ERROR and
    above; per-file failures are logged as warnings without it.
    """
    merged = error.context.safe_dict()
    merged.update(_as_dict(context))
    cause = error.original_error if level >= logging.ERROR else None
    logger.log(
        level,
        str(error),
        exc_info=cause,
        extra={
            "error_code": error.code.name,
            "operation": operation or error.context.operation,
            "context": merged,
        },
    )


def log_operation_success(
    logger: logging.Logger,
    operation: str,
    duration_ms: float,
    result_info: dict[str, Any] | None = None,
    context: dict[str, Any] | ErrorContext | None = None,
) -> None:
    """Record a finished operation and its timing at DEBUG level."""
    logger.debug(
        "%s finished in %.1f ms",
        operation,
        duration_ms,
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "result_info": result_info or {},
            "context": _as_dict(context),
        },
    )
