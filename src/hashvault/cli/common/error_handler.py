"""Turn exceptions raised by commands into exit codes and stderr messages.

Standard output belongs to the record stream, so nothing here writes to it.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from hashvault.shared.constants import CLIDefaults, CLIMessages
from hashvault.shared.errors import (
    CliError,
    ErrorCode,
    ErrorContext,
    HashVaultError,
    create_cli_error,
)
from hashvault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


def format_json_output(
    command: str,
    *,
    success: bool,
    errors: list[str] | None = None,
    data: dict[str, Any] | None = None,
) -> str:
    """Render a command outcome as an indented JSON document.

    ``errors`` and ``data`` are left out when empty.
    """
    document: dict[str, Any] = {"success": success, "command": command}
    if errors:
        document["errors"] = errors
    if data:
        document["data"] = data
    return json.dumps(document, indent=2, ensure_ascii=False, default=str)


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Log and print ``error`` raised by ``command``.

    Returns:
        The exit code the process should end with
    """
    cli_error = to_cli_error(error, command)

    if isinstance(error, KeyboardInterrupt):
        logger.warning("%s interrupted", command)
    elif isinstance(error, HashVaultError):
        # the message already reaches stderr below
        log_operation_error(logger, cli_error, operation=command, level=logging.DEBUG)
    else:
        logger.error(
            "%s failed: %s",
            command,
            cli_error.message,
            exc_info=error,
            extra={"context": {"command": command, "error_type": type(error).__name__}},
        )

    if json_output:
        details = {
            "error_code": cli_error.code.value,
            "error_type": type(error).__name__,
            "exit_code": cli_error.exit_code,
        }
        rendered = format_json_output(command, success=False, errors=[cli_error.message], data=details)
    else:
        rendered = f"Error: {cli_error.message}"
    sys.stderr.write(rendered + "\n")
    return cli_error.exit_code


def to_cli_error(error: BaseException, command: str) -> CliError:
    """Classify ``error`` into a CliError carrying the exit code."""
    if isinstance(error, CliError):
        return error
    if isinstance(error, HashVaultError):
        return CliError(
            error.code,
            error.message,
            error.context,
            original_error=error,
            command=command,
            exit_code=CLIDefaults.EXIT_ERROR,
        )
    if isinstance(error, KeyboardInterrupt):
        return CliError(
            ErrorCode.CLI_COMMAND_INTERRUPTED,
            CLIMessages.INTERRUPTED,
            ErrorContext(operation=command),
            command=command,
            exit_code=CLIDefaults.EXIT_INTERRUPTED,
        )

    prefix = "File system error" if isinstance(error, OSError) else "Unexpected error"
    return create_cli_error(
        message=f"{prefix}: {error}",
        command=command,
        original_error=error if isinstance(error, Exception) else None,
    )
