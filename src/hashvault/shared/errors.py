"""Exception hierarchy and error codes used across HashVault.

Every failure the application reports carries an ``ErrorCode`` and an
``ErrorContext``. The wrapped low-level exception, when there is one, is
kept on ``original_error`` and chained with ``raise ... from``.

Layers:
    DomainError          record format or record model violations
    InfrastructureError  file system and pipeline thread failures
    ApplicationError     configuration and command handling
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

ContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Stable identifiers for every reportable failure."""

    # file system
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    DIRECTORY_NOT_FOUND = "DIRECTORY_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    FILE_WRITE_ERROR = "FILE_WRITE_ERROR"
    FILE_CREATE_ERROR = "FILE_CREATE_ERROR"

    # report lines
    RECORD_DECODE_ERROR = "RECORD_DECODE_ERROR"
    RECORD_ENCODE_ERROR = "RECORD_ENCODE_ERROR"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"

    # settings
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INVALID_CONFIG = "INVALID_CONFIG"

    # command line
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"
    CLI_COMMAND_INTERRUPTED = "CLI_COMMAND_INTERRUPTED"

    # pipeline stages
    PIPELINE_INITIALIZATION_ERROR = "PIPELINE_INITIALIZATION_ERROR"
    PIPELINE_EXECUTION_ERROR = "PIPELINE_EXECUTION_ERROR"
    PIPELINE_SHUTDOWN_ERROR = "PIPELINE_SHUTDOWN_ERROR"
    QUEUE_OPERATION_ERROR = "QUEUE_OPERATION_ERROR"
    SCANNER_ERROR = "SCANNER_ERROR"
    HASHER_ERROR = "HASHER_ERROR"
    COLLECTOR_ERROR = "COLLECTOR_ERROR"


def printable(text: str) -> str:
    """Replace lone surrogates (undecodable file name bytes) with escapes."""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def _to_context_value(key: str, value: Any) -> ContextValue:
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(
        f"additional_data[{key!r}] is a {type(value).__name__}; "
        "expected str, int, float, bool, Path or Enum"
    )


@dataclass(frozen=True)
class ErrorContext:
    """Where an error happened.

    ``additional_data`` only holds JSON-friendly scalars. Paths and enum
    members are converted on construction, anything else is a TypeError.
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, ContextValue] | None = None

    def __post_init__(self) -> None:
        extra = self.additional_data
        if extra is None:
            return
        if not isinstance(extra, dict):
            raise TypeError(f"additional_data must be a dict, not {type(extra).__name__}")
        converted = {key: _to_context_value(key, value) for key, value in extra.items()}
        object.__setattr__(self, "additional_data", converted)

    def safe_dict(self) -> dict[str, Any]:
        """Return the populated fields in a form that is safe to log.

        >>> ErrorContext(file_path="/data/a.bin").safe_dict()
        {'file_path': '/data/a.bin', 'additional_data': {}}
        """
        result: dict[str, Any] = {}
        if self.file_path is not None:
            result["file_path"] = printable(self.file_path)
        if self.operation is not None:
            result["operation"] = self.operation
        result["additional_data"] = dict(self.additional_data or {})
        return result


class HashVaultError(Exception):
    """Root of the HashVault exception tree."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(f"{code.value}: {message}")
        self.code = code
        self.message = message
        self.context = context if context is not None else ErrorContext()
        self.original_error = original_error

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logs and ``--json`` output."""
        cause = self.original_error
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": None if cause is None else str(cause),
        }


class DomainError(HashVaultError):
    """A report line or record breaks the record format rules."""


class InfrastructureError(HashVaultError):
    """The file system or a pipeline thread failed."""


class ApplicationError(HashVaultError):
    """Configuration or command handling failed."""


class RecordDecodeError(DomainError):
    """A persisted report line could not be decoded."""

    def __init__(self, message: str, line: str, original_error: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.RECORD_DECODE_ERROR,
            message,
            ErrorContext(operation="decode_record", additional_data={"line": printable(line)}),
            original_error,
        )
        self.line = line


class CliError(ApplicationError):
    """Command failure that knows its command name and exit status."""

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ) -> None:
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


def create_file_not_found_error(
    file_path: str,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> InfrastructureError:
    """Build the FILE_NOT_FOUND error for ``file_path``."""
    return InfrastructureError(
        ErrorCode.FILE_NOT_FOUND,
        f"File not found: {printable(file_path)}",
        ErrorContext(file_path=file_path, operation=operation),
        original_error,
    )


def create_cli_error(
    message: str,
    command: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
    exit_code: int = 1,
) -> CliError:
    """Wrap an unexpected failure of ``command`` as a CliError."""
    extra: dict[str, ContextValue] | None = {"command": command} if command else None
    return CliError(
        ErrorCode.CLI_UNEXPECTED_ERROR,
        message,
        ErrorContext(operation=operation, additional_data=extra),
        original_error,
        command=command,
        exit_code=exit_code,
    )
