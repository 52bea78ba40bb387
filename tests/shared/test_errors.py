"""Tests for the error hierarchy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import pytest

from hashvault.shared.errors import (
    CliError,
    DomainError,
    ErrorCode,
    ErrorContext,
    HashVaultError,
    InfrastructureError,
    RecordDecodeError,
    create_cli_error,
    create_file_not_found_error,
)


class Color(Enum):
    RED = "red"


class TestErrorContext:
    """Test cases for ErrorContext."""

    def test_additional_data_is_coerced(self) -> None:
        """Paths and enums become primitives."""
        context = ErrorContext(additional_data={"path": Path("/a"), "color": Color.RED, "n": 1})
        assert context.additional_data == {"path": "/a", "color": "red", "n": 1}

    def test_non_primitive_is_rejected(self) -> None:
        """Only primitive values are allowed."""
        with pytest.raises(TypeError):
            ErrorContext(additional_data={"bad": object()})

    def test_safe_dict_escapes_surrogates(self) -> None:
        """Surrogate-escaped paths stay printable in logs."""
        data = ErrorContext(file_path="/data/\udcff", operation="scan").safe_dict()
        assert data == {"file_path": "/data/\\udcff", "operation": "scan", "additional_data": {}}


class TestHashVaultError:
    """Test cases for the exception classes."""

    def test_str_and_dict(self) -> None:
        """Errors render their code and message."""
        cause = OSError("disk")
        error = InfrastructureError(ErrorCode.FILE_READ_ERROR, "read failed", original_error=cause)

        assert str(error) == "FILE_READ_ERROR: read failed"
        assert error.to_dict()["original_error"] == "disk"
        assert isinstance(error, HashVaultError)

    def test_record_decode_error(self) -> None:
        """Decode errors are domain errors carrying the line."""
        error = RecordDecodeError("bad size", "> x | None | None | /a")
        assert isinstance(error, DomainError)
        assert error.code == ErrorCode.RECORD_DECODE_ERROR
        assert error.line == "> x | None | None | /a"

    def test_factories(self) -> None:
        """Factory helpers fill codes and context."""
        missing = create_file_not_found_error("/a", "load_cache")
        assert missing.code == ErrorCode.FILE_NOT_FOUND
        assert missing.context.file_path == "/a"

        cli_error = create_cli_error("oops", command="scan", exit_code=3)
        assert isinstance(cli_error, CliError)
        assert cli_error.exit_code == 3
        assert cli_error.context.additional_data == {"command": "scan"}
