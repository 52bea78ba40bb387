"""Tests for the `python -m hashvault` entry point."""

from __future__ import annotations

import pytest

from hashvault import __main__ as entry_point
from hashvault.shared.constants import CLIDefaults


def test_keyboard_interrupt_exits_130(mocker) -> None:
    """An interrupt escaping the app exits with 130."""
    mocker.patch.object(entry_point, "app", side_effect=KeyboardInterrupt)
    with pytest.raises(SystemExit) as exc_info:
        entry_point.main()
    assert exc_info.value.code == CLIDefaults.EXIT_INTERRUPTED


def test_exit_code_is_preserved(mocker) -> None:
    """SystemExit raised by the app is passed through."""
    mocker.patch.object(entry_point, "app", side_effect=SystemExit(2))
    with pytest.raises(SystemExit) as exc_info:
        entry_point.main()
    assert exc_info.value.code == 2


def test_unexpected_error_is_mapped(mocker, capsys: pytest.CaptureFixture[str]) -> None:
    """Anything else goes through the CLI error handler."""
    mocker.patch.object(entry_point, "app", side_effect=RuntimeError("boom"))
    with pytest.raises(SystemExit) as exc_info:
        entry_point.main()
    assert exc_info.value.code == CLIDefaults.EXIT_ERROR
    assert "boom" in capsys.readouterr().err
