"""
Pytest configuration and shared fixtures for HashVault tests.

This module provides common fixtures that can be used across all test
modules in the project.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest

from hashvault.cli.common.context import clear_cli_context
from hashvault.config import HashSettings


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user configuration and HASHVAULT_ variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("HASHVAULT_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_cli_state() -> Generator[None, None, None]:
    """Clear the CLI context and the package logger between tests."""
    clear_cli_context()
    yield
    clear_cli_context()
    logger = logging.getLogger("hashvault")
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a small file tree.

    Layout::

        tree/
          a.txt          (5 bytes)
          empty.bin      (0 bytes)
          sub/b.txt      (11 bytes)
          sub/deep/c.dat (3 bytes)
    """
    root = tmp_path / "tree"
    (root / "sub" / "deep").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"hello")
    (root / "empty.bin").write_bytes(b"")
    (root / "sub" / "b.txt").write_bytes(b"hello world")
    (root / "sub" / "deep" / "c.dat").write_bytes(b"abc")
    return root


@pytest.fixture
def hashing_settings() -> HashSettings:
    """Settings with hashing enabled and no progress output."""
    return HashSettings(compute_hashes=True, num_workers=2, progress_every=0)
