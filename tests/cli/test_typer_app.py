"""Tests for the Typer CLI application."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from hashvault.cli.common.context import LogLevel, get_cli_context
from hashvault.cli.typer_app import app, main_callback
from hashvault.core.codec import decode_record
from hashvault.shared.constants import CLIDefaults

runner = CliRunner()


def _records(path: Path) -> dict:
    lines = path.read_text(encoding="utf-8").splitlines()
    return {record.path: record for record in map(decode_record, lines)}


class TestMainCallback:
    """Test cases for the main callback."""

    def test_context_is_published(self) -> None:
        """main_callback loads settings and sets the CLI context."""
        main_callback(verbose=1, log_level=LogLevel.ERROR, log_file=None, config_path=None)

        context = get_cli_context()
        assert context.verbose == 1
        assert context.get_effective_log_level() == "DEBUG"
        assert context.settings.hashing.hash_algorithm == "sha1"

    def test_log_level_falls_back_to_settings(self, tmp_path: Path) -> None:
        """Without flags the configured level is used."""
        config = tmp_path / "custom.toml"
        config.write_text('[logging]\nlevel = "error"\n', encoding="utf-8")

        main_callback(verbose=0, log_level=None, log_file=None, config_path=config)

        context = get_cli_context()
        assert context.get_effective_log_level() == "ERROR"
        assert context.config_path == config

    def test_cli_level_wins_over_settings(self) -> None:
        """--log-level overrides the configured level."""
        main_callback(verbose=0, log_level=LogLevel.INFO, log_file=None, config_path=None)
        assert get_cli_context().get_effective_log_level() == "INFO"


class TestScanCommand:
    """Test cases for `hashvault scan`."""

    def test_scan_to_file(self, sample_tree: Path, tmp_path: Path) -> None:
        """--hash --output writes a hashed report."""
        report = tmp_path / "report.txt"

        result = runner.invoke(app, ["scan", str(sample_tree), "--hash", "--output", str(report), "-w", "2"])

        assert result.exit_code == 0, result.output
        records = _records(report)
        assert len(records) == 4
        assert records[str(sample_tree / "a.txt")].hash == hashlib.sha1(b"hello").hexdigest()
        assert "HashVault statistics" in result.output

    def test_scan_to_stdout(self, sample_tree: Path) -> None:
        """Without --output records are printed to standard output."""
        result = runner.invoke(app, ["scan", str(sample_tree)])

        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.splitlines() if line.startswith("> ")]
        assert len(lines) == 4
        assert all(decode_record(line).hash is None for line in lines)

    def test_no_hash_overrides_configuration(self, sample_tree: Path, tmp_path: Path) -> None:
        """--no-hash turns off hashing enabled in the configuration file."""
        config = tmp_path / "hashing.toml"
        config.write_text("[hashing]\ncompute_hashes = true\n", encoding="utf-8")
        hashed = tmp_path / "hashed.txt"
        size_only = tmp_path / "size_only.txt"

        first = runner.invoke(app, ["--config", str(config), "scan", str(sample_tree), "-o", str(hashed)])
        second = runner.invoke(
            app,
            ["--config", str(config), "scan", str(sample_tree), "--no-hash", "-o", str(size_only)],
        )

        assert first.exit_code == 0, first.output
        assert second.exit_code == 0, second.output
        assert all(record.hash for record in _records(hashed).values())
        assert all(record.hash is None for record in _records(size_only).values())

    def test_incremental_scan(self, sample_tree: Path, tmp_path: Path) -> None:
        """--load reuses hashes from a previous report."""
        first = tmp_path / "first.txt"
        second = tmp_path / "second.txt"
        runner.invoke(app, ["scan", str(sample_tree), "--hash", "-o", str(first)])

        result = runner.invoke(
            app,
            ["scan", str(sample_tree), "--hash", "--load", str(first), "-o", str(second), "--json"],
        )

        assert result.exit_code == 0, result.output
        start = result.output.index("{")
        stats = json.loads(result.output[start : result.output.rindex("}") + 1])
        assert stats["files"]["num_hashes_reused"] == 4
        assert stats["files"]["total_hashed_bytes"] == 0
        assert _records(first) == _records(second)

    def test_count_limits_files(self, sample_tree: Path, tmp_path: Path) -> None:
        """--count truncates the candidate list."""
        report = tmp_path / "report.txt"
        result = runner.invoke(app, ["scan", str(sample_tree), "--count", "1", "-o", str(report)])
        assert result.exit_code == 0, result.output
        assert len(_records(report)) == 1

    def test_missing_root_fails(self, tmp_path: Path) -> None:
        """A missing root exits with an error."""
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])
        assert result.exit_code == CLIDefaults.EXIT_ERROR
        assert "Scan root does not exist" in result.output

    def test_invalid_workers(self, sample_tree: Path) -> None:
        """Out-of-range options are argument errors."""
        result = runner.invoke(app, ["scan", str(sample_tree), "--workers", "0"])
        assert result.exit_code == CLIDefaults.EXIT_INVALID_ARGUMENTS
        assert "Invalid scan options" in result.output

    def test_json_error_output(self, tmp_path: Path) -> None:
        """With --json, failures are reported as a JSON document."""
        result = runner.invoke(app, ["scan", str(tmp_path / "missing"), "--json"])
        assert result.exit_code == CLIDefaults.EXIT_ERROR
        assert '"error_code": "DIRECTORY_NOT_FOUND"' in result.output


class TestReportCommands:
    """Test cases for `hashvault inspect` and `hashvault convert`."""

    def test_inspect_json(self, tmp_path: Path) -> None:
        """inspect --json prints the report summary."""
        report = tmp_path / "report.txt"
        report.write_text("> 10 | 1 | abc | /a\n5 bytes: /b\n", encoding="utf-8")

        result = runner.invoke(app, ["inspect", str(report), "--json"])

        assert result.exit_code == 0, result.output
        summary = json.loads(result.output)
        assert summary["records_loaded"] == 2
        assert summary["legacy_records"] == 1
        assert summary["hashed_records"] == 1
        assert summary["total_bytes"] == 15

    def test_inspect_table(self, tmp_path: Path) -> None:
        """inspect prints a summary table by default."""
        report = tmp_path / "report.txt"
        report.write_text("> 10 | 1 | abc | /a\n", encoding="utf-8")

        result = runner.invoke(app, ["inspect", str(report)])

        assert result.exit_code == 0, result.output
        assert "Records loaded" in result.output

    def test_inspect_missing_file(self, tmp_path: Path) -> None:
        """A missing report is an error."""
        result = runner.invoke(app, ["inspect", str(tmp_path / "missing.txt")])
        assert result.exit_code == CLIDefaults.EXIT_ERROR
        assert "File not found" in result.output

    def test_convert_legacy_report(self, tmp_path: Path) -> None:
        """convert rewrites legacy lines in the current format."""
        source = tmp_path / "legacy.txt"
        dest = tmp_path / "current.txt"
        source.write_text(f"   556602 bytes: {'ab' * 20} ..\\x y.pdf\nnot a record\n", encoding="utf-8")

        result = runner.invoke(app, ["convert", str(source), str(dest)])

        assert result.exit_code == 0, result.output
        assert dest.read_text(encoding="utf-8") == f"> 556602 | None | {'ab' * 20} | ..\\x y.pdf\n"

    def test_convert_in_place(self, tmp_path: Path) -> None:
        """Source and destination may be the same file."""
        report = tmp_path / "report.txt"
        report.write_text("3 bytes: /c\n", encoding="utf-8")

        result = runner.invoke(app, ["convert", str(report), str(report)])

        assert result.exit_code == 0, result.output
        assert report.read_text(encoding="utf-8") == "> 3 | None | None | /c\n"


class TestGlobalOptions:
    """Test cases for options handled by the callback."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"HashVault v{CLIDefaults.VERSION}" in result.output

    def test_bad_config_file(self, sample_tree: Path, tmp_path: Path) -> None:
        """An invalid configuration file stops the command."""
        config = tmp_path / "bad.toml"
        config.write_text("[hashing]\nnum_workers = -3\n", encoding="utf-8")

        result = runner.invoke(app, ["--config", str(config), "scan", str(sample_tree)])

        assert result.exit_code == CLIDefaults.EXIT_ERROR
        assert "Invalid configuration" in result.output

    def test_log_file_option(self, sample_tree: Path, tmp_path: Path) -> None:
        """--log-file receives JSON log lines."""
        log_file = tmp_path / "run.log"

        result = runner.invoke(
            app,
            ["--log-file", str(log_file), "--log-level", "info", "scan", str(sample_tree), "-o", str(tmp_path / "r")],
        )

        assert result.exit_code == 0, result.output
        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert any(entry["message"].startswith("Starting pipeline") for entry in entries)


@pytest.mark.parametrize("command", ["scan", "inspect", "convert"])
def test_command_help(command: str) -> None:
    """Every command has help text."""
    result = runner.invoke(app, [command, "--help"])
    assert result.exit_code == 0
    assert "Usage" in result.output
