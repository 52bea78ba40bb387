"""End-to-end tests for run_pipeline."""

from __future__ import annotations

import hashlib
import io
import os
from pathlib import Path

import pytest

from hashvault.config import HashSettings
from hashvault.core.codec import decode_record
from hashvault.core.pipeline import run_pipeline
from hashvault.core.pipeline.utils import QueueStatistics, ScanStatistics
from hashvault.shared.errors import ErrorCode, InfrastructureError


def _read_report(path: Path) -> dict:
    with open(path, encoding="utf-8", errors="surrogateescape") as handle:
        records = [decode_record(line) for line in handle]
    return {record.path: record for record in records}


class TestRunPipeline:
    """Test cases for run_pipeline."""

    def test_hashing_run(self, sample_tree: Path, hashing_settings: HashSettings, tmp_path: Path) -> None:
        """A first run hashes every file and writes one line per file."""
        report = tmp_path / "out" / "report.txt"

        stats = run_pipeline(sample_tree, hashing_settings, output_path=report)

        records = _read_report(report)
        assert len(records) == 4
        b_txt = records[os.path.join(str(sample_tree), "sub", "b.txt")]
        assert b_txt.size == 11
        assert b_txt.hash == hashlib.sha1(b"hello world").hexdigest()
        assert b_txt.modified is not None
        assert stats.total_files == 4
        assert stats.total_bytes == 19
        assert stats.total_hashed_bytes == 19
        assert stats.num_hashes_reused == 0

    def test_second_run_reuses_everything(
        self, sample_tree: Path, hashing_settings: HashSettings, tmp_path: Path
    ) -> None:
        """Loading the first report makes the second run hash nothing."""
        first = tmp_path / "first.txt"
        second = tmp_path / "second.txt"
        run_pipeline(sample_tree, hashing_settings, output_path=first)

        stats = run_pipeline(sample_tree, hashing_settings, cache_path=first, output_path=second)

        assert stats.num_hashes_reused == stats.total_files == 4
        assert stats.total_hashed_bytes == 0
        assert _read_report(first) == _read_report(second)

    def test_changed_size_is_rehashed(self, sample_tree: Path, hashing_settings: HashSettings, tmp_path: Path) -> None:
        """Only files whose size changed are hashed again."""
        first = tmp_path / "first.txt"
        run_pipeline(sample_tree, hashing_settings, output_path=first)
        (sample_tree / "a.txt").write_bytes(b"hello, again")

        stats = run_pipeline(sample_tree, hashing_settings, cache_path=first, output_path=tmp_path / "second.txt")

        assert stats.num_hashes_reused == 3
        assert stats.total_hashed_bytes == 12

    def test_output_may_be_the_cache_file(
        self, sample_tree: Path, hashing_settings: HashSettings, tmp_path: Path
    ) -> None:
        """The cache is read before the output is truncated."""
        report = tmp_path / "report.txt"
        run_pipeline(sample_tree, hashing_settings, output_path=report)

        stats = run_pipeline(sample_tree, hashing_settings, cache_path=report, output_path=report)

        assert stats.num_hashes_reused == 4
        assert len(_read_report(report)) == 4

    def test_size_only_run(self, sample_tree: Path) -> None:
        """Without hashing, records carry no hash and nothing is read."""
        sink = io.StringIO()
        settings = HashSettings(compute_hashes=False, num_workers=1, progress_every=0)

        stats = run_pipeline(sample_tree, settings, output_stream=sink)

        records = [decode_record(line) for line in sink.getvalue().splitlines()]
        assert len(records) == 4
        assert all(record.hash is None for record in records)
        assert stats.total_hashed_bytes == 19
        assert stats.total_bytes == 19

    def test_max_entries(self, sample_tree: Path, hashing_settings: HashSettings) -> None:
        """The candidate list is truncated before hashing."""
        sink = io.StringIO()
        settings = hashing_settings.model_copy(update={"max_entries": 2})

        stats = run_pipeline(sample_tree, settings, output_stream=sink)

        assert stats.total_files == 2
        assert len(sink.getvalue().splitlines()) == 2

    def test_legacy_cache_is_honoured(self, sample_tree: Path, hashing_settings: HashSettings, tmp_path: Path) -> None:
        """A legacy-format report seeds the cache too."""
        target = os.path.join(str(sample_tree), "a.txt")
        legacy = tmp_path / "legacy.txt"
        legacy.write_text(f"         5 bytes: {'0' * 40} {target}\n", encoding="utf-8")
        sink = io.StringIO()

        stats = run_pipeline(sample_tree, hashing_settings, cache_path=legacy, output_stream=sink)

        assert stats.num_hashes_reused == 1
        records = {record.path: record for record in map(decode_record, sink.getvalue().splitlines())}
        assert records[target].hash == "0" * 40
        assert records[target].modified is not None

    def test_statistics_hooks(self, sample_tree: Path, hashing_settings: HashSettings) -> None:
        """Scan and queue statistics are filled when passed in."""
        scan_stats = ScanStatistics()
        queue_stats = QueueStatistics()

        run_pipeline(
            sample_tree,
            hashing_settings,
            output_stream=io.StringIO(),
            scan_stats=scan_stats,
            queue_stats=queue_stats,
        )

        assert scan_stats.files_scanned == 4
        assert queue_stats.items_put == 5
        assert queue_stats.items_got == 5

    def test_progress_goes_to_diagnostic_stream(self, sample_tree: Path) -> None:
        """Progress is written to the diagnostic stream, never the sink."""
        sink = io.StringIO()
        diagnostics = io.StringIO()
        settings = HashSettings(compute_hashes=True, num_workers=1, progress_every=1)

        run_pipeline(sample_tree, settings, output_stream=sink, diagnostic_stream=diagnostics)

        assert diagnostics.getvalue().count("\r") == 4
        assert "MB/s" not in sink.getvalue()

    def test_missing_root_aborts(self, tmp_path: Path, hashing_settings: HashSettings) -> None:
        """A missing root is reported before any output is created."""
        report = tmp_path / "report.txt"
        with pytest.raises(InfrastructureError) as exc_info:
            run_pipeline(tmp_path / "missing", hashing_settings, output_path=report)
        assert exc_info.value.code == ErrorCode.DIRECTORY_NOT_FOUND
        assert not report.exists()

    def test_missing_cache_aborts(self, sample_tree: Path, hashing_settings: HashSettings, tmp_path: Path) -> None:
        """A cache file that cannot be opened aborts the run."""
        with pytest.raises(InfrastructureError) as exc_info:
            run_pipeline(sample_tree, hashing_settings, cache_path=tmp_path / "nope.txt", output_stream=io.StringIO())
        assert exc_info.value.code == ErrorCode.FILE_NOT_FOUND

    def test_uncreatable_output_aborts(self, sample_tree: Path, hashing_settings: HashSettings, tmp_path: Path) -> None:
        """An output path that cannot be created aborts the run."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(InfrastructureError) as exc_info:
            run_pipeline(sample_tree, hashing_settings, output_path=blocker / "report.txt")
        assert exc_info.value.code == ErrorCode.FILE_CREATE_ERROR

    def test_failing_sink_fails_the_run(self, sample_tree: Path, hashing_settings: HashSettings) -> None:
        """A sink that stops accepting writes is a collector failure."""

        class FullDisk(io.StringIO):
            def write(self, text: str) -> int:
                raise OSError(28, "No space left on device")

        with pytest.raises(InfrastructureError) as exc_info:
            run_pipeline(sample_tree, hashing_settings, output_stream=FullDisk())
        assert exc_info.value.code == ErrorCode.COLLECTOR_ERROR

    def test_non_utf8_file_name_round_trips(
        self, tmp_path: Path, hashing_settings: HashSettings
    ) -> None:
        """File names that are not valid UTF-8 are preserved byte-for-byte."""
        if os.name != "posix":
            pytest.skip("byte file names are POSIX only")
        root = tmp_path / "bytes"
        root.mkdir()
        try:
            with open(os.path.join(os.fsencode(root), b"caf\xe9.bin"), "wb") as handle:
                handle.write(b"data")
        except OSError:
            pytest.skip("filesystem rejects non-UTF-8 names")
        report = tmp_path / "report.txt"

        run_pipeline(root, hashing_settings, output_path=report)
        stats = run_pipeline(root, hashing_settings, cache_path=report, output_path=tmp_path / "again.txt")

        (path,) = _read_report(report)
        assert os.fsencode(path).endswith(b"caf\xe9.bin")
        assert stats.num_hashes_reused == 1
