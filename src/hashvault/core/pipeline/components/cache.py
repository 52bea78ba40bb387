"""Cache store of records from a previous run.

The store is loaded once, before any worker starts, and is read-only for the
rest of the run. Workers share it without locking.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import TextIO

from hashvault.core.codec import RecordFormat, detect_format, encode_record, try_decode_record
from hashvault.shared.constants import FileSystem
from hashvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_file_not_found_error,
)
from hashvault.shared.file_records import FileRecord
from hashvault.shared.logging import log_operation_success

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheLoadReport:
    """What happened while a report file was loaded."""

    lines_read: int = 0
    records_loaded: int = 0
    legacy_records: int = 0
    skipped_lines: int = 0


class CacheStore:
    """Read-only mapping from path to the record last seen for that path.

    Keys are compared byte-for-byte (exact string equality, no
    normalization).
    """

    def __init__(
        self,
        records: dict[str, FileRecord] | None = None,
        load_report: CacheLoadReport | None = None,
    ) -> None:
        self._records = MappingProxyType(dict(records or {}))
        self.load_report = load_report or CacheLoadReport(records_loaded=len(self._records))

    @classmethod
    def from_records(cls, records: Iterable[FileRecord]) -> CacheStore:
        """Build a store from records already in memory."""
        return cls({record.path: record for record in records})

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> CacheStore:
        """Build a store by decoding report lines.

        Lines that cannot be decoded (current format first, legacy as the
        fallback) are skipped. A later record for the same path replaces an
        earlier one.
        """
        records: dict[str, FileRecord] = {}
        lines_read = legacy = skipped = 0
        for line in lines:
            lines_read += 1
            record = try_decode_record(line)
            if record is None:
                skipped += 1
                logger.debug("Skipping undecodable cache line %d", lines_read)
                continue
            if detect_format(line) is RecordFormat.LEGACY:
                legacy += 1
            records[record.path] = record

        report = CacheLoadReport(
            lines_read=lines_read,
            records_loaded=len(records),
            legacy_records=legacy,
            skipped_lines=skipped,
        )
        return cls(records, report)

    @classmethod
    def load(cls, source: str | Path | None) -> CacheStore:
        """Load a persisted report.

        Args:
            source: Report file to read, or None for an empty store

        Returns:
            The loaded store

        Raises:
            InfrastructureError: If the file is missing or cannot be read
        """
        if source is None:
            return cls()

        source = Path(source)
        start_time = time.time()
        context = ErrorContext(file_path=str(source), operation="load_cache")

        try:
            with open(
                source,
                encoding=FileSystem.REPORT_ENCODING,
                errors=FileSystem.REPORT_ERRORS,
                newline="",
            ) as handle:
                store = cls.from_lines(handle)
        except FileNotFoundError as e:
            raise create_file_not_found_error(str(source), "load_cache", e) from e
        except OSError as e:
            raise InfrastructureError(
                ErrorCode.CACHE_READ_FAILED,
                f"Cannot read cache file {source}: {e}",
                context,
                original_error=e,
            ) from e

        report = store.load_report
        if report.skipped_lines:
            logger.warning(
                "Skipped %d undecodable line(s) while loading %s",
                report.skipped_lines,
                source,
            )
        log_operation_success(
            logger,
            "load_cache",
            (time.time() - start_time) * 1000,
            result_info={
                "lines_read": report.lines_read,
                "records_loaded": report.records_loaded,
                "legacy_records": report.legacy_records,
                "skipped_lines": report.skipped_lines,
            },
            context=context,
        )
        return store

    def lookup(self, path: str) -> FileRecord | None:
        """Return the cached record for ``path``, if any."""
        return self._records.get(path)

    def records(self) -> Iterator[FileRecord]:
        """Iterate over the cached records."""
        return iter(self._records.values())

    def dump(self, sink: TextIO) -> int:
        """Write every record to ``sink`` in the current line format.

        Returns:
            Number of records written
        """
        count = 0
        for record in self._records.values():
            sink.write(encode_record(record) + "\n")
            count += 1
        sink.flush()
        return count

    def summary(self) -> dict[str, int]:
        """Summarize the store and how it was loaded."""
        report = self.load_report
        return {
            "lines_read": report.lines_read,
            "records_loaded": report.records_loaded,
            "legacy_records": report.legacy_records,
            "skipped_lines": report.skipped_lines,
            "hashed_records": sum(1 for record in self._records.values() if record.hash is not None),
            "total_bytes": sum(record.size for record in self._records.values()),
        }

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, path: object) -> bool:
        return path in self._records
