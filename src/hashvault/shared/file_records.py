"""Record models shared by the codec, the cache store and the pipeline.

Paths are kept as OS-native ``str`` values. On POSIX, bytes that are not
valid in the filesystem encoding are carried as lone surrogates
(``os.fsdecode``), so ``os.fsencode(record.path)`` always returns the
original bytes.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FileRecord:
    """One inventoried file.

    Attributes:
        path: Opaque path, compared by exact equality
        size: Size in bytes
        modified: Last modification time, whole seconds since the Unix epoch
        hash: Lowercase hex content digest, None when hashing was skipped
            or failed
    """

    path: str
    size: int
    modified: int | None = None
    hash: str | None = None

    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 0:
            raise ValueError(f"size must be a non-negative integer, got {self.size!r}")
        if self.modified is not None and (isinstance(self.modified, bool) or not isinstance(self.modified, int)):
            raise ValueError(f"modified must be an integer timestamp, got {self.modified!r}")


@dataclass(frozen=True)
class ScanEntry:
    """A candidate file produced by the scanner."""

    path: str
    size: int
    modified: int | None = None


@dataclass(frozen=True)
class ProgressRecord:
    """A completed record travelling from a hash worker to the collector.

    Attributes:
        record: The completed file record
        previously_known: True when the cached hash was reused without
            reading the file
        throughput: Bytes per second for this file, when it was hashed
        error: Why hashing failed, when it did
    """

    record: FileRecord
    previously_known: bool = False
    throughput: float | None = None
    error: str | None = None
