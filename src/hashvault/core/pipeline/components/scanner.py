"""Directory scanner for the HashVault pipeline.

The scanner walks a tree and materializes the list of candidate regular
files (path, size, modification time) before hashing starts. Paths are
built by joining the walk root with entry names, so the same root argument
yields the same paths from run to run.
"""

from __future__ import annotations

import itertools
import logging
import os
import stat
from collections.abc import Generator
from pathlib import Path

from hashvault.core.pipeline.utils import ScanStatistics
from hashvault.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from hashvault.shared.file_records import ScanEntry
from hashvault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """Produces the candidate file list for one root.

    Args:
        root_path: Directory (or single file) to scan.
        follow_links: Follow symbolic links to files and directories.
        max_entries: Keep at most this many files (0 = unlimited).
        stats: ScanStatistics instance for tracking scan metrics.
    """

    def __init__(
        self,
        root_path: str | Path,
        *,
        follow_links: bool = False,
        max_entries: int = 0,
        stats: ScanStatistics | None = None,
    ) -> None:
        if max_entries < 0:
            raise ValueError(f"max_entries must be >= 0, got {max_entries}")
        self.root_path = os.fspath(root_path)
        self.follow_links = follow_links
        self.max_entries = max_entries
        self.stats = stats or ScanStatistics()
        self._visited: set[tuple[int, int]] = set()

    def scan(self) -> list[ScanEntry]:
        """Walk the tree and return the (possibly truncated) candidate list.

        Raises:
            InfrastructureError: If the root does not exist or cannot be
                traversed.
        """
        self._validate_root()
        entries = self.scan_files()
        if self.max_entries:
            entries = itertools.islice(entries, self.max_entries)
        return list(entries)

    def scan_files(self) -> Generator[ScanEntry, None, None]:
        """Yield every regular file under the root."""
        if os.path.isfile(self.root_path):
            entry = self._make_entry(self.root_path)
            if entry is not None:
                yield entry
            return

        for dirpath, dirnames, filenames in os.walk(
            self.root_path,
            followlinks=self.follow_links,
            onerror=self._on_walk_error,
        ):
            self.stats.increment_directories_scanned()
            if self.follow_links:
                dirnames[:] = [name for name in dirnames if self._first_visit(os.path.join(dirpath, name))]

            for name in filenames:
                entry = self._make_entry(os.path.join(dirpath, name))
                if entry is not None:
                    yield entry

    def _validate_root(self) -> None:
        context = ErrorContext(file_path=self.root_path, operation="scan_tree")
        if not os.path.exists(self.root_path):
            raise InfrastructureError(
                ErrorCode.DIRECTORY_NOT_FOUND,
                f"Scan root does not exist: {self.root_path}",
                context,
            )
        if os.path.isdir(self.root_path):
            if not os.access(self.root_path, os.R_OK | os.X_OK):
                raise InfrastructureError(
                    ErrorCode.PERMISSION_DENIED,
                    f"Scan root is not traversable: {self.root_path}",
                    context,
                )
            self._first_visit(self.root_path)

    def _first_visit(self, directory: str) -> bool:
        """Record a directory, returning False if it was already walked."""
        try:
            info = os.stat(directory)
        except OSError:
            return False
        key = (info.st_dev, info.st_ino)
        if key in self._visited:
            logger.debug("Skipping already visited directory %s", directory)
            return False
        self._visited.add(key)
        return True

    def _make_entry(self, path: str) -> ScanEntry | None:
        try:
            info = os.stat(path, follow_symlinks=self.follow_links)
        except OSError as e:
            self._record_error(path, e)
            return None

        if not stat.S_ISREG(info.st_mode):
            return None

        self.stats.increment_files_scanned()
        modified = int(info.st_mtime)
        return ScanEntry(
            path=path,
            size=info.st_size,
            modified=modified if modified >= 0 else None,
        )

    def _on_walk_error(self, error: OSError) -> None:
        self._record_error(error.filename or self.root_path, error)

    def _record_error(self, path: str | bytes, error: OSError) -> None:
        self.stats.increment_errors()
        log_operation_error(
            logger,
            InfrastructureError(
                ErrorCode.SCANNER_ERROR,
                f"Cannot read {os.fsdecode(path)}: {error.strerror or error}",
                ErrorContext(file_path=os.fsdecode(path), operation="scan_tree"),
                original_error=error,
            ),
            level=logging.WARNING,
        )


def scan_tree(
    root_path: str | Path,
    *,
    follow_links: bool = False,
    max_entries: int = 0,
    stats: ScanStatistics | None = None,
) -> list[ScanEntry]:
    """Scan ``root_path`` and return its candidate files.

    Convenience wrapper around :class:`DirectoryScanner`.
    """
    return DirectoryScanner(
        root_path,
        follow_links=follow_links,
        max_entries=max_entries,
        stats=stats,
    ).scan()
