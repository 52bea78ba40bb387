"""Line codec for persisted file records.

Encoding always produces the current format::

    > <size> | <modified-or-None> | <hash-or-None> | <escaped-path>

Decoding is a tagged-variant parser: a line starting with ``>`` is a current
format line, anything else is parsed as a legacy line::

    <size> bytes: [<hash> ]<path>

Legacy lines never carry a modification time, and their path is stored
verbatim.
"""

from __future__ import annotations

import re
from enum import Enum

from hashvault.core.codec.path_escape import decode_path, encode_path
from hashvault.shared.constants import LegacyRecordLine, RecordLine
from hashvault.shared.errors import DomainError, ErrorCode, ErrorContext, RecordDecodeError
from hashvault.shared.file_records import FileRecord

_DECIMAL = re.compile(r"[0-9]+")
_LINE_TERMINATORS = "\r\n"


class RecordFormat(str, Enum):
    """Line layouts a report may contain."""

    CURRENT = "current"
    LEGACY = "legacy"


def detect_format(line: str) -> RecordFormat:
    """Return the layout of ``line`` based on its leading marker."""
    if line.startswith(RecordLine.MARKER):
        return RecordFormat.CURRENT
    return RecordFormat.LEGACY


def encode_record(record: FileRecord) -> str:
    """Encode ``record`` as one current-format line (without newline).

    Raises:
        DomainError: If the hash would break the line layout
    """
    if record.hash is not None and (
        not record.hash or RecordLine.FIELD_SEPARATOR in record.hash or record.hash != record.hash.strip()
    ):
        raise DomainError(
            ErrorCode.RECORD_ENCODE_ERROR,
            f"Hash cannot be written to a report line: {record.hash!r}",
            ErrorContext(operation="encode_record", file_path=record.path),
        )

    modified = RecordLine.NONE_SENTINEL if record.modified is None else str(record.modified)
    digest = RecordLine.NONE_SENTINEL if record.hash is None else record.hash
    fields = (str(record.size), modified, digest, encode_path(record.path))
    return f"{RecordLine.MARKER} " + RecordLine.WRITE_SEPARATOR.join(fields)


def decode_record(line: str) -> FileRecord:
    """Decode one report line in either format.

    Args:
        line: The line, with or without its trailing newline

    Returns:
        The decoded record

    Raises:
        RecordDecodeError: If the line is malformed
    """
    text = line.rstrip(_LINE_TERMINATORS)
    if detect_format(text) is RecordFormat.CURRENT:
        return _decode_current(text)
    return _decode_legacy(text)


def try_decode_record(line: str) -> FileRecord | None:
    """Decode ``line``, returning None instead of raising."""
    try:
        return decode_record(line)
    except RecordDecodeError:
        return None


def _parse_unsigned(field: str, name: str, line: str) -> int:
    value = field.strip()
    if not _DECIMAL.fullmatch(value):
        raise RecordDecodeError(f"{name} is not a non-negative integer: {value!r}", line)
    return int(value)


def _decode_current(line: str) -> FileRecord:
    body = line[len(RecordLine.MARKER) :]
    fields = body.split(RecordLine.FIELD_SEPARATOR, RecordLine.FIELD_COUNT - 1)
    if len(fields) != RecordLine.FIELD_COUNT:
        raise RecordDecodeError(
            f"expected {RecordLine.FIELD_COUNT} fields, found {len(fields)}",
            line,
        )
    size_field, modified_field, hash_field, path_field = fields

    size = _parse_unsigned(size_field, "size", line)

    modified: int | None = None
    if modified_field.strip() != RecordLine.NONE_SENTINEL:
        modified = _parse_unsigned(modified_field, "modified", line)

    digest: str | None = hash_field.strip()
    if digest == RecordLine.NONE_SENTINEL:
        digest = None
    elif not digest:
        raise RecordDecodeError("hash field is empty", line)

    # Only the separator space goes, the path keeps its own whitespace
    if path_field.startswith(" "):
        path_field = path_field[1:]
    if not path_field:
        raise RecordDecodeError("path field is empty", line)
    try:
        path = decode_path(path_field)
    except ValueError as e:
        raise RecordDecodeError(f"bad path escape: {e}", line, original_error=e) from e

    return FileRecord(path=path, size=size, modified=modified, hash=digest)


def _decode_legacy(line: str) -> FileRecord:
    size_field, separator, remainder = line.partition(LegacyRecordLine.SIZE_SEPARATOR)
    if not separator:
        raise RecordDecodeError("missing ' bytes: ' separator", line)

    size = _parse_unsigned(size_field, "size", line)

    first, space, rest = remainder.partition(LegacyRecordLine.HASH_SEPARATOR)
    if space:
        digest: str | None = first
        path = rest
    else:
        digest = None
        path = first

    if not path:
        raise RecordDecodeError("path is empty", line)
    if digest == "":
        raise RecordDecodeError("hash is empty", line)

    return FileRecord(path=path, size=size, modified=None, hash=digest)
