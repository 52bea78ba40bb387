"""Report line codec.

- path_escape: printable-ASCII escaping of UTF-16 path code units
- record_line: current and legacy report line formats
"""

from __future__ import annotations

from hashvault.core.codec.path_escape import decode_path, encode_path
from hashvault.core.codec.record_line import (
    RecordFormat,
    decode_record,
    detect_format,
    encode_record,
    try_decode_record,
)

__all__ = [
    "RecordFormat",
    "decode_path",
    "decode_record",
    "detect_format",
    "encode_path",
    "encode_record",
    "try_decode_record",
]
