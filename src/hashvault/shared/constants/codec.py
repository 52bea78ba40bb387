"""Persisted report format constants.

A report holds one file record per line. Two line layouts exist:

Current:  ``> <size> | <modified|None> | <hash|None> | <escaped-path>``
Legacy:   ``<size> bytes: [<hash> ]<path>``

Only the current layout is ever written.
"""

from __future__ import annotations


class RecordLine:
    """Current-format line layout."""

    MARKER = ">"
    FIELD_SEPARATOR = "|"
    WRITE_SEPARATOR = " | "
    NONE_SENTINEL = "None"
    FIELD_COUNT = 4


class LegacyRecordLine:
    """Legacy-format line layout."""

    SIZE_SEPARATOR = " bytes: "
    HASH_SEPARATOR = " "


class PathEscape:
    """Percent escaping of UTF-16 code units."""

    ESCAPE_CHAR = "%"
    ESCAPE_DIGITS = 4
    PERCENT_ESCAPE = "%0025"
    PRINTABLE_MIN = 0x20
    PRINTABLE_MAX = 0x7F
    CODE_UNIT_BYTES = 2
    UTF16_CODEC = "utf-16-le"
    UTF16_ERRORS = "surrogatepass"
    HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
