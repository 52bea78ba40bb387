"""Reversible printable-ASCII encoding of file paths.

A path is viewed as a sequence of UTF-16 code units. Printable ASCII code
units (``0x20``-``0x7F``) are written as themselves, the percent sign is
written as ``%0025`` and every other code unit (control characters, Latin-1
and above, and each half of a surrogate pair) is written as ``%`` followed by
four lowercase hex digits.

Lone surrogates survive the round trip, so POSIX paths holding undecodable
bytes (``os.fsdecode`` surrogate escapes) are preserved exactly.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from hashvault.shared.constants import PathEscape


def path_code_units(path: str) -> list[int]:
    """Return the UTF-16 code units of ``path``."""
    raw = path.encode(PathEscape.UTF16_CODEC, PathEscape.UTF16_ERRORS)
    return [
        int.from_bytes(raw[offset : offset + PathEscape.CODE_UNIT_BYTES], "little")
        for offset in range(0, len(raw), PathEscape.CODE_UNIT_BYTES)
    ]


def path_from_code_units(units: Iterable[int]) -> str:
    """Rebuild a path from UTF-16 code units."""
    raw = b"".join(unit.to_bytes(PathEscape.CODE_UNIT_BYTES, "little") for unit in units)
    return raw.decode(PathEscape.UTF16_CODEC, PathEscape.UTF16_ERRORS)


def encode_path(path: str) -> str:
    """Encode ``path`` as printable ASCII.

    Args:
        path: OS-native path string

    Returns:
        The escaped path, containing only characters in ``0x20``-``0x7F``

    Example:
        >>> encode_path("100%/café")
        '100%0025/caf%00e9'
    """
    parts: list[str] = []
    for unit in path_code_units(path):
        if unit == ord(PathEscape.ESCAPE_CHAR):
            parts.append(PathEscape.PERCENT_ESCAPE)
        elif PathEscape.PRINTABLE_MIN <= unit <= PathEscape.PRINTABLE_MAX:
            parts.append(chr(unit))
        else:
            parts.append(f"{PathEscape.ESCAPE_CHAR}{unit:04x}")
    return "".join(parts)


def _decoded_units(text: str) -> Iterator[int]:
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char != PathEscape.ESCAPE_CHAR:
            # Unescaped non-ASCII text is accepted as its own code units
            yield from path_code_units(char)
            index += 1
            continue

        digits = text[index + 1 : index + 1 + PathEscape.ESCAPE_DIGITS]
        if len(digits) < PathEscape.ESCAPE_DIGITS:
            raise ValueError(f"truncated escape sequence at offset {index}: {text[index:]!r}")
        if not PathEscape.HEX_DIGITS.issuperset(digits):
            raise ValueError(f"invalid hex digits in escape at offset {index}: {digits!r}")
        yield int(digits, 16)
        index += 1 + PathEscape.ESCAPE_DIGITS


def decode_path(text: str) -> str:
    """Decode a path produced by :func:`encode_path`.

    Args:
        text: Escaped path

    Returns:
        The original path string

    Raises:
        ValueError: If an escape is truncated or holds a non-hex digit
    """
    return path_from_code_units(_decoded_units(text))
