"""Tests for percent escaping of UTF-16 path code units."""

from __future__ import annotations

import pytest

from hashvault.core.codec import decode_path, encode_path
from hashvault.core.codec.path_escape import path_code_units, path_from_code_units


class TestEncodePath:
    """Test cases for encode_path."""

    def test_printable_ascii_is_kept(self) -> None:
        """Printable ASCII passes through unchanged."""
        path = "/data/My Files/report (v2) [final] ~#!.txt"
        assert encode_path(path) == path

    def test_percent_becomes_escape(self) -> None:
        """A literal percent sign is written as %0025."""
        assert encode_path("100%") == "100%0025"
        assert encode_path("%%") == "%0025%0025"

    def test_latin1_is_escaped_lowercase(self) -> None:
        """Code units above 0x7F use four lowercase hex digits."""
        assert encode_path("café") == "caf%00e9"
        assert encode_path("Ñ") == "%00d1"

    def test_control_characters_are_escaped(self) -> None:
        """Control characters, including newline and tab, are escaped."""
        assert encode_path("a\nb\tc") == "a%000ab%0009c"

    def test_delete_is_printable(self) -> None:
        """0x7F is inside the printable range."""
        assert encode_path("\x7f") == "\x7f"

    def test_astral_character_uses_surrogate_pair(self) -> None:
        """A character outside the BMP is written as two escaped halves."""
        assert encode_path("\U0001f600") == "%d83d%de00"

    def test_lone_surrogate_is_escaped(self) -> None:
        """Undecodable POSIX bytes (surrogate escapes) are preserved."""
        assert encode_path("bad\udcff") == "bad%dcff"

    def test_output_is_printable_ascii(self) -> None:
        """Encoded paths only hold characters in 0x20-0x7F."""
        encoded = encode_path("日本語/ファイル\x01%.txt")
        assert all(0x20 <= ord(char) <= 0x7F for char in encoded)

    def test_empty_path(self) -> None:
        """The empty path encodes to the empty string."""
        assert encode_path("") == ""


class TestDecodePath:
    """Test cases for decode_path."""

    @pytest.mark.parametrize(
        "path",
        [
            "/plain/ascii.txt",
            "100% sure.txt",
            "%0025 literal",
            "café/naïve/Ωmega",
            "C:\\Users\\日本語\\ファイル.pdf",
            "emoji \U0001f600 and \U0010ffff",
            "bad\udcffbytes",
            "\udc80",
            "tab\tand\nnewline",
        ],
    )
    def test_round_trip(self, path: str) -> None:
        """decode_path(encode_path(p)) == p."""
        assert decode_path(encode_path(path)) == path

    def test_hex_letters_decode_to_their_value(self) -> None:
        """Escapes with a-f digits yield the right code unit."""
        assert decode_path("%00e9") == "é"
        assert decode_path("%00ff") == "ÿ"
        assert decode_path("%abcd") == "\uabcd"

    def test_uppercase_hex_is_accepted(self) -> None:
        """Uppercase hex digits decode to the same value."""
        assert decode_path("%00E9") == "é"

    def test_percent_escape_is_single_code_unit(self) -> None:
        """%0025 decodes to one percent sign, not to another escape."""
        assert decode_path("%00250041") == "%0041"

    def test_surrogate_pair_is_reassembled(self) -> None:
        """Two escaped halves decode to one astral character."""
        assert decode_path("%d83d%de00") == "\U0001f600"

    def test_unescaped_non_ascii_is_accepted(self) -> None:
        """Non-ASCII text that was not escaped decodes as itself."""
        assert decode_path("café") == "café"

    @pytest.mark.parametrize("text", ["abc%", "abc%0", "abc%002", "%12"])
    def test_truncated_escape_raises(self, text: str) -> None:
        """An escape with fewer than four digits is rejected."""
        with pytest.raises(ValueError, match="truncated"):
            decode_path(text)

    @pytest.mark.parametrize("text", ["%00g1", "%zzzz", "%-001", "% 001"])
    def test_non_hex_digit_raises(self, text: str) -> None:
        """An escape holding a non-hex digit is rejected."""
        with pytest.raises(ValueError, match="invalid hex"):
            decode_path(text)


def test_code_units_match_utf16() -> None:
    """path_code_units returns UTF-16 code units and inverts cleanly."""
    units = path_code_units("a\U0001f600")
    assert units == [0x61, 0xD83D, 0xDE00]
    assert path_from_code_units(units) == "a\U0001f600"
