"""
Tests for the SVG markup helpers.
"""

import pytest

from pidgen.schematic.markup import escape_text, estimate_text_width, fmt, num, text_element

from conftest import parse_svg


# =============================================================================
# ESCAPING
# =============================================================================

class TestEscapeText:
    """Tests for free-text escaping."""

    def test_markup_characters(self):
        assert escape_text('<a> & "b" \'c\'') == "&lt;a&gt; &amp; &quot;b&quot; &apos;c&apos;"

    @pytest.mark.parametrize("value,expected", [
        ("a\x01b", "ab"),
        ("\x00lead", "lead"),
        ("v\x0bt\x1f", "vt"),
        ("bad\ufffe", "bad"),
    ])
    def test_control_characters_dropped(self, value, expected):
        assert escape_text(value) == expected

    def test_whitespace_and_unicode_kept(self):
        assert escape_text("a\tb\nc\rd") == "a\tb\nc\rd"
        assert escape_text("Δp 5 m³/h") == "Δp 5 m³/h"

    def test_non_string_values(self):
        assert escape_text(42) == "42"

    def test_text_element_parses(self):
        svg = text_element(0, 0, "Tank\x01 <A>", 10)
        root = parse_svg(f'<svg xmlns="http://www.w3.org/2000/svg">{svg}</svg>')
        assert root[0].text == "Tank <A>"


# =============================================================================
# NUMBERS AND TEXT WIDTH
# =============================================================================

class TestFormatting:
    """Tests for number formatting and label width estimates."""

    def test_fmt_drops_negative_zero(self):
        assert fmt(-0.001) == "0.00"
        assert fmt(-1.5) == "-1.50"

    def test_num(self):
        assert num(30.0) == "30"
        assert num(1.5) == "1.5"

    def test_text_width_scales_with_length_and_size(self):
        assert estimate_text_width("", 9) == 0
        assert estimate_text_width("x" * 10, 10) == pytest.approx(60)
        assert estimate_text_width("x" * 20, 10) == pytest.approx(2 * estimate_text_width("x" * 10, 10))
