"""
SVG markup helpers shared by the symbol library and document assembler.
"""

import re
from xml.sax.saxutils import escape

from .constants import FONT_FAMILY, LINE_COLOR, SYMBOL_STROKE_WIDTH, TEXT_WIDTH_FACTOR

# saxutils.escape handles & < > - quotes are added for attribute and text safety
_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}

# Characters outside the XML 1.0 Char production, which no escaping can represent
_INVALID_XML_CHARS = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def escape_text(value: object) -> str:
    """
    Escape the five markup-significant characters in free text.

    Control characters and other code points XML 1.0 forbids are dropped.
    """
    return escape(_INVALID_XML_CHARS.sub("", str(value)), _QUOTE_ENTITIES)


def estimate_text_width(text: str, font_size: float) -> float:
    """Rough rendered width of a sans-serif text line."""
    return len(text) * font_size * TEXT_WIDTH_FACTOR


def fmt(value: float, digits: int = 2) -> str:
    """Format a coordinate with fixed decimals, without a negative zero."""
    text = f"{value:.{digits}f}"
    if text.startswith("-") and float(text) == 0:
        return text[1:]
    return text


def num(value: float) -> str:
    """Compact number formatting for static glyph geometry (30.0 -> 30)."""
    return f"{value:g}"


def stroke(width: float = SYMBOL_STROKE_WIDTH, color: str = LINE_COLOR, fill: str = "none") -> str:
    """Common stroke/fill attributes for outlined glyph geometry."""
    return f'fill="{fill}" stroke="{color}" stroke-width="{num(width)}"'


def text_element(
    x: float,
    y: float,
    content: str,
    font_size: float,
    fill: str = LINE_COLOR,
    bold: bool = False,
    anchor: str = "middle",
) -> str:
    """Create a <text> element; content is escaped here, never by callers."""
    weight = ' font-weight="bold"' if bold else ""
    return (
        f'<text x="{fmt(x)}" y="{fmt(y)}" text-anchor="{anchor}" '
        f'font-size="{num(font_size)}"{weight} font-family="{FONT_FAMILY}" '
        f'fill="{fill}">{escape_text(content)}</text>'
    )
