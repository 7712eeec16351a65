"""Names of table formats, alignments, colours and text attributes used in themes."""

from __future__ import annotations

import re
from enum import Enum, IntEnum

_COLOR_NAMES = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white")
_RESET = "\x1b[0m"
_WORD_START = re.compile(r"(?<![^\W\d_])([^\W\d_])")


class Format(Enum):
    """How the text of a table header or row is cased."""

    DEFAULT = "default"
    LOWER = "lower"
    TITLE = "title"
    UPPER = "upper"

    def apply(self, text: str) -> str:
        if self is Format.LOWER:
            return text.lower()
        if self is Format.UPPER:
            return text.upper()
        if self is Format.TITLE:
            return _WORD_START.sub(lambda m: m.group(1).upper(), text)
        return text


class Align(Enum):
    """Horizontal alignment of a table cell."""

    LEFT = "left"
    CENTER = "center"
    JUSTIFY = "justify"
    RIGHT = "right"


class Color(IntEnum):
    """ANSI SGR codes for colours and attributes."""

    RESET = 0
    BOLD = 1
    FAINT = 2
    ITALIC = 3
    UNDERLINE = 4
    CROSSED_OUT = 9

    FG_BLACK = 30
    FG_RED = 31
    FG_GREEN = 32
    FG_YELLOW = 33
    FG_BLUE = 34
    FG_MAGENTA = 35
    FG_CYAN = 36
    FG_WHITE = 37

    BG_BLACK = 40
    BG_RED = 41
    BG_GREEN = 42
    BG_YELLOW = 43
    BG_BLUE = 44
    BG_MAGENTA = 45
    BG_CYAN = 46
    BG_WHITE = 47

    FG_HI_BLACK = 90
    FG_HI_RED = 91
    FG_HI_GREEN = 92
    FG_HI_YELLOW = 93
    FG_HI_BLUE = 94
    FG_HI_MAGENTA = 95
    FG_HI_CYAN = 96
    FG_HI_WHITE = 97

    BG_HI_BLACK = 100
    BG_HI_RED = 101
    BG_HI_GREEN = 102
    BG_HI_YELLOW = 103
    BG_HI_BLUE = 104
    BG_HI_MAGENTA = 105
    BG_HI_CYAN = 106
    BG_HI_WHITE = 107


_ATTRS = {
    "bold": Color.BOLD,
    "faint": Color.FAINT,
    "italic": Color.ITALIC,
    "underline": Color.UNDERLINE,
    "crossed_out": Color.CROSSED_OUT,
}


def get_format(name: str) -> Format:
    """Format for ``name``; unknown names give the default format."""
    try:
        return Format(name)
    except ValueError:
        return Format.DEFAULT


def get_align(name: str) -> Align:
    """Alignment for ``name``; unknown names align left."""
    try:
        return Align(name)
    except ValueError:
        return Align.LEFT


def _lookup(name: str, base: int) -> Color | None:
    bright = name.startswith("hi_")
    plain = name[3:] if bright else name
    if plain not in _COLOR_NAMES:
        return None
    return Color(base + (60 if bright else 0) + _COLOR_NAMES.index(plain))


def get_fg(name: str) -> Color | None:
    """Foreground colour for names like ``red`` or ``hi_red``, else None."""
    return _lookup(name, 30)


def get_bg(name: str) -> Color | None:
    """Background colour for names like ``red`` or ``hi_red``, else None."""
    return _lookup(name, 40)


def get_attr(name: str) -> Color | None:
    """Text attribute for ``name``; ``normal`` and unknown names give None."""
    return _ATTRS.get(name)


def combine_colors(fg: str | None, bg: str | None, attr: str | None) -> list[Color]:
    """Collect the valid foreground, background and attribute, in that order."""
    colors = []
    for value in (get_fg(fg or ""), get_bg(bg or ""), get_attr(attr or "")):
        if value is not None:
            colors.append(value)
    return colors


def colorize(text: str, colors: list[Color]) -> str:
    """Wrap ``text`` in the escape sequence for ``colors``.

    Resets inside ``text`` are followed by the sequence again so the styling
    carries on to the end.
    """
    if not colors or not text:
        return text
    seq = "\x1b[" + ";".join(str(int(c)) for c in colors) + "m"
    return seq + text.replace(_RESET, _RESET + seq) + _RESET