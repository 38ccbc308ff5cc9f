"""Colours, text attributes and the symbols widgets draw with."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Color(enum.Enum):
    """Terminal foreground colours, valued by their SGR parameter."""

    RESET = 39
    BLACK = 30
    DARK_RED = 31
    DARK_GREEN = 32
    DARK_YELLOW = 33
    DARK_BLUE = 34
    DARK_MAGENTA = 35
    CYAN = 36
    GREY = 37
    DARK_GREY = 90
    RED = 91
    LIGHT_GREEN = 92
    YELLOW = 93
    BLUE = 94
    MAGENTA = 95
    LIGHT_CYAN = 96
    WHITE = 97


class Attributes(enum.Flag):
    NONE = 0
    BOLD = enum.auto()
    DIM = enum.auto()
    ITALIC = enum.auto()
    UNDERLINED = enum.auto()
    REVERSED = enum.auto()


_ATTRIBUTE_CODES: dict[Attributes, int] = {
    Attributes.BOLD: 1,
    Attributes.DIM: 2,
    Attributes.ITALIC: 3,
    Attributes.UNDERLINED: 4,
    Attributes.REVERSED: 7,
}

RESET = "\x1b[0m"


def sgr(fg: Color | None = None, attributes: Attributes = Attributes.NONE) -> str:
    """Return the SGR escape sequence selecting *fg* and *attributes*."""
    params = [str(code) for attr, code in _ATTRIBUTE_CODES.items() if attr in attributes]
    if fg is not None:
        params.append(str(fg.value))
    if not params:
        return ""
    return f"\x1b[{';'.join(params)}m"


@dataclass(frozen=True)
class Styled:
    """A piece of text together with the style it is printed in."""

    content: str
    fg: Color | None = None
    attributes: Attributes = Attributes.NONE

    def __str__(self) -> str:
        prefix = sgr(self.fg, self.attributes)
        if not prefix:
            return self.content
        return f"{prefix}{self.content}{RESET}"


def bold(text: str) -> Styled:
    return Styled(text, attributes=Attributes.BOLD)


def dark_grey(text: str) -> Styled:
    return Styled(text, fg=Color.DARK_GREY)


def light_green(text: str) -> Styled:
    return Styled(text, fg=Color.LIGHT_GREEN)


def light_cyan(text: str) -> Styled:
    return Styled(text, fg=Color.LIGHT_CYAN)


def cyan(text: str) -> Styled:
    return Styled(text, fg=Color.CYAN)


def dark_red(text: str) -> Styled:
    return Styled(text, fg=Color.DARK_RED)


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------

TICK = "✔"
CROSS = "✖"
SMALL_ARROW = "›"
ARROW = "❯"
MIDDLE_DOT = "·"
BOX_LIGHT_HORIZONTAL = "─"
SQUARE = "◻"
SQUARE_FILLED = "◼"
