"""Prompt component - the ``? message (hint)`` header of every question."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Union

from inquiry.ui.style import (
    MIDDLE_DOT,
    SMALL_ARROW,
    TICK,
    Color,
    bold,
    dark_grey,
    light_green,
)
from inquiry.ui.utils import visible_width

if TYPE_CHECKING:
    from inquiry.ui.backend import Backend
    from inquiry.ui.keys import KeyEvent
    from inquiry.ui.layout import Layout


class Delimiter(enum.Enum):
    """Characters surrounding the hint."""

    PARENTHESES = ("(", ")")
    BRACES = ("{", "}")
    SQUARE_BRACKET = ("[", "]")
    ANGLE_BRACKET = ("<", ">")
    NONE = None


#: A delimiter, or an explicit ``(start, end)`` pair of characters.
DelimiterLike = Union[Delimiter, tuple[str, str]]


class Prompt:
    """Renders ``? <message> <hint> `` and leaves the cursor after it.

    Without a hint a small arrow is drawn in its place. The prompt is an
    inline widget: after rendering, the layout continues on the same line so
    the answer can be drawn right after it.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        delim: DelimiterLike = Delimiter.PARENTHESES,
    ) -> None:
        self.message = message
        self.hint = hint
        self.delim = delim
        self._message_len = visible_width(message)
        self._hint_len = visible_width(hint) if hint is not None else 0

    def _delims(self) -> tuple[str, str] | None:
        if isinstance(self.delim, Delimiter):
            return self.delim.value
        return self.delim

    def message_len(self) -> int:
        return self._message_len

    def hint_len(self) -> int:
        """Width of the hint including its delimiters, 0 without a hint."""
        if self.hint is None:
            return 0
        if self._delims() is None:
            return self._hint_len
        return self._hint_len + 2

    def width(self) -> int:
        if self.hint is not None:
            # `? <message> <hint> `
            return 2 + self._message_len + 1 + self.hint_len() + 1
        # `? <message> › `
        return 2 + self._message_len + 3

    def cursor_pos(self, layout: Layout) -> tuple[int, int]:
        width = self.width()
        line_width = layout.line_width()
        if width > line_width:
            width -= line_width
            return width % layout.width, 1 + width // layout.width
        return layout.line_offset + width, 0

    def line_offset(self, layout: Layout) -> int:
        """Column the prompt ends at when rendered at *layout*."""
        return self.cursor_pos(layout)[0]

    def render(self, layout: Layout, backend: Backend) -> None:
        backend.write_styled(light_green("? "))
        backend.write_styled(bold(self.message))
        backend.write(" ")

        backend.set_fg(Color.DARK_GREY)
        delims = self._delims()
        if self.hint is None:
            backend.write(SMALL_ARROW)
        elif delims is None:
            backend.write(self.hint)
        else:
            backend.write(f"{delims[0]}{self.hint}{delims[1]}")
        backend.set_fg(Color.RESET)
        backend.write(" ")

        layout.set_cursor_pos(self.cursor_pos(layout))

    def height(self, layout: Layout) -> int:
        cursor_pos = self.cursor_pos(layout)
        layout.set_cursor_pos(cursor_pos)
        return cursor_pos[1] + 1

    def handle_key(self, key: KeyEvent) -> bool:
        return False


def write_finished_message(message: str, backend: Backend) -> None:
    """Write ``✔ <message> · ``, the header of an answered question."""
    backend.write_styled(light_green(TICK))
    backend.write(" ")
    backend.write_styled(bold(message))
    backend.write(" ")
    backend.write_styled(dark_grey(MIDDLE_DOT))
    backend.write(" ")
