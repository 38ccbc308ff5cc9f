"""StringInput component - single-line text entry that wraps across rows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

from inquiry.ui.keybindings import Movement
from inquiry.ui.keys import KeyCode, KeyModifiers
from inquiry.ui.utils import split_graphemes, visible_width

if TYPE_CHECKING:
    from inquiry.ui.backend import Backend
    from inquiry.ui.keys import KeyEvent
    from inquiry.ui.layout import Layout

#: Maps a typed character to the one inserted, or ``None`` to reject it.
FilterMapChar = Callable[[str], Optional[str]]


def no_filter(c: str) -> str | None:
    return c if c.isprintable() else None


def _is_whitespace(g: str) -> bool:
    return g.isspace()


class StringInput:
    """Editable value with a grapheme-aware cursor.

    The value is drawn from the current ``line_offset`` and lets the terminal
    wrap it onto following rows. With a ``mask`` every grapheme is drawn as
    the mask character instead.
    """

    def __init__(
        self,
        filter_map_char: FilterMapChar | None = None,
        mask: str | None = None,
    ) -> None:
        self._value: str = ""
        # index into _value, always on a grapheme boundary
        self._cursor: int = 0
        self._filter_map_char = filter_map_char or no_filter
        self.mask = mask

    # -- value ----------------------------------------------------------------

    @property
    def value(self) -> str:
        return self._value

    def set_value(self, value: str) -> None:
        """Replace the value and move the cursor to its end."""
        self._value = value
        self._cursor = len(value)

    @property
    def cursor(self) -> int:
        return self._cursor

    def has_value(self) -> bool:
        return bool(self._value)

    def finish(self) -> str:
        return self._value

    def _display(self, text: str) -> str:
        if self.mask is None:
            return text
        return self.mask * len(split_graphemes(text))

    # -- editing ----------------------------------------------------------------

    def _prev_boundary(self) -> int:
        graphemes = split_graphemes(self._value[: self._cursor])
        return self._cursor - len(graphemes[-1]) if graphemes else 0

    def _next_boundary(self) -> int:
        graphemes = split_graphemes(self._value[self._cursor :])
        return self._cursor + len(graphemes[0]) if graphemes else len(self._value)

    def _prev_word(self) -> int:
        graphemes = split_graphemes(self._value[: self._cursor])
        pos = self._cursor
        while graphemes and _is_whitespace(graphemes[-1]):
            pos -= len(graphemes.pop())
        while graphemes and not _is_whitespace(graphemes[-1]):
            pos -= len(graphemes.pop())
        return pos

    def _next_word(self) -> int:
        graphemes = split_graphemes(self._value[self._cursor :])
        pos = self._cursor
        i = 0
        while i < len(graphemes) and _is_whitespace(graphemes[i]):
            pos += len(graphemes[i])
            i += 1
        while i < len(graphemes) and not _is_whitespace(graphemes[i]):
            pos += len(graphemes[i])
            i += 1
        return pos

    def _insert(self, text: str) -> None:
        self._value = self._value[: self._cursor] + text + self._value[self._cursor :]
        self._cursor += len(text)

    def _delete_range(self, start: int, end: int) -> bool:
        if start == end:
            return False
        self._value = self._value[:start] + self._value[end:]
        self._cursor = start
        return True

    def handle_key(self, key: KeyEvent) -> bool:  # noqa: C901
        ctrl = KeyModifiers.CONTROL in key.modifiers
        alt = KeyModifiers.ALT in key.modifiers

        # Word deletion
        if (key.code is KeyCode.CHAR and ctrl and key.char == "w") or (
            key.code is KeyCode.BACKSPACE and alt
        ):
            return self._delete_range(self._prev_word(), self._cursor)

        if key.code is KeyCode.BACKSPACE:
            return self._delete_range(self._prev_boundary(), self._cursor)

        if key.code is KeyCode.DELETE:
            end = self._next_boundary()
            if end == self._cursor:
                return False
            self._value = self._value[: self._cursor] + self._value[end:]
            return True

        movement = Movement.from_key(key)
        if movement is not None:
            if movement is Movement.LEFT:
                target = self._prev_boundary()
            elif movement is Movement.RIGHT:
                target = self._next_boundary()
            elif movement is Movement.HOME:
                target = 0
            elif movement is Movement.END:
                target = len(self._value)
            elif movement is Movement.PREV_WORD:
                target = self._prev_word()
            elif movement is Movement.NEXT_WORD:
                target = self._next_word()
            else:
                return False
            if target == self._cursor:
                return False
            self._cursor = target
            return True

        if key.code is KeyCode.CHAR and not ctrl and not alt:
            c = self._filter_map_char(key.char)
            if c is None:
                return False
            self._insert(c)
            return True

        return False

    # -- Widget -----------------------------------------------------------------

    def _wrap_pos(self, layout: Layout, width: int) -> tuple[int, int]:
        total = layout.line_offset + width
        available = layout.available_width()
        if available <= 0:
            return total, 0
        return total % available, total // available

    def render(self, layout: Layout, backend: Backend) -> None:
        backend.write(self._display(self._value))
        layout.set_cursor_pos(self._wrap_pos(layout, visible_width(self._display(self._value))))

    def height(self, layout: Layout) -> int:
        cursor_pos = self._wrap_pos(layout, visible_width(self._display(self._value)))
        layout.set_cursor_pos(cursor_pos)
        return cursor_pos[1] + 1

    def cursor_pos(self, layout: Layout) -> tuple[int, int]:
        before = self._display(self._value[: self._cursor])
        return self._wrap_pos(layout, visible_width(before))
