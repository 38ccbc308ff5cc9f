"""CharInput component - holds at most one typed character."""

from __future__ import annotations

from typing import TYPE_CHECKING

from inquiry.ui.keys import KeyCode, KeyModifiers
from inquiry.ui.utils import visible_width
from inquiry.ui.widgets.string_input import FilterMapChar, no_filter

if TYPE_CHECKING:
    from inquiry.ui.backend import Backend
    from inquiry.ui.keys import KeyEvent
    from inquiry.ui.layout import Layout


class CharInput:
    """Typing replaces the character, Backspace and Delete clear it."""

    def __init__(self, filter_map_char: FilterMapChar | None = None) -> None:
        self._value: str | None = None
        self._filter_map_char = filter_map_char or no_filter

    @property
    def value(self) -> str | None:
        return self._value

    def set_value(self, value: str | None) -> None:
        self._value = value

    def finish(self) -> str | None:
        return self._value

    def handle_key(self, key: KeyEvent) -> bool:
        if key.code is KeyCode.CHAR and not (
            key.modifiers & (KeyModifiers.CONTROL | KeyModifiers.ALT)
        ):
            c = self._filter_map_char(key.char)
            if c is None:
                return False
            self._value = c
            return True

        if key.code in (KeyCode.BACKSPACE, KeyCode.DELETE) and self._value is not None:
            self._value = None
            return True

        return False

    def _width(self) -> int:
        return visible_width(self._value) if self._value is not None else 0

    def cursor_pos(self, layout: Layout) -> tuple[int, int]:
        total = layout.line_offset + self._width()
        available = layout.available_width()
        if available <= 0:
            return total, 0
        return total % available, total // available

    def render(self, layout: Layout, backend: Backend) -> None:
        if self._value is not None:
            backend.write(self._value)
        layout.set_cursor_pos(self.cursor_pos(layout))

    def height(self, layout: Layout) -> int:
        cursor_pos = self.cursor_pos(layout)
        layout.set_cursor_pos(cursor_pos)
        return cursor_pos[1] + 1
