"""Text component - displays multi-line text with word wrapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from inquiry.ui.utils import visible_width, wrap_text

if TYPE_CHECKING:
    from inquiry.ui.backend import Backend
    from inquiry.ui.keys import KeyEvent
    from inquiry.ui.layout import Layout


class Text:
    """Word-wrapped text starting at the current cursor column.

    When the wrapped text is taller than ``layout.max_height`` only the rows
    picked by ``layout.render_region`` are drawn.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text

        # Cache
        self._cached_key: tuple[int, int] | None = None
        self._cached_lines: list[str] | None = None

    @property
    def text(self) -> str:
        return self._text

    def set_text(self, text: str) -> None:
        self._text = text
        self.invalidate()

    def invalidate(self) -> None:
        self._cached_key = None
        self._cached_lines = None

    def lines(self, layout: Layout) -> list[str]:
        """All wrapped lines, the first one starting after ``line_offset``."""
        key = (layout.available_width(), layout.line_offset)
        if self._cached_lines is not None and self._cached_key == key:
            return self._cached_lines

        self._cached_lines = wrap_text(
            self._text.replace("\t", "   "),
            layout.available_width(),
            first_line_offset=layout.line_offset,
        )
        self._cached_key = key
        return self._cached_lines

    def _visible(self, layout: Layout) -> tuple[int, list[str]]:
        lines = self.lines(layout)
        start = layout.get_start(len(lines))
        return start, lines[start : start + layout.max_height]

    def render(self, layout: Layout, backend: Backend) -> None:
        _, visible = self._visible(layout)
        for i, line in enumerate(visible):
            if i > 0:
                backend.move_cursor_to(layout.offset_x, layout.offset_y + i)
            backend.write(line)

        layout.line_offset = 0
        layout.offset_y += len(visible)

    def height(self, layout: Layout) -> int:
        _, visible = self._visible(layout)
        layout.line_offset = 0
        layout.offset_y += len(visible)
        return len(visible)

    def cursor_pos(self, layout: Layout) -> tuple[int, int]:
        start, visible = self._visible(layout)
        if not visible:
            return layout.line_offset, 0
        col = visible_width(visible[-1])
        if start == 0 and len(visible) == 1:
            col += layout.line_offset
        return col, len(visible) - 1

    def handle_key(self, key: KeyEvent) -> bool:
        return False
