"""The contract every renderable element implements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from inquiry.ui.backend import Backend
    from inquiry.ui.keys import KeyEvent
    from inquiry.ui.layout import Layout


class Widget(Protocol):
    """A renderable, optionally interactive, terminal element.

    ``render`` and ``height`` take the layout by reference and advance it to
    where the widget ends, so a composite widget can stack its children by
    passing the same layout to each in turn. Widgets that end on a line of
    their own leave ``line_offset`` at 0; widgets that end mid-line (a prompt
    followed by an input on the same line) leave it at the end column.
    """

    def render(self, layout: Layout, backend: Backend) -> None:
        """Draw the widget at *layout*."""
        ...

    def height(self, layout: Layout) -> int:
        """Rows the widget occupies when rendered at *layout*."""
        ...

    def cursor_pos(self, layout: Layout) -> tuple[int, int]:
        """Cursor ``(column, row)`` relative to *layout* after rendering."""
        ...

    def handle_key(self, key: KeyEvent) -> bool:
        """Consume *key*; return ``True`` if it changed the widget."""
        ...
