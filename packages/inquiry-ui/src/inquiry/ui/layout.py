"""Coordinate model shared by every widget.

A ``Layout`` describes where the next glyph is drawn and how much vertical
space a widget may use. Assume the highlighted part of the block below is the
space available for rendering::

     ____________
    |            |
    |     ███████|   <- the first row starts after ``line_offset`` columns
    |  ██████████|
    |  ██████████|
    '------------'
     ^^-- offset_x

Widgets receive a layout by value. ``render`` and ``height`` may update the
layout they are given so that composite widgets can stack children by
chaining the same object.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass


@dataclass(frozen=True)
class Size:
    width: int
    height: int


class RenderRegion(enum.Enum):
    """The slice of an item to show when it is taller than ``max_height``."""

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


@dataclass
class Layout:
    #: Columns already used on the current line before this widget starts.
    line_offset: int = 0
    #: Absolute column where rendering begins.
    offset_x: int = 0
    #: Absolute row where rendering begins.
    offset_y: int = 0
    #: Full terminal width.
    width: int = 0
    #: Full terminal height.
    height: int = 0
    #: Vertical budget granted to the widget currently being rendered.
    max_height: int = 0
    render_region: RenderRegion = RenderRegion.MIDDLE

    @classmethod
    def new(cls, line_offset: int, size: Size) -> Layout:
        return cls(
            line_offset=line_offset,
            width=size.width,
            height=size.height,
            max_height=size.height,
        )

    def copy(self) -> Layout:
        return dataclasses.replace(self)

    # -- builders -----------------------------------------------------------

    def with_line_offset(self, line_offset: int) -> Layout:
        return dataclasses.replace(self, line_offset=line_offset)

    def with_size(self, size: Size) -> Layout:
        layout = self.copy()
        layout.set_size(size)
        return layout

    def with_offset(self, offset_x: int, offset_y: int) -> Layout:
        return dataclasses.replace(self, offset_x=offset_x, offset_y=offset_y)

    def with_render_region(self, region: RenderRegion) -> Layout:
        return dataclasses.replace(self, render_region=region)

    def with_max_height(self, max_height: int) -> Layout:
        return dataclasses.replace(self, max_height=max_height)

    def with_cursor_pos(self, cursor_pos: tuple[int, int]) -> Layout:
        """Return the layout continuing from a widget-relative cursor position.

        ``cursor_pos`` is ``(column, row)`` as reported by ``cursor_pos`` on a
        widget rendered at this layout.
        """
        col, row = cursor_pos
        return dataclasses.replace(
            self, line_offset=col, offset_y=self.offset_y + row
        )

    def set_cursor_pos(self, cursor_pos: tuple[int, int]) -> None:
        """In-place form of :meth:`with_cursor_pos`."""
        col, row = cursor_pos
        self.line_offset = col
        self.offset_y += row

    def set_size(self, size: Size) -> None:
        self.width = size.width
        self.height = size.height

    # -- queries ------------------------------------------------------------

    def line_width(self) -> int:
        """Columns left on the current line."""
        return self.width - self.line_offset - self.offset_x

    def available_width(self) -> int:
        """Columns of a full line inside this layout."""
        return self.width - self.offset_x

    def get_start(self, height: int) -> int:
        """First row of an item of natural ``height`` that should be drawn."""
        if height <= self.max_height:
            return 0
        if self.render_region is RenderRegion.TOP:
            return 0
        if self.render_region is RenderRegion.BOTTOM:
            return height - self.max_height
        return (height - self.max_height) // 2
