"""List virtualization and pagination.

:class:`Select` wraps any collection implementing the :class:`List` protocol
and keeps a scrollable window of item indices that fits in the list's page
size. Items may be taller than one line; the items at either edge of the
window may be clipped, in which case only their bottom (first item) or top
(last item) rows are drawn.

Item heights are computed once per distinct layout and cached, so repeated
renders at a stable terminal size only walk the visible window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Iterator, Protocol, TypeVar

from inquiry.ui.keybindings import Movement
from inquiry.ui.layout import Layout, RenderRegion
from inquiry.ui.style import dark_grey

if TYPE_CHECKING:
    from inquiry.ui.backend import Backend
    from inquiry.ui.keys import KeyEvent

logger = logging.getLogger(__name__)

MIN_PAGE_SIZE = 5

#: Footer shown under a paginated list; always takes exactly one line.
MORE_CHOICES_HINT = "(Move up and down to reveal more choices)"


class List(Protocol):
    """A collection that :class:`Select` can virtualize."""

    def render_item(
        self, index: int, hovered: bool, layout: Layout, backend: Backend
    ) -> None:
        """Render the item at *index* within ``layout.max_height`` rows."""
        ...

    def is_selectable(self, index: int) -> bool:
        """Whether the item can be hovered. Others are skipped over."""
        ...

    def page_size(self) -> int:
        """Maximum lines the list may take before it becomes scrollable."""
        ...

    def should_loop(self) -> bool:
        """Whether navigation wraps around at the ends."""
        ...

    def height_at(self, index: int, layout: Layout) -> int:
        """Natural height of the item at *index* when rendered at *layout*."""
        ...

    def __len__(self) -> int: ...

    def is_empty(self) -> bool:
        return len(self) == 0


L = TypeVar("L", bound=List)


@dataclass
class _Heights:
    heights: list[int]
    prev_layout: Layout


@dataclass
class _Page:
    """Visible window, inclusive on both ends. ``end < start`` means it wraps."""

    start: int
    end: int
    start_height: int
    end_height: int


class Select(Generic[L]):
    """Keeps track of the hovered item and the visible window of a list.

    Handles the Up, Down, Home, End, PageUp and PageDown movements.
    """

    def __init__(self, items: L) -> None:
        n = len(items)
        selectable = [i for i in range(n) if items.is_selectable(i)]
        if not selectable:
            raise ValueError("there must be at least one selectable item")
        if items.page_size() < MIN_PAGE_SIZE:
            raise ValueError(f"page size can be a minimum of {MIN_PAGE_SIZE}")

        self.list = items
        self._first_selectable = selectable[0]
        self._last_selectable = selectable[-1]
        self._at = self._first_selectable
        self._height = 0
        self._heights: _Heights | None = None
        self._page: _Page | None = None

    # -- public state ---------------------------------------------------------

    @property
    def at(self) -> int:
        """Index of the item currently hovered."""
        return self._at

    def set_at(self, at: int) -> None:
        """Hover the item at *at*.

        *at* may be any index, even ``len(list)``, but it is up to the caller
        to make sure it refers to a selectable item. Passing ``len(list)``
        is the same as :meth:`clear_hover`.
        """
        if self._at >= len(self.list) or self._at < at:
            moved = Movement.DOWN
        else:
            moved = Movement.UP

        self._at = at

        if self.is_paginating() and self._page is not None:
            if at >= len(self.list):
                self._init_page()
            else:
                self._try_adjust_page(moved)

    def clear_hover(self) -> None:
        """Hover nothing and scroll the window back to the top."""
        self.set_at(len(self.list))

    @property
    def first_selectable(self) -> int:
        return self._first_selectable

    @property
    def last_selectable(self) -> int:
        return self._last_selectable

    @property
    def page_start(self) -> int | None:
        return self._page.start if self._page is not None else None

    @property
    def page_end(self) -> int | None:
        return self._page.end if self._page is not None else None

    @property
    def selected(self) -> Any:
        """The hovered element, for lists that support indexing."""
        return self.list[self._at]  # type: ignore[index]

    def finish(self) -> L:
        """Give the wrapped list back. The :class:`Select` is spent afterwards."""
        items = self.list
        del self.list
        return items

    # -- selection ------------------------------------------------------------

    def _next_selectable(self) -> int:
        if self._at >= self._last_selectable:
            if self.list.should_loop():
                return self._first_selectable
            return self._last_selectable

        n = len(self.list)
        # at is not guaranteed to be in 0..n
        at = min(self._at, n)
        while True:
            at = (at + 1) % n
            if self.list.is_selectable(at):
                return at

    def _prev_selectable(self) -> int:
        if self._at <= self._first_selectable:
            if self.list.should_loop():
                return self._last_selectable
            return self._first_selectable

        n = len(self.list)
        # at is not guaranteed to be in 0..n
        at = min(self._at, n)
        while True:
            at = (n + at - 1) % n
            if self.list.is_selectable(at):
                return at

    # -- heights and pagination -------------------------------------------------

    def _update_heights(self, layout: Layout) -> None:
        if self._heights is not None and self._heights.prev_layout == layout:
            return

        key = layout.copy()
        item_layout = layout.copy()
        item_layout.line_offset = 0

        heights = [
            self.list.height_at(i, item_layout.copy()) for i in range(len(self.list))
        ]
        self._heights = _Heights(heights=heights, prev_layout=key)
        self._height = sum(heights)
        logger.debug(
            "computed heights of %d items for width %d: total %d",
            len(heights),
            layout.width,
            self._height,
        )

    def _page_size(self) -> int:
        return self.list.page_size()

    def is_paginating(self) -> bool:
        """Whether the items do not all fit in one page."""
        return self._heights is not None and self._height > self._page_size()

    def _at_outside_page(self) -> bool:
        """Whether the window must move to keep ``at`` comfortably visible.

        This is also true when ``at`` is exactly at either edge, so that there
        is always one item of margin in the direction of travel.
        """
        page = self._page
        assert page is not None
        if page.start <= page.end:
            # - a - - S - - - - - - E - a -
            #   ^------- outside -------^
            return self._at <= page.start or self._at >= page.end
        # - - - - E - - - a - - S - - -
        #       outside --^
        return self._at <= page.start and self._at >= page.end

    def _at_in_page(self) -> bool:
        page = self._page
        assert page is not None
        if page.start <= page.end:
            return page.start <= self._at <= page.end
        return self._at >= page.start or self._at <= page.end

    def _try_get_index(self, delta: int) -> int | None:
        """Index *delta* steps away from ``at``, honouring looping.

        *delta* must be within ``±len(list)``.
        """
        n = len(self.list)
        if delta > 0:
            res = self._at + delta
            if res < n:
                return res
            if self.list.should_loop():
                return res - n
            return None

        if self.list.should_loop():
            return (self._at + n + delta) % n
        res = self._at + delta
        return res if res >= 0 else None

    def _adjust_page(self, moved: Movement) -> None:
        """Rebuild the window around ``at`` after moving in *moved* direction."""
        assert self._heights is not None
        heights = self._heights.heights

        # direction is where we came from, the opposite of where we moved to
        direction = -1 if moved is Movement.DOWN else 1

        # -1 since the footer takes one line
        max_height = self._page_size() - 1

        # Take one item from the direction we came from, then one from the
        # opposite direction, then the rest from the direction we came from.
        #
        # Having moved down from 2 to 3:
        # .-----.
        # |  0  | <-- candidates[3]
        # .-----.
        # |  1  | <-- candidates[2]
        # .-----.
        # |  2  | <-- candidates[0] | preferred over 4 for continuity
        # .-----.
        # |  3  | <-- at
        # .-----.
        # |  4  | <-- candidates[1] | one item of padding at the end
        # '-----'
        def candidates() -> Iterator[tuple[int, bool]]:
            index = self._try_get_index(direction)
            if index is not None:
                yield index, False
            index = self._try_get_index(-direction)
            if index is not None:
                yield index, True
            for i in range(2, max_height):
                index = self._try_get_index(direction * i)
                if index is not None:
                    yield index, False

        # an item taller than the budget is clipped like any other edge item
        at_height = min(heights[self._at], max_height)
        # (index, visible height) of the far and the near window edges; which
        # of page start/end they become depends on the direction
        bound_a = (self._at, at_height)
        bound_b = (self._at, at_height)
        height = at_height

        for index, opposite in candidates():
            if height >= max_height:
                break

            if opposite:
                # The item in the opposite direction only ever shows one line,
                # so the hovered row does not jump when that item is tall.
                elem_height = 1
                bound_b = (index, elem_height)
            else:
                elem_height = min(height + heights[index], max_height) - height
                bound_a = (index, elem_height)

            height += elem_height

        if moved is Movement.DOWN:
            self._page = _Page(
                start=bound_a[0],
                end=bound_b[0],
                start_height=bound_a[1],
                end_height=bound_b[1],
            )
        else:
            self._page = _Page(
                start=bound_b[0],
                end=bound_a[0],
                start_height=bound_b[1],
                end_height=bound_a[1],
            )
        logger.debug(
            "window moved %s around %d: [%d, %d]",
            moved.value,
            self._at,
            self._page.start,
            self._page.end,
        )

    def _try_adjust_page(self, moved: Movement) -> None:
        if self._at_outside_page():
            self._adjust_page(moved)

    def _init_page(self) -> None:
        assert self._heights is not None
        heights = self._heights.heights

        if not self.is_paginating():
            end = len(self.list) - 1
            self._page = _Page(
                start=0, end=end, start_height=heights[0], end_height=heights[end]
            )
            return

        # -1 since the footer takes one line
        max_height = self._page_size() - 1
        height = heights[0]
        end = 0
        end_height = min(height, max_height)

        for i in range(1, len(heights)):
            if height >= max_height:
                break
            end = i
            end_height = min(height + heights[i], max_height) - height
            height += heights[i]

        self._page = _Page(
            start=0,
            end=end,
            start_height=heights[0] if end != 0 else end_height,
            end_height=end_height,
        )

    def _ensure_page(self) -> None:
        """Compute the initial window on first use."""
        if self._page is not None:
            return
        self._init_page()
        if (
            self.is_paginating()
            and self._at < len(self.list)
            and not self._at_in_page()
        ):
            self._adjust_page(Movement.DOWN)

    def _visible_indices(self) -> Iterator[int]:
        page = self._page
        assert page is not None
        if page.end < page.start:
            yield from range(page.start, len(self.list))
            yield from range(0, page.end + 1)
        else:
            yield from range(page.start, page.end + 1)

    def visible_items(self) -> list[tuple[int, int]]:
        """``(index, visible height)`` of every item in the current window.

        Only valid after the list has been rendered or sized once.
        """
        assert self._heights is not None
        self._ensure_page()
        page = self._page
        assert page is not None
        heights = self._heights.heights

        items: list[tuple[int, int]] = []
        for i in self._visible_indices():
            if i == page.start:
                items.append((i, page.start_height))
            elif i == page.end:
                items.append((i, page.end_height))
            else:
                items.append((i, heights[i]))
        return items

    # -- Widget -----------------------------------------------------------------

    def handle_key(self, key: KeyEvent) -> bool:  # noqa: C901
        movement = Movement.from_key(key)
        if movement is None:
            return False

        if self._heights is not None:
            self._ensure_page()

        should_loop = self.list.should_loop()
        paginating = self.is_paginating()

        if movement is Movement.UP and (should_loop or self._at > self._first_selectable):
            self._at = self._prev_selectable()
            moved = Movement.UP

        elif movement is Movement.DOWN and (
            should_loop or self._at < self._last_selectable
        ):
            self._at = self._next_selectable()
            moved = Movement.DOWN

        elif movement is Movement.PAGE_UP:
            assert not paginating or self._page is not None
            # Without pagination, or with the first item already shown and no
            # looping, PageUp is the same as Home
            if not paginating or (not should_loop and self._page.start == 0):
                if self._at <= self._first_selectable:
                    return False
                self._at = self._first_selectable
            else:
                # adjust_page makes at the second to last visible item, so
                # step back one to make the current item the last one visible
                prev = self._try_get_index(-1)
                if prev is not None:
                    self._at = prev
                self._adjust_page(Movement.DOWN)

                if self._page.start == 0 and not should_loop:
                    # Reached the top; the bounds computed above may be off
                    self._at = self._first_selectable
                    self._init_page()
                else:
                    # Hover the first selectable item below the top one
                    self._at = self._page.start
                    self._at = self._next_selectable()
            moved = Movement.UP

        elif movement is Movement.PAGE_DOWN:
            assert not paginating or self._page is not None
            n = len(self.list)
            # Without pagination, or with the last item already shown and no
            # looping, PageDown is the same as End
            if not paginating or (not should_loop and self._page.end + 1 == n):
                if self._at >= self._last_selectable:
                    return False
                self._at = self._last_selectable
            else:
                # adjust_page makes at the second visible item, so step
                # forward one to make the current item the first one visible
                nxt = self._try_get_index(1)
                if nxt is not None:
                    self._at = nxt
                self._adjust_page(Movement.UP)

                if self._page.end + 1 == n:
                    # Reached the bottom; the bounds computed above may be off
                    self._at = self._page.end
                    self._adjust_page(Movement.DOWN)
                    self._at = self._last_selectable
                else:
                    # Hover the last selectable item above the bottom one
                    self._at = self._page.end
                    self._at = self._prev_selectable()
            moved = Movement.DOWN

        elif movement is Movement.HOME and self._at != self._first_selectable:
            self._at = self._first_selectable
            moved = Movement.UP

        elif movement is Movement.END and self._at != self._last_selectable:
            self._at = self._last_selectable
            moved = Movement.DOWN

        else:
            return False

        if self.is_paginating():
            self._try_adjust_page(moved)

        return True

    def render(self, layout: Layout, backend: Backend) -> None:
        self._update_heights(layout)
        self._ensure_page()

        if layout.line_offset != 0:
            layout.line_offset = 0
            layout.offset_y += 1
            backend.move_cursor_to(layout.offset_x, layout.offset_y)

        # A local copy so max_height and render_region do not leak upstream
        item_layout = layout.copy()
        for index, visible_height in self.visible_items():
            if index == self._page.start:
                item_layout.render_region = RenderRegion.BOTTOM
            elif index == self._page.end:
                item_layout.render_region = RenderRegion.TOP
            else:
                item_layout.render_region = layout.render_region
            item_layout.max_height = visible_height

            self.list.render_item(index, index == self._at, item_layout.copy(), backend)
            item_layout.offset_y += visible_height
            backend.move_cursor_to(item_layout.offset_x, item_layout.offset_y)

        layout.offset_y = item_layout.offset_y

        if self.is_paginating():
            backend.write_styled(dark_grey(MORE_CHOICES_HINT))
            layout.offset_y += 1
            backend.move_cursor_to(layout.offset_x, layout.offset_y)

    def height(self, layout: Layout) -> int:
        self._update_heights(layout)
        assert self._heights is not None

        heights = self._heights.heights
        at_height = heights[self._at] if self._at < len(heights) else 0
        # never less than the hovered item, plus the footer when paginating
        lower_bound = at_height + int(self.is_paginating())

        height = int(layout.line_offset != 0) + max(
            min(self._height, self._page_size()), lower_bound
        )

        layout.line_offset = 0
        layout.offset_y += height
        return height

    def cursor_pos(self, layout: Layout) -> tuple[int, int]:
        """Position of the first row of the hovered item."""
        self._update_heights(layout)
        row = int(layout.line_offset != 0)
        for index, visible_height in self.visible_items():
            if index == self._at:
                break
            row += visible_height
        return 0, row
