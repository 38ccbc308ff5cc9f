"""Tests for the Select pagination engine."""

from __future__ import annotations

import random

import pytest

from inquiry.ui.keys import KeyCode, KeyEvent
from inquiry.ui.layout import Layout, RenderRegion, Size
from inquiry.ui.select import MORE_CHOICES_HINT, List, Select

from .virtual_backend import VirtualBackend

UP = KeyEvent(KeyCode.UP)
DOWN = KeyEvent(KeyCode.DOWN)
PAGE_UP = KeyEvent(KeyCode.PAGE_UP)
PAGE_DOWN = KeyEvent(KeyCode.PAGE_DOWN)
HOME = KeyEvent(KeyCode.HOME)
END = KeyEvent(KeyCode.END)


def _layout(width: int = 100, height: int = 100, line_offset: int = 0) -> Layout:
    return Layout.new(line_offset, Size(width, height))


class NumberList(List):
    """Items rendered as their index, with configurable heights."""

    def __init__(
        self,
        n: int = 20,
        *,
        heights: list[int] | None = None,
        unselectable: set[int] | None = None,
        page_size: int = 5,
        loop: bool = False,
    ) -> None:
        self.n = n
        self.heights = heights if heights is not None else [1] * n
        self.unselectable = unselectable or set()
        self._page_size = page_size
        self._loop = loop
        self.height_calls = 0
        self.rendered: list[tuple[int, bool, int, RenderRegion]] = []

    def __len__(self) -> int:
        return self.n

    def __getitem__(self, index: int) -> str:
        return f"item {index}"

    def render_item(self, index, hovered, layout, backend) -> None:
        self.rendered.append((index, hovered, layout.max_height, layout.render_region))
        backend.write(f"{'>' if hovered else ' '}{index}")

    def is_selectable(self, index: int) -> bool:
        return index not in self.unselectable

    def page_size(self) -> int:
        return self._page_size

    def should_loop(self) -> bool:
        return self._loop

    def height_at(self, index: int, layout: Layout) -> int:
        self.height_calls += 1
        return self.heights[index]


def _sized(items: NumberList) -> Select[NumberList]:
    select = Select(items)
    select.height(_layout())
    return select


def _assert_window_invariant(select: Select[NumberList]) -> None:
    if not select.is_paginating():
        return
    visible = select.visible_items()
    assert sum(h for _, h in visible) <= select.list.page_size() - 1
    assert select.at in [i for i, _ in visible]


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_first_and_last_selectable(self) -> None:
        select = Select(NumberList(10, unselectable={0, 1, 9}))
        assert select.first_selectable == 2
        assert select.last_selectable == 8
        assert select.at == 2

    def test_no_selectable_item_raises(self) -> None:
        with pytest.raises(ValueError, match="selectable"):
            Select(NumberList(3, unselectable={0, 1, 2}))

    def test_empty_list_raises(self) -> None:
        with pytest.raises(ValueError):
            Select(NumberList(0))

    def test_page_size_below_minimum_raises(self) -> None:
        with pytest.raises(ValueError, match="page size"):
            Select(NumberList(10, page_size=4))

    def test_window_uninitialised_until_sized(self) -> None:
        select = Select(NumberList())
        assert select.page_start is None
        assert select.page_end is None
        assert not select.is_paginating()

    def test_is_empty_default(self) -> None:
        assert NumberList(0).is_empty()
        assert not NumberList(1).is_empty()

    def test_finish_returns_list(self) -> None:
        items = NumberList(3)
        select = Select(items)
        assert select.finish() is items

    def test_selected(self) -> None:
        select = _sized(NumberList(5))
        select.handle_key(DOWN)
        assert select.selected == "item 1"


# ---------------------------------------------------------------------------
# Window initialisation
# ---------------------------------------------------------------------------


class TestInitialWindow:
    def test_twenty_single_line_items(self) -> None:
        select = _sized(NumberList(20, page_size=5))
        assert select.is_paginating()
        assert select.visible_items() == [(0, 1), (1, 1), (2, 1), (3, 1)]
        assert (select.page_start, select.page_end) == (0, 3)

    def test_not_paginating_spans_whole_list(self) -> None:
        select = _sized(NumberList(4, page_size=5))
        assert not select.is_paginating()
        assert (select.page_start, select.page_end) == (0, 3)

    def test_exactly_page_size_does_not_paginate(self) -> None:
        select = _sized(NumberList(5, page_size=5))
        assert not select.is_paginating()

    def test_last_item_clipped_to_budget(self) -> None:
        select = _sized(NumberList(10, heights=[1, 1, 1, 4, 1, 1, 1, 1, 1, 1]))
        assert select.visible_items() == [(0, 1), (1, 1), (2, 1), (3, 1)]

    def test_hover_set_before_first_render_is_visible(self) -> None:
        select = Select(NumberList(20))
        select.set_at(10)
        select.render(_layout(), VirtualBackend(100, 100))
        indices = [i for i, _ in select.visible_items()]
        assert 10 in indices
        _assert_window_invariant(select)


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


class TestNavigation:
    def test_down_moves_window_with_margin(self) -> None:
        select = _sized(NumberList(20))
        for _ in range(3):
            assert select.handle_key(DOWN)
        assert select.at == 3
        assert (select.page_start, select.page_end) == (1, 4)

    def test_move_inside_window_keeps_it(self) -> None:
        select = _sized(NumberList(20))
        select.handle_key(DOWN)
        assert select.at == 1
        assert (select.page_start, select.page_end) == (0, 3)

    def test_boundaries_are_no_ops_without_loop(self) -> None:
        select = _sized(NumberList(20))
        assert not select.handle_key(UP)
        assert select.at == 0

        assert select.handle_key(END)
        assert select.at == 19
        assert not select.handle_key(DOWN)
        assert select.at == 19

    def test_up_wraps_with_loop(self) -> None:
        select = _sized(NumberList(20, loop=True))
        assert select.handle_key(UP)
        assert select.at == 19
        assert (select.page_start, select.page_end) == (18, 1)
        _assert_window_invariant(select)

    def test_down_wraps_with_loop(self) -> None:
        select = _sized(NumberList(20, loop=True))
        select.handle_key(END)
        assert select.handle_key(DOWN)
        assert select.at == 0
        _assert_window_invariant(select)

    def test_skips_unselectable(self) -> None:
        select = _sized(NumberList(10, unselectable={1, 2}))
        select.handle_key(DOWN)
        assert select.at == 3
        select.handle_key(UP)
        assert select.at == 0

    def test_down_then_up_round_trip_with_loop(self) -> None:
        items = NumberList(8, unselectable={2, 5}, loop=True)
        select = _sized(items)
        for start in [0, 1, 3, 4, 6, 7]:
            select.set_at(start)
            select.handle_key(DOWN)
            select.handle_key(UP)
            assert select.at == start

    def test_home_and_end(self) -> None:
        select = _sized(NumberList(20, unselectable={0, 19}))
        assert select.handle_key(END)
        assert select.at == 18
        assert not select.handle_key(END)
        assert select.handle_key(HOME)
        assert select.at == 1
        assert not select.handle_key(HOME)

    def test_end_scrolls_window_to_bottom(self) -> None:
        select = _sized(NumberList(20))
        select.handle_key(END)
        assert (select.page_start, select.page_end) == (16, 19)

    def test_unrecognised_key_not_handled(self) -> None:
        select = _sized(NumberList(20))
        assert not select.handle_key(KeyEvent.of_char("x"))
        assert not select.handle_key(KeyEvent(KeyCode.ENTER))
        assert select.at == 0

    def test_handle_key_before_render(self) -> None:
        select = Select(NumberList(20))
        assert select.handle_key(DOWN)
        assert select.at == 1
        assert select.page_start is None


class TestPaging:
    def test_page_down_reaches_last_then_no_op(self) -> None:
        select = _sized(NumberList(20))
        presses = 0
        while select.handle_key(PAGE_DOWN):
            presses += 1
            _assert_window_invariant(select)
            assert presses < 30
        assert select.at == select.last_selectable == 19
        assert not select.handle_key(PAGE_DOWN)
        assert select.at == 19

    def test_page_down_advances(self) -> None:
        select = _sized(NumberList(20))
        select.handle_key(PAGE_DOWN)
        assert select.at == 2
        select.handle_key(PAGE_DOWN)
        assert select.at == 4
        assert (select.page_start, select.page_end) == (2, 5)

    def test_page_up_reaches_first_then_no_op(self) -> None:
        select = _sized(NumberList(20))
        select.handle_key(END)
        presses = 0
        while select.handle_key(PAGE_UP):
            presses += 1
            _assert_window_invariant(select)
            assert presses < 30
        assert select.at == 0
        assert (select.page_start, select.page_end) == (0, 3)

    def test_page_up_from_end(self) -> None:
        select = _sized(NumberList(20))
        select.handle_key(END)
        assert select.handle_key(PAGE_UP)
        assert select.at == 17

    def test_paging_degrades_to_home_end_without_pagination(self) -> None:
        select = _sized(NumberList(3))
        assert select.handle_key(PAGE_DOWN)
        assert select.at == 2
        assert not select.handle_key(PAGE_DOWN)
        assert select.handle_key(PAGE_UP)
        assert select.at == 0
        assert not select.handle_key(PAGE_UP)

    def test_page_down_with_loop_keeps_invariant(self) -> None:
        select = _sized(NumberList(20, loop=True, unselectable={4, 11}))
        for _ in range(25):
            assert select.handle_key(PAGE_DOWN)
            assert select.list.is_selectable(select.at)
            _assert_window_invariant(select)

    def test_mixed_heights_keep_invariant(self) -> None:
        heights = [1, 2, 1, 3, 1, 1, 2, 1, 1, 1, 2, 1]
        select = _sized(NumberList(12, heights=heights, page_size=7))
        for key in [DOWN] * 11 + [PAGE_UP] * 4 + [PAGE_DOWN] * 4 + [UP] * 5:
            select.handle_key(key)
            assert 0 <= select.at < 12
            _assert_window_invariant(select)


class TestTallItems:
    """Items at least as tall as the page budget of ``page_size() - 1`` rows."""

    def test_tall_first_item(self) -> None:
        select = _sized(NumberList(10, heights=[6] + [1] * 9))
        assert select.visible_items() == [(0, 4)]
        select.handle_key(END)
        assert select.at == 9
        assert (select.page_start, select.page_end) == (6, 9)
        _assert_window_invariant(select)

    def test_page_up_back_to_tall_first_item(self) -> None:
        select = _sized(NumberList(10, heights=[6] + [1] * 9))
        select.handle_key(END)
        presses = 0
        while select.handle_key(PAGE_UP):
            presses += 1
            _assert_window_invariant(select)
            assert presses < 20
        assert select.at == 0
        select.handle_key(DOWN)
        assert select.at == 1
        _assert_window_invariant(select)

    def test_hovered_tall_item_is_clipped(self) -> None:
        select = _sized(NumberList(10, heights=[1, 1, 1, 6, 1, 1, 1, 1, 1, 1]))
        for _ in range(3):
            select.handle_key(DOWN)
            _assert_window_invariant(select)
        assert select.at == 3
        assert select.visible_items() == [(3, 4)]

        select.handle_key(DOWN)
        assert select.at == 4
        assert select.visible_items() == [(3, 3), (4, 1)]
        _assert_window_invariant(select)

    def test_hovered_tall_item_renders_its_bottom(self) -> None:
        items = NumberList(10, heights=[1, 1, 1, 6, 1, 1, 1, 1, 1, 1])
        select = _sized(items)
        for _ in range(3):
            select.handle_key(DOWN)
        backend = VirtualBackend(100, 100)
        layout = _layout()
        select.render(layout, backend)
        assert items.rendered == [(3, True, 4, RenderRegion.BOTTOM)]
        # the footer stays inside the page
        assert layout.offset_y == 5

    @pytest.mark.parametrize("loop", [False, True])
    @pytest.mark.parametrize(
        "heights",
        [
            [6] + [1] * 9,
            [1, 1, 1, 6, 1, 1, 1, 1, 1, 1],
            [3, 5, 5, 5, 1, 2, 7, 1],
            [4, 4, 4, 4, 4, 4, 4, 4],
            [1, 9, 1, 9, 1, 9, 1, 9],
        ],
    )
    def test_navigation_keeps_invariant(self, heights: list[int], loop: bool) -> None:
        n = len(heights)
        select = _sized(NumberList(n, heights=heights, loop=loop))
        keys = [UP, DOWN, PAGE_UP, PAGE_DOWN, HOME, END]
        rng = random.Random(n * 31 + sum(heights))
        for _ in range(200):
            select.handle_key(rng.choice(keys))
            assert 0 <= select.at < n
            _assert_window_invariant(select)


# ---------------------------------------------------------------------------
# Hover
# ---------------------------------------------------------------------------


class TestHover:
    def test_set_at_scrolls_window(self) -> None:
        select = _sized(NumberList(20))
        select.set_at(10)
        assert select.at == 10
        assert (select.page_start, select.page_end) == (8, 11)

    def test_clear_hover_resets_window(self) -> None:
        select = _sized(NumberList(20))
        select.set_at(10)
        select.clear_hover()
        assert select.at == 20
        assert (select.page_start, select.page_end) == (0, 3)
        assert select.height(_layout()) == 5

    def test_set_at_len_same_as_clear_hover(self) -> None:
        select = _sized(NumberList(20))
        select.set_at(12)
        select.set_at(20)
        assert (select.page_start, select.page_end) == (0, 3)


# ---------------------------------------------------------------------------
# Sizing
# ---------------------------------------------------------------------------


class TestHeight:
    def test_paginating_height_is_page_size(self) -> None:
        select = Select(NumberList(20))
        layout = _layout()
        assert select.height(layout) == 5
        assert layout.offset_y == 5
        assert layout.line_offset == 0

    def test_height_of_short_list(self) -> None:
        assert Select(NumberList(3)).height(_layout()) == 3

    def test_line_offset_adds_a_line(self) -> None:
        layout = _layout(line_offset=7)
        assert Select(NumberList(3)).height(layout) == 4
        assert layout.line_offset == 0
        assert layout.offset_y == 4

    def test_never_smaller_than_hovered_item(self) -> None:
        items = NumberList(6, heights=[1, 1, 1, 1, 1, 8], page_size=5)
        select = _sized(items)
        select.handle_key(END)
        assert select.height(_layout()) == 9

    def test_idempotent_per_layout(self) -> None:
        items = NumberList(20)
        select = Select(items)
        first = select.height(_layout())
        second = select.height(_layout())
        assert first == second
        assert items.height_calls == 20

    def test_layout_change_recomputes_heights(self) -> None:
        items = NumberList(20)
        select = Select(items)
        select.height(_layout(width=100))
        select.height(_layout(width=60))
        assert items.height_calls == 40

    def test_cursor_pos_is_hovered_row(self) -> None:
        select = _sized(NumberList(20))
        select.handle_key(DOWN)
        select.handle_key(DOWN)
        assert select.cursor_pos(_layout()) == (0, 2)
        assert select.cursor_pos(_layout(line_offset=4)) == (0, 3)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRender:
    def test_renders_window_and_footer(self) -> None:
        backend = VirtualBackend(100, 100)
        layout = _layout()
        Select(NumberList(20)).render(layout, backend)
        assert backend.lines() == [">0", " 1", " 2", " 3", MORE_CHOICES_HINT]
        assert layout.offset_y == 5

    def test_no_footer_without_pagination(self) -> None:
        backend = VirtualBackend(100, 100)
        Select(NumberList(3)).render(_layout(), backend)
        assert backend.lines() == [">0", " 1", " 2"]

    def test_edge_regions(self) -> None:
        items = NumberList(20)
        select = _sized(items)
        select.set_at(10)
        select.render(_layout(), VirtualBackend(100, 100))
        assert items.rendered == [
            (8, False, 1, RenderRegion.BOTTOM),
            (9, False, 1, RenderRegion.MIDDLE),
            (10, True, 1, RenderRegion.MIDDLE),
            (11, False, 1, RenderRegion.TOP),
        ]

    def test_wrapped_window_order(self) -> None:
        items = NumberList(20, loop=True)
        select = _sized(items)
        select.handle_key(UP)
        backend = VirtualBackend(100, 100)
        select.render(_layout(), backend)
        assert [r[0] for r in items.rendered] == [18, 19, 0, 1]
        assert backend.lines()[:4] == [" 18", ">19", " 0", " 1"]

    def test_clipped_item_gets_remaining_budget(self) -> None:
        items = NumberList(10, heights=[1, 1, 1, 4, 1, 1, 1, 1, 1, 1])
        Select(items).render(_layout(), VirtualBackend(100, 100))
        assert items.rendered[-1] == (3, False, 1, RenderRegion.TOP)

    def test_line_offset_starts_on_next_line(self) -> None:
        backend = VirtualBackend(100, 100)
        backend.write("? q ")
        layout = _layout(line_offset=4)
        Select(NumberList(2)).render(layout, backend)
        assert backend.lines() == ["? q", ">0", " 1"]
        assert layout.offset_y == 3
        assert layout.line_offset == 0

    def test_render_at_offset(self) -> None:
        backend = VirtualBackend(100, 100)
        layout = _layout().with_offset(0, 10)
        backend.move_cursor_to(0, 10)
        Select(NumberList(2)).render(layout, backend)
        assert backend.line(10) == ">0"
        assert backend.line(11) == " 1"
        assert layout.offset_y == 12

    def test_failed_write_leaves_state_unchanged(self) -> None:
        select = _sized(NumberList(20))
        select.set_at(10)
        select.render(_layout(), VirtualBackend(100, 100))
        state = (select.at, select.page_start, select.page_end)

        with pytest.raises(OSError, match="broken pipe"):
            select.render(_layout(), _FailingBackend(fail_on=2))
        assert (select.at, select.page_start, select.page_end) == state

        backend = VirtualBackend(100, 100)
        select.render(_layout(), backend)
        assert backend.lines() == [" 8", " 9", ">10", " 11", MORE_CHOICES_HINT]


class _FailingBackend(VirtualBackend):
    """Raises on the *fail_on*-th call to ``write``."""

    def __init__(self, fail_on: int) -> None:
        super().__init__(100, 100)
        self.fail_on = fail_on
        self.writes = 0

    def write(self, text: str) -> None:
        self.writes += 1
        if self.writes == self.fail_on:
            raise OSError("broken pipe")
        super().write(text)
