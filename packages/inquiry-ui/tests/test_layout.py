"""Tests for inquiry.ui.layout -- the coordinate model."""

from __future__ import annotations

from inquiry.ui.layout import Layout, RenderRegion, Size


class TestConstruction:
    def test_new(self) -> None:
        layout = Layout.new(5, Size(100, 40))
        assert layout.line_offset == 5
        assert (layout.offset_x, layout.offset_y) == (0, 0)
        assert (layout.width, layout.height) == (100, 40)
        assert layout.max_height == 40
        assert layout.render_region is RenderRegion.MIDDLE

    def test_builders_return_copies(self) -> None:
        layout = Layout.new(0, Size(80, 24))
        moved = layout.with_offset(2, 3)
        assert (moved.offset_x, moved.offset_y) == (2, 3)
        assert (layout.offset_x, layout.offset_y) == (0, 0)

        assert layout.with_line_offset(7).line_offset == 7
        assert layout.with_max_height(3).max_height == 3
        assert layout.with_render_region(RenderRegion.TOP).render_region is RenderRegion.TOP
        resized = layout.with_size(Size(10, 5))
        assert (resized.width, resized.height) == (10, 5)
        assert layout.width == 80

    def test_with_cursor_pos(self) -> None:
        layout = Layout.new(0, Size(80, 24)).with_offset(0, 4)
        moved = layout.with_cursor_pos((12, 2))
        assert moved.line_offset == 12
        assert moved.offset_y == 6

    def test_set_cursor_pos_in_place(self) -> None:
        layout = Layout.new(3, Size(80, 24))
        layout.set_cursor_pos((9, 1))
        assert layout.line_offset == 9
        assert layout.offset_y == 1

    def test_equality_is_structural(self) -> None:
        assert Layout.new(1, Size(80, 24)) == Layout.new(1, Size(80, 24))
        assert Layout.new(1, Size(80, 24)) != Layout.new(2, Size(80, 24))


class TestWidths:
    def test_line_width(self) -> None:
        layout = Layout.new(5, Size(100, 100)).with_offset(10, 0)
        assert layout.line_width() == 85

    def test_available_width(self) -> None:
        layout = Layout.new(5, Size(100, 100)).with_offset(10, 0)
        assert layout.available_width() == 90


class TestGetStart:
    def test_fits(self) -> None:
        layout = Layout.new(0, Size(80, 24)).with_max_height(5)
        assert layout.get_start(5) == 0
        assert layout.get_start(3) == 0

    def test_top_shows_head(self) -> None:
        layout = Layout.new(0, Size(80, 24)).with_max_height(3)
        assert layout.with_render_region(RenderRegion.TOP).get_start(10) == 0

    def test_bottom_shows_tail(self) -> None:
        layout = Layout.new(0, Size(80, 24)).with_max_height(3)
        assert layout.with_render_region(RenderRegion.BOTTOM).get_start(10) == 7

    def test_middle_centres(self) -> None:
        layout = Layout.new(0, Size(80, 24)).with_max_height(3)
        assert layout.get_start(10) == 3
        assert layout.get_start(9) == 3
