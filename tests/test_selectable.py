"""Tests for the cursor-addressed SelectableList."""

from __future__ import annotations

import pytest

from ascii_viewer.selectable import SelectableList


class TestSelectableList:

    def test_with_items_has_no_selection(self) -> None:
        items = SelectableList.with_items(["a", "b"])
        assert items.selected() is None
        assert items.current() is None
        assert len(items) == 2

    def test_select_first(self) -> None:
        items = SelectableList.with_items(["a", "b"])
        items.select_first()
        assert items.selected() == 0
        assert items.current() == "a"

    def test_select_first_on_empty_list(self) -> None:
        items = SelectableList.with_items([])
        items.select_first()
        assert items.selected() is None

    @pytest.mark.parametrize("method", ["next", "previous"])
    def test_unset_cursor_selects_first(self, method: str) -> None:
        items = SelectableList.with_items(["a", "b", "c"])
        getattr(items, method)()
        assert items.selected() == 0

    @pytest.mark.parametrize("length", [1, 2, 5])
    def test_next_wraps_after_full_cycle(self, length: int) -> None:
        items = SelectableList.with_items(list(range(length)))
        items.next()
        assert items.selected() == 0
        for _ in range(length):
            items.next()
        assert items.selected() == 0

    @pytest.mark.parametrize("length", [1, 2, 5])
    def test_previous_from_first_wraps_to_last(self, length: int) -> None:
        items = SelectableList.with_items(list(range(length)))
        items.select_first()
        items.previous()
        assert items.selected() == length - 1

    def test_next_then_previous_is_noop(self) -> None:
        items = SelectableList.with_items(["a", "b", "c", "d"])
        items.select_first()
        for _ in range(4):
            before = items.selected()
            items.next()
            items.previous()
            assert items.selected() == before
            items.next()

    def test_navigation_on_empty_list_is_noop(self) -> None:
        items = SelectableList.with_items([])
        items.next()
        items.previous()
        assert items.selected() is None
