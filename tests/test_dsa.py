"""Tests for conflictmap/dsa.py – the stable sort behind the timeline."""

from datetime import date

from conflictmap.dsa import merge_sort


def test_merge_sort_is_stable():
    items = [(2, "a"), (1, "b"), (2, "c"), (1, "d")]
    assert merge_sort(items, key=lambda x: x[0]) == [(1, "b"), (1, "d"), (2, "a"), (2, "c")]


def test_merge_sort_returns_new_list():
    items = [3, 1, 2]
    out = merge_sort(items)
    assert out == [1, 2, 3]
    assert items == [3, 1, 2]
    assert merge_sort([]) == []
    assert merge_sort((5,)) == [5]


def test_merge_sort_same_day_keeps_input_order():
    day = date(2022, 2, 24)
    pairs = [(date(2023, 4, 15), "sudan"), (day, "first"), (date(1967, 5, 25), "india"), (day, "second")]
    assert [name for _, name in merge_sort(pairs, key=lambda p: p[0])] == ["india", "first", "second", "sudan"]
