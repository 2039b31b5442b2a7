"""Tests for the feed merge helper."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from relief_feed_manager.merge import merge_feeds

T = datetime(2024, 8, 1, 12, 0, tzinfo=UTC)


@dataclass
class Item:
    name: str
    created_at: datetime


def test_descending_by_timestamp():
    items = [Item("a", T - timedelta(hours=2)), Item("b", T), Item("c", T - timedelta(hours=1))]
    assert [i.name for i in merge_feeds(items)] == ["b", "c", "a"]


def test_interleaves_multiple_sequences():
    reports = [Item("r1", T - timedelta(minutes=5)), Item("r2", T - timedelta(minutes=20))]
    posts = [Item("p1", T), Item("p2", T - timedelta(minutes=10))]
    assert [i.name for i in merge_feeds(reports, posts)] == ["p1", "r1", "p2", "r2"]


def test_empty_with_non_empty_keeps_order():
    items = [Item("x", T), Item("y", T - timedelta(seconds=1))]
    assert merge_feeds([], items) == items
    assert merge_feeds(items, []) == items


def test_all_empty():
    assert merge_feeds() == []
    assert merge_feeds([], []) == []


def test_ties_keep_input_order():
    first = [Item("a1", T), Item("a2", T)]
    second = [Item("b1", T)]
    assert [i.name for i in merge_feeds(first, second)] == ["a1", "a2", "b1"]


def test_inputs_not_mutated():
    items = [Item("old", T - timedelta(days=1)), Item("new", T)]
    snapshot = list(items)

    result = merge_feeds(items)

    assert items == snapshot
    assert result is not items


def test_accepts_generators():
    result = merge_feeds(Item(str(n), T + timedelta(seconds=n)) for n in range(3))
    assert [i.name for i in result] == ["2", "1", "0"]


def test_custom_key():
    rows = [{"ts": T}, {"ts": T + timedelta(seconds=1)}]
    assert merge_feeds(rows, key=lambda r: r["ts"]) == [rows[1], rows[0]]
