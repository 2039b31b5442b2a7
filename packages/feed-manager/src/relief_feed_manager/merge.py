"""Feed merge helper.

Merges any number of finite sequences of timestamped items into one list,
most recent first. Python's sort is stable, including with ``reverse=True``,
so items with equal timestamps keep their input order: earlier sequences
before later ones, and within a sequence, original order. Inputs are never
mutated; the result is a new list.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime
from itertools import chain
from operator import attrgetter
from typing import TypeVar

T = TypeVar("T")

by_created_at: Callable[[object], datetime] = attrgetter("created_at")


def merge_feeds(
    *sequences: Iterable[T],
    key: Callable[[T], datetime] = by_created_at,
) -> list[T]:
    """Merge ``sequences`` into one list ordered by ``key`` descending."""
    return sorted(chain.from_iterable(sequences), key=key, reverse=True)
