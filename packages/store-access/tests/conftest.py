"""Test fixtures for Store Access.

Provides a MockRedis adapter that mirrors the RedisAdapter interface, storing
data in plain dicts and recording every call, plus a settable clock so expiry
can be tested without sleeping.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from relief_store_access.store import RedisStore

# ============================================================================
# MockRedis: mirrors RedisAdapter interface
# ============================================================================


class MockRedis:
    """In-memory Redis mock with RedisAdapter's async interface.

    Expiry arguments are recorded but not enforced; RedisStore decides
    freshness from its own clock.
    """

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.expiry_ms: dict[str, int] = {}
        self.sorted_sets: dict[str, dict[str, float]] = {}
        self.calls: list[tuple[str, tuple]] = []

    async def get(self, key: str) -> str | None:
        self.calls.append(("get", (key,)))
        return self.store.get(key)

    async def set(self, key: str, value: str, px: int | None = None) -> None:
        self.calls.append(("set", (key, value)))
        self.store[key] = value
        if px is not None:
            self.expiry_ms[key] = px

    async def zadd(self, key: str, mapping: dict[str, float]) -> None:
        self.calls.append(("zadd", (key, mapping)))
        self.sorted_sets.setdefault(key, {}).update(mapping)

    async def zrevrange(self, key: str, start: int, stop: int) -> list[str]:
        self.calls.append(("zrevrange", (key, start, stop)))
        members = self.sorted_sets.get(key, {})
        ordered = sorted(members, key=lambda m: members[m], reverse=True)
        return ordered[start : stop + 1]


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def mock_redis() -> MockRedis:
    return MockRedis()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 6, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def store(mock_redis, clock) -> RedisStore:
    return RedisStore(mock_redis, clock=clock)
