"""Tests for RedisStore: cache entries with lazy expiry, and record tables."""

import json
from datetime import UTC, datetime, timedelta

from relief_store_access.store import CacheEntry, RedisStore


class TestCacheEntries:
    async def test_put_then_get(self, store, clock):
        await store.put("location:abc", "Paris", clock() + timedelta(hours=1))
        assert await store.get("location:abc") == "Paris"

    async def test_missing_key(self, store):
        assert await store.get("location:nothing") is None

    async def test_expired_entry_is_invisible(self, store, clock):
        await store.put("k", "v", clock() + timedelta(hours=1))
        clock.advance(hours=1)
        assert await store.get("k") is None

    async def test_fresh_until_expiry(self, store, clock):
        await store.put("k", "v", clock() + timedelta(hours=1))
        clock.advance(minutes=59, seconds=59)
        assert await store.get("k") == "v"

    async def test_last_write_wins(self, store, clock):
        await store.put("k", "first", clock() + timedelta(hours=1))
        await store.put("k", "second", clock() + timedelta(hours=1))
        assert await store.get("k") == "second"

    async def test_entry_envelope_and_redis_ttl(self, store, mock_redis, clock):
        expires = clock() + timedelta(hours=2)
        await store.put("k", "v", expires)

        entry = CacheEntry.model_validate_json(mock_redis.store["cache:k"])
        assert entry == CacheEntry(key="k", value="v", expires_at=expires)
        assert mock_redis.expiry_ms["cache:k"] == 2 * 3600 * 1000

    async def test_already_expired_put_keeps_positive_redis_ttl(self, store, mock_redis, clock):
        await store.put("k", "v", clock())
        assert mock_redis.expiry_ms["cache:k"] == 1
        assert await store.get("k") is None

    async def test_get_entry_ignores_freshness(self, store, clock):
        await store.put("k", "v", clock() + timedelta(hours=1))
        clock.advance(hours=5)
        entry = await store.get_entry("k")
        assert entry is not None
        assert not entry.is_fresh(clock())


class TestRecords:
    async def test_list_recent_most_recent_first(self, store):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        for i, offset in enumerate([5, 1, 9]):
            await store.upsert_record(
                "reports", f"r{i}", {"id": f"r{i}"}, base + timedelta(minutes=offset)
            )

        records = await store.list_recent("reports", 10)

        assert [r["id"] for r in records] == ["r2", "r0", "r1"]

    async def test_list_recent_respects_limit(self, store):
        base = datetime(2024, 1, 1, tzinfo=UTC)
        for i in range(5):
            await store.upsert_record("t", str(i), {"id": str(i)}, base + timedelta(seconds=i))

        records = await store.list_recent("t", 2)

        assert [r["id"] for r in records] == ["4", "3"]

    async def test_list_recent_non_positive_limit(self, store, mock_redis):
        assert await store.list_recent("t", 0) == []
        assert mock_redis.calls == []

    async def test_upsert_replaces_by_id(self, store):
        now = datetime(2024, 1, 1, tzinfo=UTC)
        await store.upsert_record("t", "1", {"id": "1", "v": 1}, now)
        await store.upsert_record("t", "1", {"id": "1", "v": 2}, now)

        assert await store.list_recent("t", 10) == [{"id": "1", "v": 2}]

    async def test_update_record_merges(self, store, mock_redis):
        now = datetime(2024, 1, 1, tzinfo=UTC)
        await store.upsert_record("t", "1", {"id": "1", "location_extracted": None}, now)

        updated = await store.update_record("t", "1", {"location_extracted": "Lagos"})

        assert updated == {"id": "1", "location_extracted": "Lagos"}
        assert json.loads(mock_redis.store["rec:t:1"]) == updated

    async def test_update_missing_record(self, store):
        assert await store.update_record("t", "nope", {"x": 1}) is None

    async def test_get_record(self, store):
        await store.upsert_record("t", "1", {"id": "1"}, datetime(2024, 1, 1, tzinfo=UTC))
        assert await store.get_record("t", "1") == {"id": "1"}
        assert await store.get_record("t", "2") is None

    async def test_dangling_index_entry_skipped(self, store, mock_redis):
        now = datetime(2024, 1, 1, tzinfo=UTC)
        await store.upsert_record("t", "1", {"id": "1"}, now)
        await store.upsert_record("t", "2", {"id": "2"}, now + timedelta(seconds=1))
        mock_redis.store.pop("rec:t:2")

        assert await store.list_recent("t", 10) == [{"id": "1"}]


async def test_default_client_is_singleton():
    from relief_store_access.client import get_client, reset_client

    reset_client()
    try:
        store = RedisStore()
        assert store.client is get_client()
    finally:
        reset_client()
