"""Backing store: the narrow keyed-record interface the enrichment layer uses.

The enrichment layer only ever needs three operations:

    get(key)                      -> value or None (expired counts as None)
    put(key, value, expires_at)   -> upsert, last write wins
    list_recent(table, limit)     -> records, most recent first

BackingStore is that Protocol; RedisStore implements it on top of
RedisAdapter. RedisStore also exposes record upserts and partial updates,
which the post-persistence and location-extraction steps use.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Protocol

from pydantic import BaseModel

from relief_store_access.client import RedisAdapter, get_client
from relief_store_access.keys import cache_entry_key, record_idx_recent, record_key

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


class CacheEntry(BaseModel):
    """A stored value and the instant it stops being visible."""

    key: str
    value: str
    expires_at: datetime

    def is_fresh(self, now: datetime) -> bool:
        return now < self.expires_at


class BackingStore(Protocol):
    """What the enrichment layer needs from persistence, and nothing more."""

    async def get(self, key: str) -> str | None: ...

    async def put(self, key: str, value: str, expires_at: datetime) -> None: ...

    async def list_recent(self, table: str, limit: int) -> list[dict[str, Any]]: ...


class RedisStore:
    """BackingStore on Redis (Upstash in the cloud, fakeredis locally).

    Expiry is checked lazily on read against ``clock``. The Redis key TTL is
    set as well so dead entries are eventually reclaimed, but visibility never
    depends on it.
    """

    def __init__(
        self,
        client: RedisAdapter | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client = client
        self.clock = clock

    @property
    def client(self) -> RedisAdapter:
        return self._client if self._client is not None else get_client()

    # ------------------------------------------------------------------
    # Cache entries
    # ------------------------------------------------------------------

    async def get_entry(self, key: str) -> CacheEntry | None:
        raw = await self.client.get(cache_entry_key(key))
        if raw is None:
            return None
        return CacheEntry.model_validate_json(raw)

    async def get(self, key: str) -> str | None:
        entry = await self.get_entry(key)
        if entry is None or not entry.is_fresh(self.clock()):
            return None
        return entry.value

    async def put(self, key: str, value: str, expires_at: datetime) -> None:
        entry = CacheEntry(key=key, value=value, expires_at=expires_at)
        remaining_ms = int((expires_at - self.clock()).total_seconds() * 1000)
        await self.client.set(
            cache_entry_key(key), entry.model_dump_json(), px=max(remaining_ms, 1)
        )

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    async def upsert_record(
        self,
        table: str,
        record_id: str,
        record: dict[str, Any],
        created_at: datetime,
    ) -> None:
        """Insert or replace a record and index it by creation time."""
        await self.client.set(record_key(table, record_id), json.dumps(record))
        await self.client.zadd(record_idx_recent(table), {record_id: created_at.timestamp()})

    async def get_record(self, table: str, record_id: str) -> dict[str, Any] | None:
        raw = await self.client.get(record_key(table, record_id))
        return None if raw is None else json.loads(raw)

    async def update_record(
        self, table: str, record_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Apply a partial update. Returns the new record, or None if absent."""
        raw = await self.client.get(record_key(table, record_id))
        if raw is None:
            return None
        record = {**json.loads(raw), **changes}
        await self.client.set(record_key(table, record_id), json.dumps(record))
        return record

    async def list_recent(self, table: str, limit: int) -> list[dict[str, Any]]:
        if limit <= 0:
            return []
        ids = await self.client.zrevrange(record_idx_recent(table), 0, limit - 1)
        records: list[dict[str, Any]] = []
        for record_id in ids:
            raw = await self.client.get(record_key(table, record_id))
            if raw is None:
                logger.warning(f"Index for '{table}' points at missing record {record_id}")
                continue
            records.append(json.loads(raw))
        return records
