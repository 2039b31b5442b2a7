"""Redis client adapter for the backing store.

Normalizes the interface between the Upstash SDK (cloud) and fakeredis (local
dev and tests). Both speak get/set/zadd, but they differ on a few call
signatures (reverse range, expiry arguments); RedisAdapter hides that so the
store never touches a raw client.

Environment detection:
  - UPSTASH_REDIS_REST_URL set -> Upstash SDK (staging/prod)
  - Otherwise                  -> fakeredis (in-memory, no external dependency)
"""

from __future__ import annotations

import os
from typing import Any


def _text(value: Any) -> str:
    return value if isinstance(value, str) else value.decode()


class RedisAdapter:
    """Unified async Redis interface over Upstash SDK or fakeredis."""

    def __init__(self, raw_client: Any, is_upstash: bool = False) -> None:
        self._client = raw_client
        self._is_upstash = is_upstash

    async def get(self, key: str) -> str | None:
        value = await self._client.get(key)
        return None if value is None else _text(value)

    async def set(self, key: str, value: str, px: int | None = None) -> None:
        """Set ``key``; ``px`` is an optional expiry in milliseconds."""
        if px is None:
            await self._client.set(key, value)
        else:
            await self._client.set(key, value, px=px)

    async def zadd(self, key: str, mapping: dict[str, float]) -> None:
        await self._client.zadd(key, mapping)

    async def zrevrange(self, key: str, start: int, stop: int) -> list[str]:
        """Members from highest to lowest score, ``stop`` inclusive."""
        if self._is_upstash:
            result = await self._client.zrange(key, start, stop, rev=True)
        else:
            result = await self._client.zrevrange(key, start, stop)
        return [_text(r) for r in (result or [])]


# ============================================================================
# Singleton management
# ============================================================================

_client: RedisAdapter | None = None


def get_client() -> RedisAdapter:
    """Return a lazily-initialized RedisAdapter singleton."""
    global _client
    if _client is not None:
        return _client

    if os.environ.get("UPSTASH_REDIS_REST_URL"):
        from upstash_redis.asyncio import Redis

        _client = RedisAdapter(Redis.from_env(), is_upstash=True)
    else:
        from fakeredis.aioredis import FakeRedis

        _client = RedisAdapter(FakeRedis(decode_responses=True), is_upstash=False)

    return _client


def reset_client() -> None:
    """Reset the client singleton (tests only)."""
    global _client
    _client = None


def set_client(adapter: RedisAdapter) -> None:
    """Inject a client (tests only)."""
    global _client
    _client = adapter
