"""TTL response cache for expensive remote calls.

Wraps any ``str -> str`` remote function (or a JSON-returning one via
cached_json_call) with a keyed, time-limited memo:

    key = cache_key(tag, input)         # "location:Zmxvb2QgaW4gWA=="
    hit  -> return the stored string, remote not called
    miss -> call remote, store the raw result for ttl_hours, return it

A failing, timed-out or cancelled remote call stores nothing, so a transient
upstream error is never frozen in for the TTL. Concurrent misses on the same
key may both call the remote; the last write wins, which is harmless because
entries are re-derivations of the same answer.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Any

from relief_store_access.keys import cache_key
from relief_store_access.store import BackingStore, CacheEntry, utcnow

logger = logging.getLogger(__name__)

DEFAULT_TTL_HOURS = 24

RemoteFn = Callable[[str], Awaitable[str]]


def _check_ttl(ttl_hours: int) -> None:
    if isinstance(ttl_hours, bool) or not isinstance(ttl_hours, int) or ttl_hours < 0:
        raise ValueError(f"ttl_hours must be a non-negative whole number, got {ttl_hours!r}")


class TTLCache:
    """Memoizes remote calls in a BackingStore with whole-hour TTLs."""

    def __init__(
        self,
        store: BackingStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.clock = clock

    async def get(self, key: str) -> str | None:
        """Stored value while fresh, otherwise None (a miss, not an error)."""
        return await self.store.get(key)

    async def put(self, key: str, value: str, ttl_hours: int = DEFAULT_TTL_HOURS) -> CacheEntry:
        _check_ttl(ttl_hours)
        expires_at = self.clock() + timedelta(hours=ttl_hours)
        await self.store.put(key, value, expires_at)
        return CacheEntry(key=key, value=value, expires_at=expires_at)

    async def cached_call(
        self,
        tag: str,
        payload: str,
        remote_fn: RemoteFn,
        ttl_hours: int = DEFAULT_TTL_HOURS,
        *,
        timeout: float | None = None,
        skip_empty: bool = False,
    ) -> str:
        """Return the cached answer for (tag, payload), calling remote_fn on a miss.

        With ``skip_empty`` an empty answer is returned but not stored, for
        remotes where "" means "no result" rather than a real answer.
        """
        _check_ttl(ttl_hours)
        key = cache_key(tag, payload)
        cached = await self.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {tag}")
            return cached

        logger.debug(f"Cache miss for {tag}")
        if timeout is None:
            result = await remote_fn(payload)
        else:
            result = await asyncio.wait_for(remote_fn(payload), timeout)

        if not isinstance(result, str):
            raise TypeError(
                f"remote_fn for '{tag}' returned {type(result).__name__}; "
                "use cached_json_call for structured results"
            )
        if skip_empty and not result:
            return result

        await self.put(key, result, ttl_hours)
        return result

    async def cached_json_call(
        self,
        tag: str,
        payload: str,
        remote_fn: Callable[[str], Awaitable[Any]],
        ttl_hours: int = DEFAULT_TTL_HOURS,
        *,
        timeout: float | None = None,
    ) -> Any:
        """cached_call for remotes returning JSON-serializable values."""

        async def encoded(value: str) -> str:
            return json.dumps(await remote_fn(value))

        raw = await self.cached_call(tag, payload, encoded, ttl_hours, timeout=timeout)
        return json.loads(raw)
