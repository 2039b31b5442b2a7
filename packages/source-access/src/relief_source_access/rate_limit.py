"""Async token bucket for caller-side search throttling.

Connectors never throttle themselves. A caller that fans out many searches
(the HTTP function boundary, a batch ingest) holds one TokenBucket and
acquires a token before each search. The bucket refills continuously, so a
short burst up to ``capacity`` goes through immediately and the long-run
average stays at ``rate`` requests per second.

Usage:
    bucket = TokenBucket(rate=1.0, capacity=3.0)
    async with bucket:
        posts = await connector.search(request)
"""

import asyncio
import time


class TokenBucket:
    """Async token bucket that refills at a constant rate."""

    def __init__(self, rate: float, capacity: float | None = None) -> None:
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        self.rate = rate
        self.capacity = capacity if capacity is not None else max(rate, 1.0)
        self.tokens = self.capacity
        self._last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Wait until a token is available, then consume it."""
        async with self._lock:
            self._refill()
            if self.tokens < 1.0:
                await asyncio.sleep((1.0 - self.tokens) / self.rate)
                self._refill()
            self.tokens -= 1.0

    async def __aenter__(self) -> "TokenBucket":
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    def _refill(self) -> None:
        now = time.monotonic()
        self.tokens = min(self.capacity, self.tokens + (now - self._last_refill) * self.rate)
        self._last_refill = now
