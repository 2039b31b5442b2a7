"""Base connector: shared behavior for all social search connectors.

The ABC fixes the interface every connector implements and owns the
cross-cutting parts:

  - HTTP client lifecycle (injected for tests, created lazily otherwise)
  - Error classification via relief_shared.http (TransportError,
    UpstreamError, DecodeError)
  - Fail-fast credential checks before any request is built

Connectors do not retry and do not throttle. One search() call issues exactly
one request; retry and rate limiting belong to whoever calls search().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
from relief_shared.http import decode_json, send
from relief_shared.settings import SearchCredentials
from relief_shared.social_models import NormalizedPost, SearchRequest


class BaseConnector(ABC):
    """Abstract base for external social search connectors."""

    platform: str = ""

    def __init__(
        self,
        credentials: SearchCredentials,
        *,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.credentials = credentials
        self.base_url = base_url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self.request_count: int = 0

    def _get_base_url(self) -> str:
        """Return the endpoint URL, preferring the override over the default."""
        if self.base_url:
            return self.base_url
        return self._default_base_url()

    @abstractmethod
    def _default_base_url(self) -> str:
        """Default search endpoint for this connector."""

    @abstractmethod
    async def search(self, request: SearchRequest) -> list[NormalizedPost]:
        """Run one search and return normalized posts."""

    def _describe_error(self, response: httpx.Response) -> str | None:
        """Turn a provider error body into a message. None keeps the default."""
        return None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this connector created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> BaseConnector:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        url: str,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        client = await self._get_client()
        self.request_count += 1
        if timeout is not None:
            kwargs["timeout"] = timeout
        return await send(
            client, method, url, describe_error=self._describe_error, **kwargs
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        return decode_json(response)
