"""Service wiring for the HTTP boundary.

build_services turns PlatformSettings into the objects the routes use. This
is the caller side of the enrichment layer, so it is where search throttling
and retry live: the connector issues exactly one request per call, and
SearchService decides whether to try again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from relief_llm_gateway.analysis import AnalysisService
from relief_llm_gateway.gemini import GeminiClient
from relief_shared.errors import EnrichmentError
from relief_shared.settings import PlatformSettings
from relief_shared.social_models import NormalizedPost, SearchRequest
from relief_source_access.connectors import get_connector
from relief_source_access.connectors.base import BaseConnector
from relief_source_access.rate_limit import TokenBucket
from relief_store_access.cache import TTLCache
from relief_store_access.store import RedisStore
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

logger = logging.getLogger(__name__)


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, EnrichmentError) and exc.retryable


class SearchService:
    """Throttled, retrying wrapper around one search connector.

    Retries only transport errors and 5xx upstream errors. Configuration
    errors, decode errors and 4xx responses surface on the first attempt.
    """

    def __init__(
        self,
        connector: BaseConnector,
        bucket: TokenBucket,
        max_attempts: int = 3,
        wait: wait_base | None = None,
        timeout: float | None = None,
    ) -> None:
        self.connector = connector
        self.bucket = bucket
        self.max_attempts = max_attempts
        self.wait = wait if wait is not None else wait_exponential(multiplier=1, min=1, max=30)
        self.timeout = timeout

    async def search(self, query: str) -> list[NormalizedPost]:
        request = SearchRequest(query=query, platform=self.connector.platform, timeout=self.timeout)
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            wait=self.wait,
            stop=stop_after_attempt(self.max_attempts),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        f"Retrying search (attempt {attempt.retry_state.attempt_number})"
                    )
                async with self.bucket:
                    return await self.connector.search(request)
        raise AssertionError("retry loop exited without a result")

    async def aclose(self) -> None:
        await self.connector.close()


@dataclass
class Services:
    settings: PlatformSettings
    store: RedisStore
    cache: TTLCache
    search: SearchService
    analysis: AnalysisService

    async def aclose(self) -> None:
        await self.search.aclose()
        await self.analysis.gemini.close()


def build_services(
    settings: PlatformSettings,
    store: RedisStore | None = None,
    http_client: httpx.AsyncClient | None = None,
    search_wait: wait_base | None = None,
) -> Services:
    """Wire the enrichment layer. Raises ConfigurationError on missing keys."""
    settings.search_credentials.ensure_complete()
    store = store if store is not None else RedisStore()
    cache = TTLCache(store, clock=store.clock)
    connector = get_connector(
        "twitter",
        settings.search_credentials,
        base_url=settings.search_url,
        client=http_client,
        timeout=settings.search_timeout,
    )
    search = SearchService(
        connector,
        TokenBucket(rate=settings.search_rate_limit_per_second),
        wait=search_wait,
        timeout=settings.search_timeout,
    )
    analysis = AnalysisService(
        GeminiClient(settings.gemini, client=http_client),
        cache,
        ttl_hours=settings.cache_ttl_hours,
    )
    return Services(settings=settings, store=store, cache=cache, search=search, analysis=analysis)
