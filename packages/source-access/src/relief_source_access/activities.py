"""Source Access activities: Temporal activity for social search.

Runs on SOURCE_ACCESS_QUEUE. The activity builds a connector for the
requested platform, runs one search and closes the connector afterwards.

Failure handling follows the platform convention:
  - expected failures (missing credentials, unparseable body, 4xx) come back
    as ``SearchResult(success=False)`` so workflows can branch on them
  - transient failures (transport errors, 5xx) propagate, and Temporal's
    retry policy re-runs the activity with backoff
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from relief_shared.errors import EnrichmentError
from relief_shared.settings import PlatformSettings
from relief_shared.social_models import SearchRequest, SearchResult
from temporalio import activity

from relief_source_access.connectors import get_connector
from relief_source_access.connectors.base import BaseConnector


class SourceAccessActivities:
    """Activity set bound to the worker's settings."""

    def __init__(
        self,
        settings: PlatformSettings,
        connector_factory: Callable[..., BaseConnector] = get_connector,
    ) -> None:
        self.settings = settings
        self._connector_factory = connector_factory

    def _connector(self, platform: str, **kwargs: Any) -> BaseConnector:
        return self._connector_factory(
            platform,
            self.settings.search_credentials,
            base_url=self.settings.search_url,
            timeout=self.settings.search_timeout,
            **kwargs,
        )

    @activity.defn
    async def search_social_posts(self, request: SearchRequest) -> SearchResult:
        """Search one platform and return normalized posts."""
        activity.logger.info(f"Searching {request.platform} for {request.query!r}")
        connector = self._connector(request.platform)
        try:
            posts = await connector.search(request)
        except EnrichmentError as e:
            if e.retryable:
                raise
            activity.logger.warning(f"Search failed ({type(e).__name__}): {e}")
            return SearchResult(
                success=False,
                message=f"Search failed: {e}",
                error_kind=type(e).__name__,
            )
        finally:
            await connector.close()

        return SearchResult(
            success=True,
            message=f"Fetched {len(posts)} posts",
            posts=posts,
            post_count=len(posts),
        )
