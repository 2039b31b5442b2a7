"""X (Twitter) connector: OAuth 1.0a signed v1.1 standard search.

Auth: OAuth 1.0a, HMAC-SHA1, consumer key/secret only (no user token).
Endpoint: GET https://api.twitter.com/1.1/search/tweets.json
Paging: none; one page of ``count`` recent results per call.

Each status maps to a NormalizedPost with keywords extracted from its text.
The author's profile location seeds ``location`` until the location
extraction step replaces it.
"""

from __future__ import annotations

import json
import logging

import httpx
from pydantic import ValidationError
from relief_shared.errors import DecodeError
from relief_shared.http import PAYLOAD_LOG_LIMIT
from relief_shared.models import as_utc
from relief_shared.settings import DEFAULT_SEARCH_URL
from relief_shared.social_models import NormalizedPost, SearchRequest

from relief_source_access.connectors.base import BaseConnector
from relief_source_access.keywords import extract_disaster_keywords
from relief_source_access.models.x import XSearchResponse, XStatus
from relief_source_access.oauth import SignedRequest

logger = logging.getLogger(__name__)

SEARCH_PAGE_SIZE = "10"
USER_AGENT = "DisasterResponseApp/1.0"


class XConnector(BaseConnector):
    """Connector for the X (Twitter) v1.1 standard search API."""

    platform = "twitter"

    def _default_base_url(self) -> str:
        return DEFAULT_SEARCH_URL

    def build_signed_request(self, query: str) -> SignedRequest:
        """Sign a search for ``query``. Raises ConfigurationError on missing keys."""
        self.credentials.ensure_complete()
        return SignedRequest(
            method="GET",
            url=self._get_base_url(),
            query_params={
                "q": query,
                "count": SEARCH_PAGE_SIZE,
                "result_type": "recent",
                "include_entities": "false",
            },
            consumer_key=self.credentials.consumer_key,
            consumer_secret=self.credentials.consumer_secret,
        )

    async def search(self, request: SearchRequest) -> list[NormalizedPost]:
        signed = self.build_signed_request(request.query)
        logger.info(f"X search: q={request.query!r}")

        response = await self._request(
            "GET",
            signed.full_url,
            timeout=request.timeout,
            headers={
                "Authorization": signed.authorization_header,
                "User-Agent": USER_AGENT,
            },
        )
        payload = self._decode(response)

        try:
            parsed = XSearchResponse.model_validate(payload)
        except ValidationError as e:
            raw = response.text[:PAYLOAD_LOG_LIMIT]
            logger.error(f"Unexpected X search payload: {raw!r}")
            raise DecodeError(f"Unexpected search response shape: {e}", raw) from e

        posts = [self.normalize_status(status) for status in parsed.statuses]
        logger.info(f"X search: {len(posts)} statuses")
        return posts

    def _describe_error(self, response: httpx.Response) -> str | None:
        """Surface ``errors[0]`` from the provider body when there is one."""
        try:
            errors = response.json().get("errors") or []
        except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
            return None
        if errors and isinstance(errors[0], dict):
            first = errors[0]
            return f"Twitter API Error {first.get('code')}: {first.get('message')}"
        return None

    @staticmethod
    def normalize_status(status: XStatus) -> NormalizedPost:
        """Map a provider status to the platform-neutral post shape."""
        return NormalizedPost(
            id=status.id_str,
            content=status.content,
            author=status.user.screen_name,
            platform="twitter",
            disaster_keywords=extract_disaster_keywords(status.content),
            location=status.user.location or None,
            created_at=as_utc(status.created_at),
            provider_verified=bool(status.user.verified),
        )
