"""LLM Gateway activities.

Run on LLM_GATEWAY_QUEUE. Location extraction over a stored post is the one
step that mutates a NormalizedPost after creation: it fills
``location_extracted`` in the store. Image verification is a pure lookup.
"""

from __future__ import annotations

from relief_shared.analysis_models import (
    ExtractLocationRequest,
    ExtractLocationResult,
    VerifyImageRequest,
    VerifyImageResult,
)
from relief_shared.errors import EnrichmentError
from relief_shared.social_models import SOCIAL_POSTS_TABLE
from relief_store_access.store import RedisStore
from temporalio import activity

from relief_llm_gateway.analysis import AnalysisService


class LLMGatewayActivities:
    def __init__(self, analysis: AnalysisService, store: RedisStore) -> None:
        self.analysis = analysis
        self.store = store

    @activity.defn
    async def extract_post_location(
        self, request: ExtractLocationRequest
    ) -> ExtractLocationResult:
        """Extract a location from a post's content and store it on the post."""
        activity.logger.info(f"Extracting location for post {request.post_id}")
        try:
            location = await self.analysis.extract_location(request.content, request.ttl_hours)
        except EnrichmentError as e:
            if e.retryable:
                raise
            return ExtractLocationResult(
                success=False,
                message=f"Location extraction failed: {e}",
                error_kind=type(e).__name__,
                post_id=request.post_id,
            )

        if location is None:
            return ExtractLocationResult(
                success=True, message="No location found", post_id=request.post_id
            )

        updated = await self.store.update_record(
            SOCIAL_POSTS_TABLE, request.post_id, {"location_extracted": location}
        )
        if updated is None:
            return ExtractLocationResult(
                success=False,
                message=f"Post {request.post_id} not found",
                post_id=request.post_id,
                location=location,
            )
        return ExtractLocationResult(
            success=True,
            message=f"Location extracted: {location}",
            post_id=request.post_id,
            location=location,
        )

    @activity.defn
    async def verify_report_image(self, request: VerifyImageRequest) -> VerifyImageResult:
        """Score an image reference for authenticity."""
        activity.logger.info(f"Verifying image {request.image_url}")
        try:
            verification = await self.analysis.verify_image(request.image_url, request.ttl_hours)
        except EnrichmentError as e:
            if e.retryable:
                raise
            return VerifyImageResult(
                success=False,
                message=f"Image verification failed: {e}",
                error_kind=type(e).__name__,
            )
        return VerifyImageResult(
            success=True, message="Image verified", verification=verification
        )
