"""SocialIngestWorkflow: Source Access -> Store Access -> (LLM Gateway).

1. Source Access (source-access-queue): one signed search
2. Store Access (store-access-queue): upsert the normalized posts
3. LLM Gateway (llm-gateway-queue): optional location extraction for posts
   whose author profile had no location

The workflow runs on feed-manager-queue and dispatches each activity to its
component's queue. Transient search failures are retried by the activity
retry policy; the client itself never retries.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from relief_llm_gateway.activities import LLMGatewayActivities
    from relief_shared.analysis_models import ExtractLocationRequest
    from relief_shared.social_models import (
        SearchResult,
        SocialIngestRequest,
        SocialIngestResult,
        StorePostsRequest,
        StorePostsResult,
    )
    from relief_shared.task_queues import (
        LLM_GATEWAY_QUEUE,
        SOURCE_ACCESS_QUEUE,
        STORE_ACCESS_QUEUE,
    )
    from relief_source_access.activities import SourceAccessActivities
    from relief_store_access.activities import StoreAccessActivities

SEARCH_RETRY = RetryPolicy(
    initial_interval=timedelta(seconds=1),
    backoff_coefficient=2.0,
    maximum_interval=timedelta(seconds=30),
    maximum_attempts=3,
)


@workflow.defn
class SocialIngestWorkflow:
    """Search, persist and optionally locate social posts."""

    @workflow.run
    async def run(self, request: SocialIngestRequest) -> SocialIngestResult:
        search: SearchResult = await workflow.execute_activity_method(
            SourceAccessActivities.search_social_posts,
            request.search,
            task_queue=SOURCE_ACCESS_QUEUE,
            start_to_close_timeout=timedelta(minutes=1),
            retry_policy=SEARCH_RETRY,
        )
        if not search.success:
            return SocialIngestResult(
                success=False, message=search.message, error_kind=search.error_kind
            )

        stored: StorePostsResult = await workflow.execute_activity_method(
            StoreAccessActivities.store_social_posts,
            StorePostsRequest(posts=search.posts),
            task_queue=STORE_ACCESS_QUEUE,
            start_to_close_timeout=timedelta(seconds=30),
        )

        located = 0
        if request.extract_locations:
            pending = [p for p in search.posts if p.location is None]
            results = await asyncio.gather(
                *(
                    workflow.execute_activity_method(
                        LLMGatewayActivities.extract_post_location,
                        ExtractLocationRequest(post_id=p.id, content=p.content),
                        task_queue=LLM_GATEWAY_QUEUE,
                        start_to_close_timeout=timedelta(minutes=1),
                    )
                    for p in pending
                )
            )
            located = sum(1 for r in results if r.success and r.location)

        return SocialIngestResult(
            success=stored.success,
            message=(
                f"Fetched {search.post_count} posts, stored {stored.stored_count}, "
                f"located {located}"
            ),
            post_count=search.post_count,
            stored_count=stored.stored_count,
            located_count=located,
        )
