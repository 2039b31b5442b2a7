"""Store Access activities: persist and list normalized social posts.

Run on STORE_ACCESS_QUEUE. Persisting search results is a separate step from
searching: the search activity never writes, and these activities never call
out to a provider.
"""

from __future__ import annotations

from pydantic import ValidationError
from relief_shared.social_models import (
    SOCIAL_POSTS_TABLE,
    ListRecentPostsRequest,
    ListRecentPostsResult,
    NormalizedPost,
    StorePostsRequest,
    StorePostsResult,
)
from temporalio import activity

from relief_store_access.store import RedisStore


class StoreAccessActivities:
    """Activity set bound to one RedisStore."""

    def __init__(self, store: RedisStore) -> None:
        self.store = store

    @activity.defn
    async def store_social_posts(self, request: StorePostsRequest) -> StorePostsResult:
        """Upsert posts by id into the social posts table."""
        for post in request.posts:
            await self.store.upsert_record(
                SOCIAL_POSTS_TABLE, post.id, post.to_wire(), post.created_at
            )
        activity.logger.info(f"Stored {len(request.posts)} social posts")
        return StorePostsResult(
            success=True,
            message=f"Stored {len(request.posts)} posts",
            stored_count=len(request.posts),
        )

    @activity.defn
    async def list_recent_posts(self, request: ListRecentPostsRequest) -> ListRecentPostsResult:
        """Most recent stored posts first."""
        records = await self.store.list_recent(SOCIAL_POSTS_TABLE, request.limit)
        try:
            posts = [NormalizedPost.model_validate(r) for r in records]
        except ValidationError as e:
            return ListRecentPostsResult(
                success=False,
                message=f"Stored post failed validation: {e}",
                error_kind="DecodeError",
            )
        return ListRecentPostsResult(
            success=True, message=f"Listed {len(posts)} posts", posts=posts
        )
