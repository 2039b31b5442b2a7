"""Dashboard feed projection and the synthetic live-update generator.

build_feed turns stored reports, disasters and posts into FeedItem rows and
merges them. LiveFeed holds the newest rows shown on screen, and
synthetic_updates produces the periodic "System Update" rows that stand in
for a real push channel.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from datetime import UTC, datetime

from relief_shared.feed_models import Disaster, FeedItem, Report, ReportStatus
from relief_shared.social_models import NormalizedPost

from relief_feed_manager.merge import merge_feeds

logger = logging.getLogger(__name__)

LIVE_FEED_LIMIT = 20
STATUS_INTERVAL_SECONDS = 30.0
UNKNOWN_DISASTER = "Unknown Disaster"
STATUS_TITLE = "System Update"
STATUS_MESSAGE = (
    "Emergency services are coordinating response efforts. Stay tuned for more updates."
)


def report_item(report: Report, disaster_titles: dict[str, str]) -> FeedItem:
    return FeedItem(
        id=report.id,
        kind="report",
        title=disaster_titles.get(report.disaster_id, UNKNOWN_DISASTER),
        description=report.description,
        created_at=report.created_at,
        moderation_status=report.moderation_status,
    )


def disaster_item(disaster: Disaster) -> FeedItem:
    return FeedItem(
        id=disaster.id,
        kind="disaster",
        title=disaster.title,
        description=f"New disaster event: {disaster.description[:100]}...",
        created_at=disaster.created_at,
    )


def post_item(post: NormalizedPost) -> FeedItem:
    return FeedItem(
        id=post.id,
        kind="post",
        title=f"@{post.author}",
        description=post.content,
        created_at=post.created_at,
        provider_verified=post.provider_verified,
    )


def build_feed(
    reports: Iterable[Report] = (),
    disasters: Iterable[Disaster] = (),
    posts: Iterable[NormalizedPost] = (),
) -> list[FeedItem]:
    """Project every record to a FeedItem and merge, most recent first."""
    disasters = list(disasters)
    titles = {d.id: d.title for d in disasters}
    return merge_feeds(
        [report_item(r, titles) for r in reports],
        [disaster_item(d) for d in disasters],
        [post_item(p) for p in posts],
    )


def status_item(now: datetime | None = None) -> FeedItem:
    return FeedItem(
        id=uuid.uuid4().hex,
        kind="status",
        title=STATUS_TITLE,
        description=STATUS_MESSAGE,
        created_at=now or datetime.now(UTC),
        moderation_status=ReportStatus.VERIFIED,
    )


class LiveFeed:
    """The newest ``limit`` feed rows, most recent first."""

    def __init__(self, items: Iterable[FeedItem] = (), limit: int = LIVE_FEED_LIMIT) -> None:
        self.limit = limit
        self._items: list[FeedItem] = merge_feeds(items)[:limit]

    @property
    def items(self) -> list[FeedItem]:
        return list(self._items)

    def push(self, item: FeedItem) -> None:
        """Put ``item`` on top and drop whatever falls past the limit."""
        self._items = [item, *self._items][: self.limit]

    def __len__(self) -> int:
        return len(self._items)


async def synthetic_updates(
    interval: float = STATUS_INTERVAL_SECONDS,
    *,
    clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[FeedItem]:
    """Yield one status row every ``interval`` seconds, forever."""
    while True:
        await sleep(interval)
        item = status_item(clock())
        logger.debug(f"Synthetic status update {item.id}")
        yield item
