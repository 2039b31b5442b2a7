"""Component registry: maps component names to their workflows and activities.

The runner looks up one entry by name and registers only that component on
its worker. Each entry specifies:

- task_queue: which Temporal task queue this worker polls
- workflows: workflow classes to register (only the feed manager has these)
- activities: bound activity methods to register

Activities are methods on small classes holding their settings, store and
clients, so the table is built from settings rather than declared at import.
"""

from dataclasses import dataclass, field
from typing import Any

from relief_feed_manager.workflows.ingest import SocialIngestWorkflow
from relief_llm_gateway.activities import LLMGatewayActivities
from relief_llm_gateway.analysis import AnalysisService
from relief_llm_gateway.gemini import GeminiClient
from relief_shared.settings import PlatformSettings
from relief_shared.task_queues import (
    FEED_MANAGER_QUEUE,
    LLM_GATEWAY_QUEUE,
    SOURCE_ACCESS_QUEUE,
    STORE_ACCESS_QUEUE,
)
from relief_source_access.activities import SourceAccessActivities
from relief_store_access.activities import StoreAccessActivities
from relief_store_access.cache import TTLCache
from relief_store_access.store import RedisStore


@dataclass
class ComponentConfig:
    """Configuration for a single component's worker."""

    task_queue: str
    workflows: list[Any] = field(default_factory=list)
    activities: list[Any] = field(default_factory=list)


COMPONENT_NAMES = ("feed-manager", "source-access", "store-access", "llm-gateway")


def build_components(
    settings: PlatformSettings, store: RedisStore | None = None
) -> dict[str, ComponentConfig]:
    store = store if store is not None else RedisStore()
    source = SourceAccessActivities(settings)
    storage = StoreAccessActivities(store)
    analysis = AnalysisService(
        GeminiClient(settings.gemini),
        TTLCache(store, clock=store.clock),
        ttl_hours=settings.cache_ttl_hours,
    )
    llm = LLMGatewayActivities(analysis, store)

    return {
        "feed-manager": ComponentConfig(
            task_queue=FEED_MANAGER_QUEUE,
            workflows=[SocialIngestWorkflow],
        ),
        "source-access": ComponentConfig(
            task_queue=SOURCE_ACCESS_QUEUE,
            activities=[source.search_social_posts],
        ),
        "store-access": ComponentConfig(
            task_queue=STORE_ACCESS_QUEUE,
            activities=[storage.store_social_posts, storage.list_recent_posts],
        ),
        "llm-gateway": ComponentConfig(
            task_queue=LLM_GATEWAY_QUEUE,
            activities=[llm.extract_post_location, llm.verify_report_image],
        ),
    }
