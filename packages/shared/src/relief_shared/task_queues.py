"""Task queue name constants for each component.

Every component runs on its own Temporal worker with a dedicated task queue,
so the search connector, the store and the LLM gateway scale and deploy
independently. Both the worker runner and the workflow definitions reference
these constants.
"""

# Manager: runs workflows that orchestrate activities across other queues
FEED_MANAGER_QUEUE = "feed-manager-queue"

# Resource Access: external sources and storage
SOURCE_ACCESS_QUEUE = "source-access-queue"
STORE_ACCESS_QUEUE = "store-access-queue"

# Utilities
LLM_GATEWAY_QUEUE = "llm-gateway-queue"
