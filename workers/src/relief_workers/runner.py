"""Worker runner entrypoint.

Usage:
  python -m relief_workers.runner <component-name>
  COMPONENT=source-access python -m relief_workers.runner

The CLI argument takes precedence over the COMPONENT env var. The worker
polls the component's task queue until interrupted.
"""

import asyncio
import logging
import os
import sys

from relief_shared.settings import PlatformSettings
from relief_shared.temporal_client import connect
from temporalio.worker import Worker

from relief_workers.registry import COMPONENT_NAMES, build_components

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def run_worker(component_name: str) -> None:
    """Start a Temporal worker for the specified component."""
    if component_name not in COMPONENT_NAMES:
        available = ", ".join(sorted(COMPONENT_NAMES))
        logger.error(f"Unknown component '{component_name}'. Available: {available}")
        sys.exit(1)

    settings = PlatformSettings.from_env()
    config = build_components(settings)[component_name]
    client = await connect()

    logger.info(
        f"Starting worker for '{component_name}' on queue '{config.task_queue}' "
        f"(workflows={len(config.workflows)}, activities={len(config.activities)})"
    )

    worker = Worker(
        client,
        task_queue=config.task_queue,
        workflows=config.workflows,
        activities=config.activities,
    )

    await worker.run()


def main() -> None:
    """CLI entrypoint: parse the component name and start the worker."""
    component_name = sys.argv[1] if len(sys.argv) >= 2 else os.environ.get("COMPONENT", "")

    if not component_name:
        print("Usage: python -m relief_workers.runner <component>")
        print("  or: COMPONENT=<component> python -m relief_workers.runner")
        print(f"Components: {', '.join(sorted(COMPONENT_NAMES))}")
        sys.exit(1)

    asyncio.run(run_worker(component_name))


if __name__ == "__main__":
    main()
