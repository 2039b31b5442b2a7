"""Temporal client connection factory.

Two connection modes, chosen by the environment:

1. **Local dev**: ``TEMPORAL_ADDRESS`` (default ``localhost:7233``), no auth.
2. **Temporal Cloud**: ``TEMPORAL_API_KEY`` plus ``TEMPORAL_REGIONAL_ENDPOINT``
   (the regional endpoint from the namespace "Connect" dialog, not the
   ``<ns>.tmprl.cloud`` namespace endpoint), with TLS.

All clients use the Pydantic data converter because every activity argument
and result in this platform is a Pydantic model.
"""

import os

from temporalio.client import Client
from temporalio.contrib.pydantic import pydantic_data_converter

from relief_shared.errors import ConfigurationError


async def connect() -> Client:
    """Create a connected Temporal client for the current environment."""
    namespace = os.environ.get("TEMPORAL_NAMESPACE", "default")
    api_key = os.environ.get("TEMPORAL_API_KEY")

    if api_key:
        address = os.environ.get("TEMPORAL_REGIONAL_ENDPOINT")
        if not address:
            raise ConfigurationError(
                "TEMPORAL_API_KEY is set but TEMPORAL_REGIONAL_ENDPOINT is missing."
            )
        return await Client.connect(
            address,
            namespace=namespace,
            api_key=api_key,
            tls=True,
            data_converter=pydantic_data_converter,
        )

    address = os.environ.get("TEMPORAL_ADDRESS", "localhost:7233")
    return await Client.connect(
        address, namespace=namespace, data_converter=pydantic_data_converter
    )
