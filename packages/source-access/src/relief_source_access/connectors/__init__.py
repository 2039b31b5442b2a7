"""Connector factory: maps platform tags to connector classes.

Adding a new social platform:
  1. Create a new subclass of BaseConnector in this package
  2. Add one entry to _CONNECTOR_CLASSES below
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from relief_source_access.connectors.x import XConnector

if TYPE_CHECKING:
    from relief_shared.settings import SearchCredentials

    from relief_source_access.connectors.base import BaseConnector

_CONNECTOR_CLASSES: dict[str, type[BaseConnector]] = {
    "twitter": XConnector,
}


def get_connector(
    platform: str, credentials: SearchCredentials, **kwargs: Any
) -> BaseConnector:
    """Instantiate the connector for ``platform``."""
    cls = _CONNECTOR_CLASSES.get(platform)
    if cls is None:
        supported = ", ".join(sorted(_CONNECTOR_CLASSES.keys()))
        raise ValueError(f"Unknown platform '{platform}'. Supported: {supported}")
    return cls(credentials, **kwargs)
