"""Typed Pydantic models for each connector's provider responses.

These are internal to source-access. At the component boundary we hand out
NormalizedPost; these models validate the raw payload on the way in.
"""

from relief_source_access.models.x import (
    XSearchMetadata,
    XSearchResponse,
    XStatus,
    XUser,
)

__all__ = [
    "XSearchMetadata",
    "XSearchResponse",
    "XStatus",
    "XUser",
]
