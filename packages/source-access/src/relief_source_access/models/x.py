"""Typed models for the X (Twitter) v1.1 standard search response.

Only the fields the normalizer reads are modelled; everything else in the
provider payload is ignored. ``created_at`` arrives in the provider's
``Wed Oct 10 20:19:24 +0000 2018`` format and is parsed to an aware datetime.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

PROVIDER_TIME_FORMAT = "%a %b %d %H:%M:%S %z %Y"


class XUser(BaseModel):
    """The author block embedded in each status."""

    screen_name: str
    location: str | None = None
    verified: bool | None = None


class XStatus(BaseModel):
    """A single status from ``statuses[]``."""

    id_str: str
    text: str = ""
    full_text: str | None = None
    created_at: datetime
    user: XUser

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_provider_time(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return datetime.strptime(value, PROVIDER_TIME_FORMAT)
            except ValueError:
                # Fall through to Pydantic's ISO-8601 parsing
                return value
        return value

    @property
    def content(self) -> str:
        return self.full_text or self.text


class XSearchMetadata(BaseModel):
    count: int = 0
    query: str = ""
    max_id_str: str | None = None
    next_results: str | None = None


class XSearchResponse(BaseModel):
    """Top-level body of ``GET /1.1/search/tweets.json``."""

    statuses: list[XStatus] = []
    search_metadata: XSearchMetadata | None = None
