"""Feed models: the records that the merged dashboard feed is built from.

Field reports carry a moderation status set by human reviewers. That is a
different fact from a social post's provider verification badge, and the two
are kept in separate fields.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, field_validator
from relief_shared.models import as_utc

DISASTERS_TABLE = "disasters"
REPORTS_TABLE = "reports"


class ReportStatus(StrEnum):
    """Moderation workflow state of a human-submitted field report."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class Disaster(BaseModel):
    id: str
    title: str
    description: str = ""
    location: str | None = None
    severity: str = "moderate"
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class Report(BaseModel):
    id: str
    disaster_id: str
    description: str
    location: str | None = None
    image_url: str | None = None
    moderation_status: ReportStatus = ReportStatus.PENDING
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


FeedKind = Literal["report", "disaster", "post", "status"]


class FeedItem(BaseModel):
    """One row of the merged, most-recent-first dashboard feed.

    Reports and status updates carry ``moderation_status``; posts carry
    ``provider_verified``. A row never has both.
    """

    id: str
    kind: FeedKind
    title: str
    description: str
    created_at: datetime
    moderation_status: ReportStatus | None = None
    provider_verified: bool | None = None

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
