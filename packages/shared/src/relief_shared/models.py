"""Pydantic base models shared across components.

These serve as the contract types that flow between workflows, activities and
the HTTP boundary. Using Pydantic gives us validation at component boundaries:
a malformed record fails where it enters, not three calls downstream.
"""

from datetime import UTC, datetime

from pydantic import BaseModel


def as_utc(value: datetime) -> datetime:
    """Read a naive timestamp as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class PlatformResult(BaseModel):
    """Standard result envelope returned by activities.

    Every activity returns this (or a subclass) so workflows can branch on
    expected failures without catching exceptions. ``error_kind`` names the
    exception class when ``success`` is False, e.g. "UpstreamError".
    """

    success: bool
    message: str
    error_kind: str | None = None
