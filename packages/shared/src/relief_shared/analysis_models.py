"""LLM Gateway boundary models: location extraction and image verification."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from relief_shared.models import PlatformResult


class ImageVerification(BaseModel):
    """Authenticity assessment of an image reference.

    Accepts both the model's camelCase answer keys and snake_case names.
    """

    model_config = ConfigDict(populate_by_name=True)

    is_authentic: bool = Field(default=True, alias="isAuthentic")
    confidence: float = Field(default=50, ge=0, le=100)
    analysis: str = ""


class ExtractLocationRequest(BaseModel):
    """Run location extraction over a stored post and write the result back."""

    post_id: str
    content: str
    ttl_hours: int = 24


class ExtractLocationResult(PlatformResult):
    post_id: str = ""
    location: str | None = None


class VerifyImageRequest(BaseModel):
    image_url: str
    ttl_hours: int = 24


class VerifyImageResult(PlatformResult):
    verification: ImageVerification | None = None
