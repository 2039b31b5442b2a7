"""Social search boundary models: the contract between callers and Source Access.

NormalizedPost is the platform-neutral projection of one provider post. Inside
Python it uses descriptive field names; on the wire (the function boundary and
the backing store) it keeps the dashboard's column names via aliases:

    content           <-> post_content
    author            <-> username
    location          <-> location_extracted
    provider_verified <-> verified

``provider_verified`` is the provider's account-verification badge. It is not
the moderation status of a field report (see feed_models.ReportStatus).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from relief_shared.models import PlatformResult, as_utc

DEFAULT_SEARCH_QUERY = (
    "disaster OR earthquake OR flood OR hurricane OR wildfire OR emergency -RT"
)

SOCIAL_POSTS_TABLE = "social_media_posts"


class NormalizedPost(BaseModel):
    """A provider post mapped to the dashboard's social feed shape."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    content: str = Field(alias="post_content")
    author: str = Field(alias="username")
    platform: str = "twitter"
    disaster_keywords: list[str] = []
    location: str | None = Field(default=None, alias="location_extracted")
    created_at: datetime
    provider_verified: bool = Field(default=False, alias="verified")

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    def to_wire(self) -> dict:
        """JSON-ready dict using the dashboard column names."""
        return self.model_dump(mode="json", by_alias=True)


class SearchRequest(BaseModel):
    """Parameters for a search_social_posts call."""

    query: str = DEFAULT_SEARCH_QUERY
    platform: str = "twitter"
    timeout: float | None = None


class SearchResult(PlatformResult):
    """Returned by search_social_posts."""

    posts: list[NormalizedPost] = []
    post_count: int = 0


class StorePostsRequest(BaseModel):
    """Persist a batch of normalized posts (upsert by id)."""

    posts: list[NormalizedPost]


class StorePostsResult(PlatformResult):
    stored_count: int = 0


class ListRecentPostsRequest(BaseModel):
    limit: int = 20


class ListRecentPostsResult(PlatformResult):
    posts: list[NormalizedPost] = []


class SocialIngestRequest(BaseModel):
    """Input to SocialIngestWorkflow: search, persist, optionally locate."""

    search: SearchRequest = SearchRequest()
    extract_locations: bool = False


class SocialIngestResult(PlatformResult):
    post_count: int = 0
    stored_count: int = 0
    located_count: int = 0
