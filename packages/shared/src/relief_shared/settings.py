"""Environment-backed settings, read once at process start.

Settings are explicit values passed into the clients at construction time.
Nothing below the entrypoints reads the environment, so tests can build
clients with fake credentials and no monkeypatching of os.environ.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel

from relief_shared.errors import ConfigurationError

DEFAULT_SEARCH_URL = "https://api.twitter.com/1.1/search/tweets.json"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-pro"


class SearchCredentials(BaseModel):
    """OAuth 1.0a consumer key/secret pair for the social search provider."""

    consumer_key: str = ""
    consumer_secret: str = ""

    def ensure_complete(self) -> None:
        """Raise ConfigurationError unless both halves of the pair are set."""
        if not self.consumer_key:
            raise ConfigurationError("Missing TWITTER_API_KEY environment variable")
        if not self.consumer_secret:
            raise ConfigurationError("Missing TWITTER_API_SECRET environment variable")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SearchCredentials:
        env = os.environ if environ is None else environ
        credentials = cls(
            consumer_key=env.get("TWITTER_API_KEY", "").strip(),
            consumer_secret=env.get("TWITTER_API_SECRET", "").strip(),
        )
        credentials.ensure_complete()
        return credentials


class GeminiSettings(BaseModel):
    """Connection settings for the generative analysis endpoint."""

    api_key: str = ""
    model: str = DEFAULT_GEMINI_MODEL
    base_url: str = DEFAULT_GEMINI_BASE_URL

    def ensure_complete(self) -> None:
        if not self.api_key:
            raise ConfigurationError("Missing GEMINI_API_KEY environment variable")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> GeminiSettings:
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get("GEMINI_API_KEY", "").strip(),
            model=env.get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            base_url=env.get("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL),
        )


class PlatformSettings(BaseModel):
    """Everything the HTTP boundary and the workers need from the environment."""

    search_credentials: SearchCredentials
    search_url: str = DEFAULT_SEARCH_URL
    search_timeout: float = 30.0
    search_rate_limit_per_second: float = 1.0
    gemini: GeminiSettings = GeminiSettings()
    cache_ttl_hours: int = 24
    jwt_secret: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PlatformSettings:
        """Load settings, failing fast when the search credentials are absent."""
        env = os.environ if environ is None else environ
        return cls(
            search_credentials=SearchCredentials.from_env(env),
            search_url=env.get("TWITTER_SEARCH_URL", DEFAULT_SEARCH_URL),
            search_timeout=float(env.get("TWITTER_SEARCH_TIMEOUT", "30")),
            search_rate_limit_per_second=float(env.get("SEARCH_RATE_LIMIT_PER_SECOND", "1")),
            gemini=GeminiSettings.from_env(env),
            cache_ttl_hours=int(env.get("CACHE_TTL_HOURS", "24")),
            jwt_secret=env.get("SUPABASE_JWT_SECRET") or None,
        )
