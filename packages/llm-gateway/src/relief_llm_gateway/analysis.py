"""Cached text and image analyses on top of the generative client.

Both analyses go through TTLCache so a repeated description or image URL is
answered from the store for 24 hours:

  extract_location(text)  tag "location"      -> location name or None
  verify_image(url)       tag "image_verify"  -> ImageVerification

Remote failures propagate unchanged and are not cached. Empty answers from
the model mean "no result" and are not cached either.
"""

from __future__ import annotations

import json
import logging
import re

from pydantic import ValidationError
from relief_shared.analysis_models import ImageVerification
from relief_store_access.cache import DEFAULT_TTL_HOURS, TTLCache

from relief_llm_gateway.gemini import GeminiClient

logger = logging.getLogger(__name__)

LOCATION_TAG = "location"
IMAGE_VERIFY_TAG = "image_verify"

UNKNOWN_LOCATION = "Unknown"

LOCATION_PROMPT = (
    "Extract location from: {text}. Return only the location name, nothing else. "
    'If no specific location is mentioned, return "Unknown".'
)
IMAGE_PROMPT = (
    "Analyze image at {url} for signs of manipulation or disaster context. "
    'Provide a JSON response with: {{"isAuthentic": boolean, "confidence": 0-100, '
    '"analysis": "brief description"}}'
)

FALLBACK_VERIFICATION = ImageVerification(
    is_authentic=True,
    confidence=50,
    analysis="Unable to analyze image automatically",
)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_verification(answer: str) -> ImageVerification:
    """Parse the model's JSON verdict, falling back when it is unusable."""
    cleaned = _CODE_FENCE.sub("", answer.strip())
    try:
        return ImageVerification.model_validate(json.loads(cleaned))
    except (json.JSONDecodeError, ValidationError, TypeError):
        logger.warning(f"Unparseable image verdict, using fallback: {answer[:200]!r}")
        return FALLBACK_VERIFICATION


class AnalysisService:
    def __init__(
        self,
        gemini: GeminiClient,
        cache: TTLCache,
        ttl_hours: int = DEFAULT_TTL_HOURS,
        timeout: float | None = None,
    ) -> None:
        self.gemini = gemini
        self.cache = cache
        self.ttl_hours = ttl_hours
        self.timeout = timeout

    async def _ask_location(self, text: str) -> str:
        answer = await self.gemini.generate(LOCATION_PROMPT.format(text=text))
        return answer.strip()

    async def _ask_image(self, url: str) -> str:
        answer = await self.gemini.generate(IMAGE_PROMPT.format(url=url))
        if not answer.strip():
            return ""
        return parse_verification(answer).model_dump_json(by_alias=True)

    async def extract_location(self, text: str, ttl_hours: int | None = None) -> str | None:
        """Location named in ``text``, or None when the model finds none."""
        location = await self.cache.cached_call(
            LOCATION_TAG,
            text,
            self._ask_location,
            self.ttl_hours if ttl_hours is None else ttl_hours,
            timeout=self.timeout,
            skip_empty=True,
        )
        if not location or location.lower() == UNKNOWN_LOCATION.lower():
            return None
        return location

    async def verify_image(self, image_url: str, ttl_hours: int | None = None) -> ImageVerification:
        """Authenticity verdict for an image reference."""
        raw = await self.cache.cached_call(
            IMAGE_VERIFY_TAG,
            image_url,
            self._ask_image,
            self.ttl_hours if ttl_hours is None else ttl_hours,
            timeout=self.timeout,
            skip_empty=True,
        )
        if not raw:
            return FALLBACK_VERIFICATION
        return ImageVerification.model_validate_json(raw)
