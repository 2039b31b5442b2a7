"""Generative analysis client (Gemini ``generateContent``).

Request:  POST {base_url}/models/{model}:generateContent?key=...
          {"contents": [{"parts": [{"text": prompt}]}]}
Response: {"candidates": [{"content": {"parts": [{"text": answer}]}}]}

Only the first candidate's first text part is used. A response with no
candidates (or no text part) yields "", which callers treat as "no result".
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from relief_shared.errors import DecodeError
from relief_shared.http import PAYLOAD_LOG_LIMIT, decode_json, send
from relief_shared.settings import GeminiSettings

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin async client over one generative model endpoint."""

    def __init__(
        self,
        settings: GeminiSettings,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.settings = settings
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def endpoint(self) -> str:
        base = self.settings.base_url.rstrip("/")
        return f"{base}/models/{self.settings.model}:generateContent"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the first text answer ("" if none)."""
        self.settings.ensure_complete()
        client = await self._get_client()
        response = await send(
            client,
            "POST",
            self.endpoint,
            params={"key": self.settings.api_key},
            json={"contents": [{"parts": [{"text": prompt}]}]},
        )
        return first_text(decode_json(response))


def first_text(payload: Any) -> str:
    """Extract ``candidates[0].content.parts[0].text`` or "".

    Missing or empty levels mean "no answer"; levels of the wrong shape are a
    DecodeError.
    """
    if not isinstance(payload, dict):
        raise DecodeError("Generative response is not a JSON object", _excerpt(payload))
    candidates = payload.get("candidates") or []
    if not isinstance(candidates, list):
        raise DecodeError("Generative response candidates is not a list", _excerpt(payload))
    if not candidates:
        logger.info("Generative response had no candidates")
        return ""
    candidate = candidates[0]
    if not isinstance(candidate, dict):
        raise DecodeError("Generative candidate is not an object", _excerpt(payload))
    content = candidate.get("content") or {}
    if not isinstance(content, dict):
        raise DecodeError("Generative candidate content is not an object", _excerpt(payload))
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise DecodeError("Generative content parts is not a list", _excerpt(payload))
    if not parts:
        return ""
    if not isinstance(parts[0], dict):
        raise DecodeError("Generative content part is not an object", _excerpt(payload))
    text = parts[0].get("text")
    return text if isinstance(text, str) else ""


def _excerpt(payload: Any) -> str:
    return str(payload)[:PAYLOAD_LOG_LIMIT]
