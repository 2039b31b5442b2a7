"""Test fixtures for the LLM Gateway.

Provides:
  - Mock HTTP transport for httpx standing in for the generative endpoint
  - A GeminiClient wired to it
  - A RedisStore on an isolated in-memory fakeredis server
"""

from typing import Any

import httpx
import pytest
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
from relief_llm_gateway.analysis import AnalysisService
from relief_llm_gateway.gemini import GeminiClient
from relief_shared.settings import GeminiSettings
from relief_store_access.cache import TTLCache
from relief_store_access.client import RedisAdapter
from relief_store_access.store import RedisStore


class MockTransport(httpx.AsyncBaseTransport):
    """Pops one preconfigured response (or exception) per request."""

    def __init__(self, responses: list[httpx.Response | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            response.stream = httpx.ByteStream(response.content)
            return response
        return httpx.Response(500, json={"error": "No more mock responses"})


@pytest.fixture
def gemini_answer():
    """Build a generateContent response body carrying ``text``."""

    def _answer(text: str) -> dict[str, Any]:
        return {"candidates": [{"content": {"parts": [{"text": text}]}}]}

    return _answer


@pytest.fixture
def mock_transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
async def http_client(mock_transport):
    async with httpx.AsyncClient(transport=mock_transport) as client:
        yield client


@pytest.fixture
def gemini_settings() -> GeminiSettings:
    return GeminiSettings(api_key="test-gemini-key", base_url="https://gen.example.com/v1beta")


@pytest.fixture
def gemini(gemini_settings, http_client) -> GeminiClient:
    return GeminiClient(gemini_settings, client=http_client)


@pytest.fixture
def store() -> RedisStore:
    return RedisStore(RedisAdapter(FakeRedis(server=FakeServer(), decode_responses=True)))


@pytest.fixture
def analysis(gemini, store) -> AnalysisService:
    return AnalysisService(gemini, TTLCache(store, clock=store.clock))
