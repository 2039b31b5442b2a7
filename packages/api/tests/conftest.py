"""Test fixtures for the HTTP boundary.

The app is built around real services wired to:
  - FakeUpstreams, an httpx.MockTransport handler routing by host to canned
    search and generative responses
  - a RedisStore on an isolated in-memory fakeredis server
Search retries run without waiting and the rate limit is set high, so tests
never sleep.
"""

from typing import Any

import httpx
import pytest
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis
from fastapi.testclient import TestClient
from relief_api.app import create_app
from relief_api.services import build_services
from relief_shared.settings import GeminiSettings, PlatformSettings, SearchCredentials
from relief_store_access.client import RedisAdapter
from relief_store_access.store import RedisStore
from tenacity import wait_none

SEARCH_URL = "https://search.example.com/1.1/search/tweets.json"
GEMINI_BASE_URL = "https://gen.example.com/v1beta"


class FakeUpstreams:
    """Answers search and generative requests from separate queues."""

    def __init__(self) -> None:
        self.search: list[httpx.Response | Exception] = []
        self.gemini: list[httpx.Response | Exception] = []
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.search if request.url.host == "search.example.com" else self.gemini
        if not queue:
            return httpx.Response(500, json={"error": "No more mock responses"})
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def search_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "search.example.com"]

    def gemini_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "gen.example.com"]


@pytest.fixture
def upstreams() -> FakeUpstreams:
    return FakeUpstreams()


@pytest.fixture
def settings() -> PlatformSettings:
    return PlatformSettings(
        search_credentials=SearchCredentials(consumer_key="ck", consumer_secret="cs"),
        search_url=SEARCH_URL,
        search_rate_limit_per_second=1000.0,
        gemini=GeminiSettings(api_key="gk", base_url=GEMINI_BASE_URL),
    )


@pytest.fixture
def store() -> RedisStore:
    return RedisStore(RedisAdapter(FakeRedis(server=FakeServer(), decode_responses=True)))


@pytest.fixture
def services(settings, store, upstreams):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstreams))
    return build_services(settings, store=store, http_client=http_client, search_wait=wait_none())


@pytest.fixture
def client(services):
    with TestClient(create_app(services)) as test_client:
        yield test_client


@pytest.fixture
def make_status():
    def _make(
        id_str: str = "1001",
        text: str = "Flood waters rising downtown",
        created_at: str = "Wed Oct 10 20:19:24 +0000 2018",
        **user: Any,
    ) -> dict[str, Any]:
        return {
            "id_str": id_str,
            "text": text,
            "created_at": created_at,
            "user": {"screen_name": "reporter1", **user},
        }

    return _make


@pytest.fixture
def gemini_answer():
    def _answer(text: str) -> dict[str, Any]:
        return {"candidates": [{"content": {"parts": [{"text": text}]}}]}

    return _answer
