"""Shared test fixtures for Source Access tests.

Provides:
  - Mock HTTP transport for httpx (intercepts all requests)
  - Search credentials and an XConnector wired to the mock transport
  - A builder for provider search payloads
"""

from collections.abc import Callable
from typing import Any

import httpx
import pytest
from relief_shared.settings import SearchCredentials
from relief_source_access.connectors.x import XConnector

SEARCH_URL = "https://api.example.com/1.1/search/tweets.json"


class MockTransport(httpx.AsyncBaseTransport):
    """Mock HTTP transport that returns preconfigured responses.

    Each call to handle_async_request pops the next entry from ``responses``.
    An exception instance in the list is raised instead of returned. If the
    list is exhausted, returns a 500 error.
    """

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
def mock_transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
async def http_client(mock_transport):
    async with httpx.AsyncClient(transport=mock_transport) as client:
        yield client


@pytest.fixture
def credentials() -> SearchCredentials:
    return SearchCredentials(consumer_key="test-consumer-key", consumer_secret="test-secret")


@pytest.fixture
def connector(credentials, http_client) -> XConnector:
    return XConnector(credentials, base_url=SEARCH_URL, client=http_client)


@pytest.fixture
def make_status() -> Callable[..., dict[str, Any]]:
    """Build one provider status dict; keyword overrides replace user fields."""

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
