"""Tests for the shared outbound HTTP helpers."""

import httpx
import pytest
from relief_shared.errors import DecodeError, TransportError, UpstreamError
from relief_shared.http import decode_json, send


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_success_passes_response_through() -> None:
    async with _client(lambda request: httpx.Response(200, json={"ok": True})) as client:
        response = await send(client, "GET", "https://api.test/x")
    assert decode_json(response) == {"ok": True}


async def test_non_2xx_becomes_upstream_error() -> None:
    async with _client(lambda request: httpx.Response(418, text="teapot")) as client:
        with pytest.raises(UpstreamError) as exc_info:
            await send(client, "GET", "https://api.test/x")
    assert exc_info.value.status_code == 418
    assert exc_info.value.body == "teapot"


async def test_describe_error_sets_message() -> None:
    async with _client(lambda request: httpx.Response(400, text="nope")) as client:
        with pytest.raises(UpstreamError, match="custom: nope"):
            await send(
                client, "GET", "https://api.test/x",
                describe_error=lambda response: f"custom: {response.text}",
            )


async def test_connect_error_becomes_transport_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(refuse) as client:
        with pytest.raises(TransportError, match="failed"):
            await send(client, "GET", "https://api.test/x")


def test_decode_error_carries_payload() -> None:
    with pytest.raises(DecodeError) as exc_info:
        decode_json(httpx.Response(200, text="{truncated"))
    assert exc_info.value.payload == "{truncated"
