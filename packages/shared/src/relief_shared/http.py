"""Outbound HTTP helpers shared by every external client.

All outbound calls go through ``send`` so that the error taxonomy is applied
in one place: httpx transport failures become TransportError, non-2xx
responses become UpstreamError, unparseable bodies become DecodeError.
Clients receive their ``httpx.AsyncClient`` from the caller, which is how
tests substitute a mock transport.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

import httpx

from relief_shared.errors import DecodeError, TransportError, UpstreamError

logger = logging.getLogger(__name__)

# Longest slice of an offending body that goes into logs and exceptions.
PAYLOAD_LOG_LIMIT = 2000


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    describe_error: Callable[[httpx.Response], str | None] | None = None,
    **kwargs: Any,
) -> httpx.Response:
    """Issue exactly one request and classify its failure modes.

    ``describe_error`` lets a client turn a provider-specific error body into
    a readable message; the raw body is always kept on the UpstreamError.
    """
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        raise TransportError(f"{method} {url} timed out: {e}") from e
    except httpx.TransportError as e:
        raise TransportError(f"{method} {url} failed: {e}") from e

    if not response.is_success:
        body = response.text
        message = describe_error(response) if describe_error else None
        logger.warning(f"{method} {url} returned {response.status_code}")
        raise UpstreamError(response.status_code, body, message)
    return response


def decode_json(response: httpx.Response) -> Any:
    """Parse a JSON body, raising DecodeError with the payload on failure."""
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        payload = response.text[:PAYLOAD_LOG_LIMIT]
        logger.error(f"Malformed JSON response ({response.status_code}): {payload!r}")
        raise DecodeError(f"Malformed response body: {e}", payload) from e
