"""Error taxonomy for outbound enrichment calls.

Every failure of an external call surfaces as one of four kinds:

  ConfigurationError: credentials or settings missing; never retried
  TransportError: network-level failure (timeout, DNS, refused); retryable
  UpstreamError: non-2xx from a third party; 5xx retryable, 4xx not
  DecodeError: body could not be parsed; never retried

The clients raise these and nothing else. Retrying is always the caller's
decision, driven by the ``retryable`` attribute.
"""

from __future__ import annotations


class EnrichmentError(Exception):
    """Base class for enrichment-layer failures."""

    retryable: bool = False


class ConfigurationError(EnrichmentError):
    """Required configuration (usually a credential) is missing or empty."""


class TransportError(EnrichmentError):
    """The request never produced an HTTP response."""

    retryable = True


class UpstreamError(EnrichmentError):
    """A third-party API answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"Upstream error {status_code}: {body[:200]}")

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status_code >= 500


class DecodeError(EnrichmentError):
    """A response body was not the shape we expected."""

    def __init__(self, message: str, payload: str = "") -> None:
        self.payload = payload
        super().__init__(message)
