"""OAuth 1.0a request signing for the social search API (HMAC-SHA1).

This is the application-only flow: there is a consumer key/secret pair but no
user token, so the signing key is ``pct(consumer_secret) + "&"``.

The signature is computed over the *union* of the protocol parameters
(``oauth_*``) and the request's query parameters:

    base   = METHOD & pct(url) & pct(k1=v1&k2=v2&...)   # pairs sorted
    digest = HMAC-SHA1(signing_key, base)
    sig    = base64(digest)

``pct`` is RFC 3986 percent-encoding: only ``A-Z a-z 0-9 - . _ ~`` pass
through unescaped. Everything here is a pure function of its inputs except
the nonce and timestamp, which SignedRequest fixes at construction so that
the same request always yields the same signature.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import quote

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"


def percent_encode(value: str) -> str:
    """RFC 3986 percent-encoding with no reserved-character exceptions."""
    return quote(str(value), safe="~")


def normalize_parameters(params: Mapping[str, str]) -> str:
    """Encode, sort (by key, then value) and join the parameter pairs."""
    pairs = sorted((percent_encode(k), percent_encode(v)) for k, v in params.items())
    return "&".join(f"{k}={v}" for k, v in pairs)


def signature_base_string(method: str, url: str, params: Mapping[str, str]) -> str:
    return "&".join(
        [method.upper(), percent_encode(url), percent_encode(normalize_parameters(params))]
    )


def signing_key(consumer_secret: str) -> str:
    return f"{percent_encode(consumer_secret)}&"


def sign(method: str, url: str, params: Mapping[str, str], consumer_secret: str) -> str:
    """Compute the base64 HMAC-SHA1 signature for a request."""
    base = signature_base_string(method, url, params)
    digest = hmac.new(
        signing_key(consumer_secret).encode("utf-8"),
        base.encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def generate_nonce() -> str:
    return secrets.token_hex(16)


def generate_timestamp() -> str:
    return str(int(time.time()))


@dataclass(frozen=True)
class SignedRequest:
    """One signed request. Nonce and timestamp are fixed when it is built."""

    method: str
    url: str
    query_params: dict[str, str]
    consumer_key: str
    consumer_secret: str = field(repr=False)
    nonce: str = field(default_factory=generate_nonce)
    timestamp: str = field(default_factory=generate_timestamp)

    def protocol_params(self) -> dict[str, str]:
        return {
            "oauth_consumer_key": self.consumer_key,
            "oauth_nonce": self.nonce,
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": self.timestamp,
            "oauth_version": OAUTH_VERSION,
        }

    def base_string(self) -> str:
        return signature_base_string(
            self.method, self.url, {**self.protocol_params(), **self.query_params}
        )

    @property
    def signature(self) -> str:
        return sign(
            self.method,
            self.url,
            {**self.protocol_params(), **self.query_params},
            self.consumer_secret,
        )

    @property
    def authorization_header(self) -> str:
        """``OAuth k="v", ...`` over the protocol params plus the signature."""
        params = {**self.protocol_params(), "oauth_signature": self.signature}
        return "OAuth " + ", ".join(
            f'{percent_encode(k)}="{percent_encode(v)}"' for k, v in sorted(params.items())
        )

    @property
    def query_string(self) -> str:
        # Encoded the same way as the signature so the provider sees
        # exactly the bytes that were signed.
        return "&".join(
            f"{percent_encode(k)}={percent_encode(v)}" for k, v in self.query_params.items()
        )

    @property
    def full_url(self) -> str:
        if not self.query_params:
            return self.url
        return f"{self.url}?{self.query_string}"
