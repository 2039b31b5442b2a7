"""Supabase JWT verification for inbound function calls.

Browser callers invoke the function boundary with the project's anon key or a
user session token in ``Authorization: Bearer``. Both are HS256 JWTs signed
with the project JWT secret. Anon-key tokens have no ``aud`` and carry
``role: anon``; session tokens have ``aud: authenticated``.
"""

from __future__ import annotations

import jwt as pyjwt
from relief_shared.auth_models import Caller

ACCEPTED_ROLES = frozenset({"anon", "authenticated", "service_role"})


class CallerRejected(Exception):
    """Token decoded but its claims do not admit the caller."""


def verify_token(token: str, jwt_secret: str) -> Caller:
    """Decode and validate a Supabase JWT.

    Raises:
        pyjwt.ExpiredSignatureError: Token has expired.
        pyjwt.InvalidSignatureError: Signature doesn't match the secret.
        pyjwt.DecodeError: Malformed token.
        CallerRejected: Role is not one we serve.
    """
    payload = pyjwt.decode(
        token,
        jwt_secret,
        algorithms=["HS256"],
        options={"require": ["exp", "role"], "verify_aud": False},
    )
    role = payload["role"]
    if role not in ACCEPTED_ROLES:
        raise CallerRejected(f"Role '{role}' may not call this function")

    return Caller(
        user_id=payload.get("sub", ""),
        role=role,
        email=payload.get("email", ""),
        exp=payload["exp"],
    )


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
