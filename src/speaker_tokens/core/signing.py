"""Signing material composition and JWT primitives.

The effective HMAC secret for a session token is the shared secret, the
token format version and the per-token key concatenated in that order.
Changing any one of the three invalidates every token signed with the old
material.
"""

from __future__ import annotations

from typing import Any

import jwt

SIGNING_ALGORITHM = "HS256"

# Time-based claims are checked against the injected clock, not by PyJWT.
_DECODE_OPTIONS: dict[str, Any] = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "require": ["exp", "iat"],
}


def effective_secret(shared_secret: str, version: int, per_token_key: str) -> str:
    """Compose the signing secret for a single session token."""
    return f"{shared_secret}{version}{per_token_key}"


def sign(payload: dict[str, Any], secret: str) -> str:
    """Sign ``payload`` as a compact JWT."""
    return jwt.encode(payload, secret, algorithm=SIGNING_ALGORITHM)


def verify_signature(token: str, secret: str) -> dict[str, Any]:
    """Verify the signature of ``token`` and return its claims.

    Expiry is deliberately not checked here.

    Raises:
        jwt.exceptions.InvalidTokenError: If the token is malformed or the
            signature does not match ``secret``.
    """
    return jwt.decode(
        token,
        secret,
        algorithms=[SIGNING_ALGORITHM],
        options=_DECODE_OPTIONS,
    )


def unverified_claims(token: str) -> dict[str, Any] | None:
    """Read claims without checking the signature, for diagnostics only."""
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.exceptions.InvalidTokenError:
        return None
