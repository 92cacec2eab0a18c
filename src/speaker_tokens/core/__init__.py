"""Core helpers shared by the token codecs and caches.

Duration parsing and signing primitives that carry no state of their own.
"""

from __future__ import annotations

from .durations import MIN_SESSION_LIFETIME, parse_duration, parse_session_lifetime, whole_seconds
from .signing import (
    SIGNING_ALGORITHM,
    effective_secret,
    sign,
    unverified_claims,
    verify_signature,
)

__all__ = [
    "MIN_SESSION_LIFETIME",
    "parse_duration",
    "parse_session_lifetime",
    "whole_seconds",
    "SIGNING_ALGORITHM",
    "effective_secret",
    "sign",
    "unverified_claims",
    "verify_signature",
]
