"""Verification outcome types.

Verifying a session token has three outcomes with different recovery
semantics, so they are modelled as a closed union rather than exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ExpiredTokenError, InvalidTokenError, TokenLifecycleError


@dataclass(frozen=True)
class Valid:
    """Signature and expiry both check out."""

    service_token: str

    def to_error(self) -> TokenLifecycleError | None:
        return None

    def unwrap(self) -> str:
        return self.service_token


@dataclass(frozen=True)
class Expired:
    """Correctly signed but past expiry; the service token can be re-issued."""

    service_token: str
    expired_at: int

    def to_error(self) -> ExpiredTokenError:
        return ExpiredTokenError(self.service_token, self.expired_at)

    def unwrap(self) -> str:
        raise self.to_error()


@dataclass(frozen=True)
class Invalid:
    """Terminal; the user has to re-authenticate."""

    reason: str

    def to_error(self) -> InvalidTokenError:
        return InvalidTokenError(self.reason)

    def unwrap(self) -> str:
        raise self.to_error()


VerificationOutcome = Valid | Expired | Invalid
