"""Signed session tokens wrapping an opaque service token.

A session token is a JWT over ``{serviceToken, iat, exp, ver}`` signed with
``shared secret + version + per-token key``. The per-token key is generated
fresh at issuance and travels next to the JWT, which lets a single token be
revoked by forgetting its key, and a version bump revoke all of them.
"""

from __future__ import annotations

import base64
import binascii
import json
import uuid
from typing import Any, Callable, Mapping

import jwt
from pydantic import ValidationError

from .clock import SYSTEM_CLOCK, Clock, unix_seconds
from .config import SESSION_TOKEN_VERSION
from .core.durations import DurationLike, parse_session_lifetime, whole_seconds
from .core.signing import effective_secret, sign, unverified_claims, verify_signature
from .errors import InvalidConfigError, MalformedTokenError, MissingCredentialError
from .models import SessionToken, SessionTokenClaims
from .telemetry import ATTR_OUTCOME, ATTR_VERSION, get_logger, trace_operation, traced
from .types import Expired, Invalid, Valid, VerificationOutcome

KeyGenerator = Callable[[], str]

logger = get_logger("session_tokens")


def random_key() -> str:
    """Default per-token key generator."""
    return str(uuid.uuid4())


class SessionTokenCodec:
    """Issue and verify signed session tokens."""

    def __init__(
        self,
        clock: Clock = SYSTEM_CLOCK,
        *,
        shared_secret: str,
        expires_in: DurationLike,
        key_generator: KeyGenerator = random_key,
        version: int = SESSION_TOKEN_VERSION,
    ) -> None:
        """Initialize the codec.

        Args:
            clock: Time source for ``iat`` and expiry checks.
            shared_secret: Fleet-wide signing secret.
            expires_in: Token lifetime, e.g. ``"1h"`` or ``timedelta``.
            key_generator: Produces the per-token key at issuance.
            version: Token format version mixed into the signing secret.

        Raises:
            InvalidConfigError: If the secret is empty or ``expires_in``
                does not parse or is shorter than one second.
        """
        if not shared_secret:
            raise InvalidConfigError("Shared secret must not be empty", field="shared_secret")
        try:
            self.expires_in = parse_session_lifetime(expires_in)
        except ValueError as e:
            raise InvalidConfigError(str(e), field="expires_in") from e

        self.clock = clock
        self.version = version
        self.key_generator = key_generator
        self._shared_secret = shared_secret

    def issue(self, service_token: str) -> SessionToken:
        """Issue a new session token for ``service_token``."""
        with trace_operation("session_token.issue", attributes={ATTR_VERSION: self.version}):
            per_token_key = self.key_generator()
            issued_at = unix_seconds(self.clock.now())
            claims = SessionTokenClaims(
                service_token=service_token,
                iat=issued_at,
                exp=issued_at + whole_seconds(self.expires_in),
                ver=self.version,
            )
            signed_payload = sign(claims.to_jwt_payload(), self._secret_for(per_token_key))
            return SessionToken(signed_payload=signed_payload, per_token_key=per_token_key)

    @traced("session_token.verify", result_attribute=ATTR_OUTCOME)
    def verify(self, session_token: SessionToken) -> VerificationOutcome:
        """Verify ``session_token``.

        Returns:
            ``Valid`` with the service token, ``Expired`` with the recovered
            service token and the unix time it expired at, or ``Invalid``
            with a reason. Never raises for a bad token.
        """
        return self._verify(session_token)

    def refresh(self, outcome: VerificationOutcome) -> SessionToken | None:
        """Re-issue for an ``Expired`` outcome; anything else gives ``None``."""
        if isinstance(outcome, Expired):
            return self.issue(outcome.service_token)
        return None

    def _secret_for(self, per_token_key: str) -> str:
        return effective_secret(self._shared_secret, self.version, per_token_key)

    def _verify(self, session_token: SessionToken) -> VerificationOutcome:
        try:
            raw = verify_signature(
                session_token.signed_payload,
                self._secret_for(session_token.per_token_key),
            )
        except jwt.exceptions.InvalidTokenError as e:
            reason = self._invalid_reason(session_token.signed_payload, e)
            logger.debug("Session token failed verification", reason=reason)
            return Invalid(reason)

        try:
            claims = SessionTokenClaims.model_validate(raw)
        except ValidationError:
            return Invalid("Session token payload is missing required claims")

        if unix_seconds(self.clock.now()) >= claims.exp:
            return Expired(claims.service_token, claims.exp)
        return Valid(claims.service_token)

    def _invalid_reason(self, signed_payload: str, error: Exception) -> str:
        if isinstance(error, jwt.exceptions.InvalidSignatureError):
            claims = unverified_claims(signed_payload) or {}
            token_version = claims.get("ver")
            if token_version is not None and token_version != self.version:
                return (
                    f"Signature verification failed: token version {token_version} "
                    f"does not match {self.version}"
                )
        return str(error) or "Failed to verify token"


def encode_session_token(session_token: SessionToken | Mapping[str, Any]) -> str:
    """Opaque string form handed to the speaker platform.

    Only the signed payload and per-token key are kept; any other fields on
    a mapping input are dropped.
    """
    if not isinstance(session_token, SessionToken):
        session_token = SessionToken.model_validate(session_token)
    raw = json.dumps(session_token.to_json_dict(), separators=(",", ":"))
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_session_token(value: str | None) -> SessionToken:
    """Inverse of ``encode_session_token``.

    Raises:
        MissingCredentialError: If no token was supplied.
        MalformedTokenError: If the string is not an encoded session token.
    """
    if not value:
        raise MissingCredentialError()
    try:
        raw = base64.b64decode(value.encode("ascii"), validate=True)
        return SessionToken.model_validate(json.loads(raw.decode("utf-8")))
    except (binascii.Error, UnicodeError, json.JSONDecodeError, ValidationError) as e:
        raise MalformedTokenError(f"Malformed session token: {type(e).__name__}") from e
