"""Session token store contract and shared cleanup policy."""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from pydantic import ValidationError

from ..models import SessionToken
from ..telemetry import get_logger
from ..types import Expired, Invalid, VerificationOutcome

logger = get_logger("stores")

# Outcomes whose records cleanup removes. Expired tokens are purged too: the
# platform presents the full self-contained token when it wants a refresh,
# so a stored copy is not needed for that.
PURGED_OUTCOMES: tuple[type, ...] = (Invalid, Expired)


class Verifier(Protocol):
    def verify(self, session_token: SessionToken) -> VerificationOutcome: ...


class SessionTokenStore(Protocol):
    """Durable mapping from an external lookup key to a session token.

    ``get``/``set``/``delete``/``get_all``/``cleanup_expired`` never raise
    for storage failures; they log and return a safe default instead.
    """

    def get(self, lookup_key: str) -> SessionToken | None: ...

    def set(self, lookup_key: str, token: SessionToken) -> None: ...

    def delete(self, lookup_key: str) -> None: ...

    def get_all(self) -> dict[str, SessionToken]: ...

    def cleanup_expired(self, verifier: Verifier) -> int: ...


def keys_to_purge(
    tokens: Mapping[str, SessionToken],
    verifier: Verifier,
) -> dict[str, str]:
    """Lookup keys whose tokens should be removed, with the outcome name."""
    purge: dict[str, str] = {}
    for lookup_key, token in tokens.items():
        outcome = verifier.verify(token)
        if isinstance(outcome, PURGED_OUTCOMES):
            purge[lookup_key] = type(outcome).__name__
    return purge


def parse_token_table(data: Any) -> dict[str, SessionToken]:
    """Session tokens from a decoded JSON token file.

    Malformed entries are skipped with a warning so one bad record does not
    cost every other session.

    Raises:
        ValueError: If ``data`` is not a JSON object.
    """
    if not isinstance(data, dict):
        msg = "expected a JSON object of session tokens"
        raise ValueError(msg)

    tokens: dict[str, SessionToken] = {}
    for lookup_key, value in data.items():
        try:
            tokens[lookup_key] = SessionToken.model_validate(value)
        except ValidationError as e:
            logger.warning("Skipping malformed session token", error_count=e.error_count())
    return tokens
