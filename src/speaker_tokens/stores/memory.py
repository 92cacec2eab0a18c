"""In-process session token store. Nothing survives a restart."""

from __future__ import annotations

from ..clock import SYSTEM_CLOCK, Clock
from ..models import SessionToken, SessionTokenRecord
from ..telemetry import ATTR_BACKEND, ATTR_PURGED, get_logger, traced
from .base import Verifier, keys_to_purge

logger = get_logger("memory_store")


class InMemorySessionTokenStore:
    """Plain dictionary-backed store, for tests and non-persistent setups."""

    def __init__(self, clock: Clock = SYSTEM_CLOCK) -> None:
        self.clock = clock
        self._records: dict[str, SessionTokenRecord] = {}

    def get(self, lookup_key: str) -> SessionToken | None:
        record = self._records.get(lookup_key)
        return record.token if record else None

    def set(self, lookup_key: str, token: SessionToken) -> None:
        self._records[lookup_key] = SessionTokenRecord(
            lookup_key=lookup_key,
            token=token,
            created_at=self.clock.now(),
        )

    def delete(self, lookup_key: str) -> None:
        self._records.pop(lookup_key, None)

    def get_all(self) -> dict[str, SessionToken]:
        return {key: record.token for key, record in self._records.items()}

    def records(self) -> list[SessionTokenRecord]:
        """All records, oldest first."""
        return sorted(self._records.values(), key=lambda record: record.created_at)

    @traced(
        "session_store.cleanup_expired",
        attributes={ATTR_BACKEND: "memory"},
        result_attribute=ATTR_PURGED,
    )
    def cleanup_expired(self, verifier: Verifier) -> int:
        purge = keys_to_purge(self.get_all(), verifier)
        for lookup_key, outcome in purge.items():
            logger.debug("Deleting session token", outcome=outcome)
            self._records.pop(lookup_key, None)

        if purge:
            logger.info("Cleaned up session tokens", deleted=len(purge))
        return len(purge)
