"""Injectable clocks.

Every expiry decision reads time through a ``Clock`` so that TTL and
session token expiry can be driven deterministically in tests.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock, timezone-aware UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, time: datetime | None = None) -> None:
        self.time = time or datetime.now(UTC)

    def now(self) -> datetime:
        return self.time

    def advance(self, delta: timedelta | None = None, **kwargs: float) -> datetime:
        """Move the clock forward and return the new time.

        Accepts either a ``timedelta`` or ``timedelta`` keyword arguments,
        e.g. ``clock.advance(seconds=31)``.
        """
        self.time = self.time + (delta if delta is not None else timedelta(**kwargs))
        return self.time


def unix_seconds(moment: datetime) -> int:
    """Whole seconds since the epoch, rounded down."""
    return int(moment.timestamp() // 1)


SYSTEM_CLOCK = SystemClock()
