"""Duration parsing for token lifetimes.

Accepts the compact forms used in configuration (``"30s"``, ``"1h"``,
``"10ms"``, ``"2 days"``), bare numbers of seconds, or ``timedelta``.
"""

from __future__ import annotations

import re
from datetime import timedelta

_DURATION_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)

_UNIT_MILLISECONDS: dict[str, float] = {
    "ms": 1,
    "msec": 1,
    "msecs": 1,
    "millisecond": 1,
    "milliseconds": 1,
    "s": 1_000,
    "sec": 1_000,
    "secs": 1_000,
    "second": 1_000,
    "seconds": 1_000,
    "m": 60_000,
    "min": 60_000,
    "mins": 60_000,
    "minute": 60_000,
    "minutes": 60_000,
    "h": 3_600_000,
    "hr": 3_600_000,
    "hrs": 3_600_000,
    "hour": 3_600_000,
    "hours": 3_600_000,
    "d": 86_400_000,
    "day": 86_400_000,
    "days": 86_400_000,
    "w": 604_800_000,
    "week": 604_800_000,
    "weeks": 604_800_000,
    "y": 31_557_600_000,
    "yr": 31_557_600_000,
    "yrs": 31_557_600_000,
    "year": 31_557_600_000,
    "years": 31_557_600_000,
}

DurationLike = str | int | float | timedelta

MIN_SESSION_LIFETIME = timedelta(seconds=1)


def parse_duration(value: DurationLike) -> timedelta:
    """Parse a duration into a ``timedelta``.

    Args:
        value: ``timedelta``, number of seconds, or a string such as ``"30s"``.
            A string without a unit is read as milliseconds.

    Returns:
        The duration.

    Raises:
        ValueError: If the value cannot be parsed or is not positive.
    """
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, bool):
        msg = f"Invalid duration: {value!r}"
        raise ValueError(msg)
    elif isinstance(value, (int, float)):
        duration = timedelta(seconds=value)
    else:
        match = _DURATION_RE.match(value)
        if match is None:
            msg = f"Invalid duration: {value!r}"
            raise ValueError(msg)
        amount, unit = match.groups()
        unit = unit.lower() or "ms"
        if unit not in _UNIT_MILLISECONDS:
            msg = f"Unknown duration unit {unit!r} in {value!r}"
            raise ValueError(msg)
        duration = timedelta(milliseconds=float(amount) * _UNIT_MILLISECONDS[unit])

    if duration <= timedelta(0):
        msg = f"Duration must be positive: {value!r}"
        raise ValueError(msg)
    return duration


def whole_seconds(duration: timedelta) -> int:
    """Seconds in ``duration``, rounded down."""
    return int(duration.total_seconds() // 1)


def parse_session_lifetime(value: DurationLike) -> timedelta:
    """Parse a session token lifetime.

    Session token expiry has whole-second resolution, so anything shorter
    than a second would issue tokens that are already expired.

    Raises:
        ValueError: If the value does not parse or is under one second.
    """
    duration = parse_duration(value)
    if duration < MIN_SESSION_LIFETIME:
        msg = f"Session token lifetime must be at least 1s: {value!r}"
        raise ValueError(msg)
    return duration
