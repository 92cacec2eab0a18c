"""Unit tests for duration parsing."""

from datetime import timedelta

import pytest

from speaker_tokens.core.durations import parse_duration, parse_session_lifetime, whole_seconds


class TestParseDuration:
    """Tests for parse_duration."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("30s", timedelta(seconds=30)),
            ("10ms", timedelta(milliseconds=10)),
            ("1h", timedelta(hours=1)),
            ("12h", timedelta(hours=12)),
            ("1.5h", timedelta(minutes=90)),
            ("2 days", timedelta(days=2)),
            ("5 Minutes", timedelta(minutes=5)),
            ("1w", timedelta(weeks=1)),
            ("1y", timedelta(days=365.25)),
        ],
    )
    def test_strings_with_units(self, value: str, expected: timedelta) -> None:
        assert parse_duration(value) == expected

    def test_bare_numeric_string_is_milliseconds(self) -> None:
        """A string without a unit is read as milliseconds."""
        assert parse_duration("1500") == timedelta(milliseconds=1500)

    def test_numbers_are_seconds(self) -> None:
        assert parse_duration(5) == timedelta(seconds=5)
        assert parse_duration(2.5) == timedelta(seconds=2.5)

    def test_timedelta_passthrough(self) -> None:
        assert parse_duration(timedelta(minutes=3)) == timedelta(minutes=3)

    @pytest.mark.parametrize("value", ["", "soon", "5 fortnights", "h1", "1h30m"])
    def test_unparseable(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_duration(value)

    @pytest.mark.parametrize("value", ["0s", "-1s", 0, -5, timedelta(0)])
    def test_non_positive(self, value: object) -> None:
        """Lifetimes must be positive."""
        with pytest.raises(ValueError, match="positive"):
            parse_duration(value)  # type: ignore[arg-type]

    def test_bool_rejected(self) -> None:
        """Booleans are ints in Python but never durations."""
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_duration(True)


class TestWholeSeconds:
    """Tests for whole_seconds."""

    def test_rounds_down(self) -> None:
        assert whole_seconds(timedelta(milliseconds=1500)) == 1
        assert whole_seconds(timedelta(milliseconds=999)) == 0
        assert whole_seconds(timedelta(hours=1)) == 3600


class TestParseSessionLifetime:
    """Tests for parse_session_lifetime."""

    def test_whole_seconds_accepted(self) -> None:
        assert parse_session_lifetime("1s") == timedelta(seconds=1)
        assert parse_session_lifetime("1h") == timedelta(hours=1)
        assert parse_session_lifetime("1500ms") == timedelta(milliseconds=1500)

    @pytest.mark.parametrize("value", ["500ms", "999", 0.25, timedelta(milliseconds=10)])
    def test_sub_second_rejected(self, value: object) -> None:
        with pytest.raises(ValueError, match="at least 1s"):
            parse_session_lifetime(value)  # type: ignore[arg-type]

    def test_unparseable_still_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid duration"):
            parse_session_lifetime("soon")
