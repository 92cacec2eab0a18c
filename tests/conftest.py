"""
Shared test fixtures for speaker token tests.

Provides a controllable clock, codecs, stores and configuration.
"""

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from hypothesis import settings

from speaker_tokens.clock import FixedClock
from speaker_tokens.config import StoreBackend, StoreConfig, TelemetryConfig, TokenLifecycleConfig
from speaker_tokens.session_tokens import SessionTokenCodec
from speaker_tokens.stores import (
    FileSessionTokenStore,
    InMemorySessionTokenStore,
    SessionTokenStore,
    SQLiteSessionTokenStore,
)

settings.register_profile("ci", max_examples=100)
settings.register_profile("dev", max_examples=50)
settings.load_profile("dev")

SHARED_SECRET = "test-shared-secret"
START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def clock() -> FixedClock:
    """Provide a clock frozen at a known instant."""
    return FixedClock(START)


@pytest.fixture
def codec(clock: FixedClock) -> SessionTokenCodec:
    """Provide a session token codec with a 30 second lifetime."""
    return SessionTokenCodec(clock, shared_secret=SHARED_SECRET, expires_in="30s")


@pytest.fixture
def base_config() -> TokenLifecycleConfig:
    """Provide a basic configuration for testing."""
    return TokenLifecycleConfig(
        secret=SHARED_SECRET,
        session_token_expires_in="30s",
        access_token_ttl="10m",
        telemetry=TelemetryConfig(enabled=False, service_name="test-speaker-tokens"),
    )


@pytest.fixture
def file_store_config(tmp_path: Path) -> StoreConfig:
    """Provide a JSON file store configuration under a temp directory."""
    return StoreConfig(backend=StoreBackend.FILE, path=str(tmp_path / "tokens.json"))


@pytest.fixture(params=["memory", "file", "sqlite"])
def store(
    request: pytest.FixtureRequest,
    tmp_path: Path,
    clock: FixedClock,
) -> Iterator[SessionTokenStore]:
    """Provide each session token store backend in turn."""
    if request.param == "memory":
        yield InMemorySessionTokenStore(clock)
    elif request.param == "file":
        yield FileSessionTokenStore(tmp_path / "tokens.json")
    else:
        sqlite_store = SQLiteSessionTokenStore(tmp_path / "tokens.db")
        yield sqlite_store
        sqlite_store.close()
