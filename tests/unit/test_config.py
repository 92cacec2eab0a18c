"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError

from speaker_tokens.config import (
    SESSION_TOKEN_VERSION,
    StoreBackend,
    StoreConfig,
    TelemetryConfig,
    TokenLifecycleConfig,
)


class TestTokenLifecycleConfig:
    """Tests for the main configuration."""

    def test_defaults(self) -> None:
        config = TokenLifecycleConfig(secret="s3cret")

        assert config.secret.get_secret_value() == "s3cret"
        assert config.token_version == SESSION_TOKEN_VERSION == 2
        assert config.session_token_expires_in == "1h"
        assert config.access_token_ttl == "12h"
        assert config.store.backend is StoreBackend.MEMORY
        assert config.telemetry.enabled is True

    def test_secret_not_in_repr(self) -> None:
        """The shared secret should never be printed."""
        config = TokenLifecycleConfig(secret="s3cret")
        assert "s3cret" not in repr(config)
        assert "s3cret" not in str(config.model_dump())

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValidationError, match="secret must not be empty"):
            TokenLifecycleConfig(secret="")

    @pytest.mark.parametrize("field", ["session_token_expires_in", "access_token_ttl"])
    def test_invalid_duration_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError, match="Invalid duration"):
            TokenLifecycleConfig(secret="s3cret", **{field: "soon"})

    def test_sub_second_session_lifetime_rejected(self) -> None:
        with pytest.raises(ValidationError, match="at least 1s"):
            TokenLifecycleConfig(secret="s3cret", session_token_expires_in="500ms")

    def test_sub_second_access_ttl_allowed(self) -> None:
        """Access tokens are checked to the millisecond, so short TTLs are fine."""
        config = TokenLifecycleConfig(secret="s3cret", access_token_ttl="500ms")
        assert config.access_token_ttl == "500ms"

    def test_version_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            TokenLifecycleConfig(secret="s3cret", token_version=0)

    def test_frozen(self) -> None:
        config = TokenLifecycleConfig(secret="s3cret")
        with pytest.raises(ValidationError):
            config.token_version = 3  # type: ignore[misc]

    def test_with_overrides(self, base_config: TokenLifecycleConfig) -> None:
        """Overrides should keep the secret and untouched fields."""
        updated = base_config.with_overrides(token_version=3)

        assert updated.token_version == 3
        assert updated.secret.get_secret_value() == base_config.secret.get_secret_value()
        assert updated.session_token_expires_in == base_config.session_token_expires_in
        assert base_config.token_version == 2

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        monkeypatch.setenv("SPEAKER_TOKENS_SECRET", "from-env")
        monkeypatch.setenv("SPEAKER_TOKENS_TOKEN_VERSION", "5")
        monkeypatch.setenv("SPEAKER_TOKENS_SESSION_TOKEN_EXPIRES_IN", "30s")
        monkeypatch.setenv("SPEAKER_TOKENS_STORE_BACKEND", "sqlite")
        monkeypatch.setenv("SPEAKER_TOKENS_STORE_PATH", str(tmp_path / "tokens.db"))
        monkeypatch.setenv("SPEAKER_TOKENS_LOG_LEVEL", "debug")

        config = TokenLifecycleConfig.from_env()

        assert config.secret.get_secret_value() == "from-env"
        assert config.token_version == 5
        assert config.session_token_expires_in == "30s"
        assert config.access_token_ttl == "12h"
        assert config.store.backend is StoreBackend.SQLITE
        assert config.store.path == str(tmp_path / "tokens.db")
        assert config.telemetry.log_level == "DEBUG"

    def test_from_env_requires_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SPEAKER_TOKENS_SECRET", raising=False)
        with pytest.raises(ValueError, match="SPEAKER_TOKENS_SECRET"):
            TokenLifecycleConfig.from_env()


class TestStoreConfig:
    """Tests for store selection."""

    def test_memory_needs_no_path(self) -> None:
        assert StoreConfig().path is None

    @pytest.mark.parametrize("backend", ["file", "sqlite"])
    def test_persistent_backends_need_path(self, backend: str) -> None:
        with pytest.raises(ValidationError, match="requires a path"):
            StoreConfig(backend=backend)

    def test_migrate_only_for_sqlite(self) -> None:
        with pytest.raises(ValidationError, match="only supported by the sqlite backend"):
            StoreConfig(backend="file", path="tokens.json", migrate_from="old.json")

        config = StoreConfig(backend="sqlite", path="tokens.db", migrate_from="old.json")
        assert config.migrate_from == "old.json"

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValidationError):
            StoreConfig(backend="redis", path="x")


class TestTelemetryConfig:
    """Tests for telemetry configuration."""

    def test_log_level_normalized(self) -> None:
        assert TelemetryConfig(log_level="warning").log_level == "WARNING"

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ValidationError, match="Unsupported log level"):
            TelemetryConfig(log_level="LOUD")
