"""Configuration for speaker token lifecycle.

Uses Pydantic v2 for validation with sensible defaults. Backends and
lifetimes are chosen here and wired together by ``factory``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from .core.durations import parse_duration, parse_session_lifetime

# Bumping this invalidates every session token issued under the old version.
SESSION_TOKEN_VERSION = 2


class StoreBackend(StrEnum):
    """Session token store implementations."""

    MEMORY = "memory"
    FILE = "file"
    SQLITE = "sqlite"


class StoreConfig(BaseModel):
    """Session token store selection."""

    model_config = ConfigDict(frozen=True)

    backend: StoreBackend = StoreBackend.MEMORY
    path: str | None = None
    # JSON token file to import once into the sqlite store
    migrate_from: str | None = None

    @model_validator(mode="after")
    def check_paths(self) -> Self:
        """Persistent backends need a path; only sqlite can migrate."""
        if self.backend is not StoreBackend.MEMORY and not self.path:
            msg = f"Store backend {self.backend.value!r} requires a path"
            raise ValueError(msg)
        if self.migrate_from and self.backend is not StoreBackend.SQLITE:
            msg = "migrate_from is only supported by the sqlite backend"
            raise ValueError(msg)
        return self


class TelemetryConfig(BaseModel):
    """OpenTelemetry and logging configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "speaker-tokens"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level name."""
        supported = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in supported:
            msg = f"Unsupported log level: {v}. Supported: {supported}"
            raise ValueError(msg)
        return v.upper()


class TokenLifecycleConfig(BaseModel):
    """Main configuration."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    # Required
    secret: SecretStr

    # Session tokens
    token_version: Annotated[int, Field(ge=1)] = SESSION_TOKEN_VERSION
    session_token_expires_in: str = "1h"

    # Access tokens
    access_token_ttl: str = "12h"
    access_token_salt: str = Field(default="speaker-tokens", min_length=1)

    # Sub-configurations
    store: StoreConfig = Field(default_factory=StoreConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @field_validator("secret")
    @classmethod
    def validate_secret(cls, v: SecretStr) -> SecretStr:
        """Reject an empty shared secret."""
        if not v.get_secret_value():
            msg = "secret must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("session_token_expires_in")
    @classmethod
    def validate_session_lifetime(cls, v: str) -> str:
        """Session lifetimes must parse and be at least one second."""
        parse_session_lifetime(v)
        return v

    @field_validator("access_token_ttl")
    @classmethod
    def validate_duration(cls, v: str) -> str:
        """Durations must parse, e.g. "10ms", "1h", "12h"."""
        parse_duration(v)
        return v

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data["secret"] = self.secret.get_secret_value()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "SPEAKER_TOKENS_") -> Self:
        """Create config from environment variables."""
        import os

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        secret = get_env("SECRET")
        if not secret:
            msg = f"{prefix}SECRET environment variable is required"
            raise ValueError(msg)

        store = StoreConfig(
            backend=get_env("STORE_BACKEND", StoreBackend.MEMORY.value),
            path=get_env("STORE_PATH"),
            migrate_from=get_env("STORE_MIGRATE_FROM"),
        )

        return cls(
            secret=secret,
            token_version=int(get_env("TOKEN_VERSION", str(SESSION_TOKEN_VERSION))),
            session_token_expires_in=get_env("SESSION_TOKEN_EXPIRES_IN", "1h"),
            access_token_ttl=get_env("ACCESS_TOKEN_TTL", "12h"),
            access_token_salt=get_env("ACCESS_TOKEN_SALT", "speaker-tokens"),
            store=store,
            telemetry=TelemetryConfig(log_level=get_env("LOG_LEVEL", "INFO")),
        )
