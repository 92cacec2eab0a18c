"""Wire configured components together.

Backends are chosen here from configuration rather than by subclassing, so
cleanup and migration stay backend-agnostic.
"""

from __future__ import annotations

from .access_tokens import AccessTokenCache, sha256_minter
from .clock import SYSTEM_CLOCK, Clock
from .config import StoreBackend, StoreConfig, TokenLifecycleConfig
from .errors import InvalidConfigError
from .session_tokens import SessionTokenCodec
from .stores import (
    FileSessionTokenStore,
    InMemorySessionTokenStore,
    SessionTokenStore,
    SQLiteSessionTokenStore,
)
from .telemetry import get_logger

logger = get_logger("factory")


def create_store(config: StoreConfig, *, clock: Clock = SYSTEM_CLOCK) -> SessionTokenStore:
    """Open the configured session token store.

    A sqlite store configured with ``migrate_from`` imports that JSON token
    file once; later opens find only the ``.bak`` and skip it.

    Raises:
        InvalidConfigError: If a persistent backend has no path.
        StorageInitError: If the sqlite database cannot be opened.
    """
    if config.backend is StoreBackend.MEMORY:
        return InMemorySessionTokenStore(clock)

    if not config.path:
        raise InvalidConfigError(
            f"Store backend {config.backend.value!r} requires a path", field="path"
        )

    if config.backend is StoreBackend.FILE:
        return FileSessionTokenStore(config.path)

    store = SQLiteSessionTokenStore(config.path)
    if config.migrate_from:
        migrated = store.migrate_from_json(config.migrate_from)
        if migrated:
            logger.info("Imported legacy session tokens", count=migrated)
    return store


def create_codec(config: TokenLifecycleConfig, *, clock: Clock = SYSTEM_CLOCK) -> SessionTokenCodec:
    """Session token codec from the shared secret, version and lifetime."""
    return SessionTokenCodec(
        clock,
        shared_secret=config.secret.get_secret_value(),
        expires_in=config.session_token_expires_in,
        version=config.token_version,
    )


def create_access_token_cache(
    config: TokenLifecycleConfig,
    *,
    clock: Clock = SYSTEM_CLOCK,
) -> AccessTokenCache:
    """Access token cache with salted SHA-256 minting."""
    return AccessTokenCache(
        clock,
        ttl=config.access_token_ttl,
        minter=sha256_minter(config.access_token_salt),
    )
