"""Short-lived access tokens standing in for caller-supplied auth tokens.

``AccessTokenCache`` derives access tokens deterministically and forgets
them after a TTL. Expired entries are only swept on ``mint``; reads never
mutate the cache, so ``auth_tokens()`` may briefly report stale entries.
"""

from __future__ import annotations

import base64
import hashlib
from datetime import timedelta
from typing import Callable, Protocol

from cryptography.fernet import Fernet, InvalidToken

from .clock import SYSTEM_CLOCK, Clock
from .core.durations import DurationLike, parse_duration
from .models import AccessTokenEntry
from .telemetry import get_logger

Minter = Callable[[str], str]

DEFAULT_SALT = "speaker-tokens"
DEFAULT_TTL = timedelta(hours=12)

logger = get_logger("access_tokens")


def sha256_minter(salt: str = DEFAULT_SALT) -> Minter:
    """One-way minter: hex SHA-256 of the auth token followed by ``salt``."""

    def mint(value: str) -> str:
        return hashlib.sha256(f"{value}{salt}".encode("utf-8")).hexdigest()

    return mint


class AccessTokens(Protocol):
    def mint(self, auth_token: str) -> str: ...

    def auth_token_for(self, access_token: str) -> str | None: ...


class AccessTokenCache:
    """Self-sweeping TTL cache of minted access tokens."""

    def __init__(
        self,
        clock: Clock = SYSTEM_CLOCK,
        ttl: DurationLike = DEFAULT_TTL,
        minter: Minter | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            clock: Time source for issue and expiry checks.
            ttl: How long a minted access token stays resolvable.
            minter: Deterministic one-way function from auth token to
                access token (default: salted SHA-256).
        """
        self.clock = clock
        self.ttl = parse_duration(ttl)
        self.minter = minter or sha256_minter()
        self._entries: dict[str, AccessTokenEntry] = {}

    def mint(self, auth_token: str) -> str:
        """Mint (or re-mint) the access token for ``auth_token``.

        Sweeps expired entries first, then upserts with a fresh issue time.
        """
        access_token = self.minter(auth_token)
        self._sweep()
        self._entries[access_token] = AccessTokenEntry(
            access_token=access_token,
            auth_token=auth_token,
            issued_at=self.clock.now(),
        )
        return access_token

    def auth_token_for(self, access_token: str) -> str | None:
        """Resolve an access token, or ``None`` if unknown or expired."""
        entry = self._entries.get(access_token)
        if entry is None or self._is_expired(entry):
            return None
        return entry.auth_token

    def auth_tokens(self) -> list[str]:
        """Raw cached auth tokens, including not-yet-swept expired ones."""
        return [entry.auth_token for entry in self._entries.values()]

    def count(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: AccessTokenEntry) -> bool:
        return self.clock.now() - entry.issued_at > self.ttl

    def _sweep(self) -> int:
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry)]
        for key in expired:
            self._entries.pop(key, None)
        if expired:
            logger.debug("Swept expired access tokens", swept=len(expired))
        return len(expired)


def _derive_fernet_key(secret: str) -> bytes:
    return base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())


class EncryptedAccessTokens:
    """Stateless access tokens: the auth token travels encrypted.

    Nothing is cached, so these survive restarts but cannot be expired
    independently of the secret.
    """

    def __init__(self, secret: str) -> None:
        self._fernet = Fernet(_derive_fernet_key(secret))

    def mint(self, auth_token: str) -> str:
        return self._fernet.encrypt(auth_token.encode("utf-8")).decode("ascii")

    def auth_token_for(self, access_token: str) -> str | None:
        try:
            return self._fernet.decrypt(access_token.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError, ValueError):
            logger.warning("Failed to decrypt access token")
            return None
