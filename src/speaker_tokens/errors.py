"""Error classes for speaker token lifecycle.

Structured error hierarchy with stable error codes. Verification results
are returned as data (see ``types``); these exceptions exist for call sites
that prefer raising, for credential decoding and for fatal store setup.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes."""

    # Authentication errors (1xxx)
    TOKEN_EXPIRED = "AUTH_1001"
    TOKEN_INVALID = "AUTH_1002"
    MISSING_CREDENTIAL = "AUTH_1006"

    # Validation errors (2xxx)
    INVALID_CONFIG = "VAL_2002"
    MALFORMED_TOKEN = "VAL_2005"

    # Storage errors (8xxx)
    STORAGE_INIT_FAILED = "STORE_8001"


class TokenLifecycleError(Exception):
    """Base error with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidTokenError(TokenLifecycleError):
    """Session token failed signature, format, version or key checks.

    Not recoverable without the user re-authenticating.
    """

    def __init__(self, reason: str = "Token is invalid") -> None:
        super().__init__(reason, ErrorCode.TOKEN_INVALID, details={"reason": reason})
        self.reason = reason


class ExpiredTokenError(TokenLifecycleError):
    """Session token is correctly signed but past its expiry.

    Carries the recovered service token so a fresh session token can be
    issued without the user re-authenticating.
    """

    def __init__(self, service_token: str, expired_at: int) -> None:
        super().__init__(
            "Session token has expired",
            ErrorCode.TOKEN_EXPIRED,
            details={"expired_at": expired_at},
        )
        self.service_token = service_token
        self.expired_at = expired_at


class MissingCredentialError(TokenLifecycleError):
    """No token was supplied at all."""

    def __init__(self, message: str = "Missing credentials") -> None:
        super().__init__(message, ErrorCode.MISSING_CREDENTIAL)


class MalformedTokenError(TokenLifecycleError):
    """Opaque token string could not be decoded into a session token."""

    def __init__(self, message: str = "Malformed session token") -> None:
        super().__init__(message, ErrorCode.MALFORMED_TOKEN)


class InvalidConfigError(TokenLifecycleError):
    """Invalid configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )


class StorageInitError(TokenLifecycleError):
    """Token store could not be opened; the store is unusable."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.STORAGE_INIT_FAILED,
            details={"path": path} if path else None,
        )
