"""Credential and token lifecycle for smart-speaker music services."""

from .access_tokens import AccessTokenCache, EncryptedAccessTokens, sha256_minter
from .clock import Clock, FixedClock, SystemClock
from .config import SESSION_TOKEN_VERSION, StoreBackend, StoreConfig, TokenLifecycleConfig
from .errors import (
    ExpiredTokenError,
    InvalidConfigError,
    InvalidTokenError,
    MalformedTokenError,
    MissingCredentialError,
    StorageInitError,
    TokenLifecycleError,
)
from .factory import create_access_token_cache, create_codec, create_store
from .models import SessionToken, SessionTokenRecord
from .session_tokens import SessionTokenCodec, decode_session_token, encode_session_token
from .stores import (
    FileSessionTokenStore,
    InMemorySessionTokenStore,
    SessionTokenStore,
    SQLiteSessionTokenStore,
)
from .types import Expired, Invalid, Valid, VerificationOutcome

__all__ = [
    "AccessTokenCache",
    "EncryptedAccessTokens",
    "sha256_minter",
    "Clock",
    "FixedClock",
    "SystemClock",
    "SESSION_TOKEN_VERSION",
    "StoreBackend",
    "StoreConfig",
    "TokenLifecycleConfig",
    "ExpiredTokenError",
    "InvalidConfigError",
    "InvalidTokenError",
    "MalformedTokenError",
    "MissingCredentialError",
    "StorageInitError",
    "TokenLifecycleError",
    "create_access_token_cache",
    "create_codec",
    "create_store",
    "SessionToken",
    "SessionTokenRecord",
    "SessionTokenCodec",
    "decode_session_token",
    "encode_session_token",
    "FileSessionTokenStore",
    "InMemorySessionTokenStore",
    "SessionTokenStore",
    "SQLiteSessionTokenStore",
    "Expired",
    "Invalid",
    "Valid",
    "VerificationOutcome",
]

__version__ = "0.1.0"
