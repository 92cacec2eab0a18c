"""Interchangeable session token stores."""

from __future__ import annotations

from .base import PURGED_OUTCOMES, SessionTokenStore, Verifier, keys_to_purge, parse_token_table
from .file import FileSessionTokenStore
from .memory import InMemorySessionTokenStore
from .sqlite import SQLiteSessionTokenStore

__all__ = [
    "PURGED_OUTCOMES",
    "SessionTokenStore",
    "Verifier",
    "keys_to_purge",
    "parse_token_table",
    "FileSessionTokenStore",
    "InMemorySessionTokenStore",
    "SQLiteSessionTokenStore",
]
