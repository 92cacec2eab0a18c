"""JSON file session token store.

The whole table lives in memory and is rewritten to disk after every
mutation. Single-writer only: concurrent processes writing the same file
will lose updates.
"""

from __future__ import annotations

import json
from pathlib import Path

from ..models import SessionToken, session_tokens_to_json
from ..telemetry import ATTR_BACKEND, ATTR_PURGED, get_logger, traced
from .base import Verifier, keys_to_purge, parse_token_table

logger = get_logger("file_store")


class FileSessionTokenStore:
    """Session tokens mirrored to a UTF-8 JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._tokens: dict[str, SessionToken] = {}
        self._load()

    def _load(self) -> None:
        try:
            self._ensure_directory()
            if self.path.exists():
                data = json.loads(self.path.read_text(encoding="utf-8"))
                self._tokens = parse_token_table(data)
                logger.info("Loaded session tokens", count=len(self._tokens), path=str(self.path))
            else:
                logger.info("No session token file found, starting fresh", path=str(self.path))
                self._tokens = {}
                self._save()
        except (OSError, ValueError) as e:
            logger.error("Failed to load session tokens", path=str(self.path), error=str(e))
            self._tokens = {}

    def _ensure_directory(self) -> None:
        directory = self.path.parent
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info("Created token storage directory", directory=str(directory))

    def _save(self) -> None:
        try:
            self._ensure_directory()
            data = json.dumps(session_tokens_to_json(self._tokens), indent=2)
            self.path.write_text(data, encoding="utf-8")
            logger.debug("Saved session tokens", count=len(self._tokens), path=str(self.path))
        except OSError as e:
            logger.error("Failed to save session tokens", path=str(self.path), error=str(e))

    def get(self, lookup_key: str) -> SessionToken | None:
        return self._tokens.get(lookup_key)

    def set(self, lookup_key: str, token: SessionToken) -> None:
        self._tokens[lookup_key] = token
        self._save()

    def delete(self, lookup_key: str) -> None:
        self._tokens.pop(lookup_key, None)
        self._save()

    def get_all(self) -> dict[str, SessionToken]:
        return dict(self._tokens)

    @traced(
        "session_store.cleanup_expired",
        attributes={ATTR_BACKEND: "file"},
        result_attribute=ATTR_PURGED,
    )
    def cleanup_expired(self, verifier: Verifier) -> int:
        purge = keys_to_purge(self._tokens, verifier)
        for lookup_key, outcome in purge.items():
            logger.debug("Deleting session token", outcome=outcome)
            self._tokens.pop(lookup_key, None)

        if purge:
            logger.info("Cleaned up session tokens", deleted=len(purge))
            self._save()
        return len(purge)
