"""Embedded relational session token store (SQLite via SQLAlchemy).

Runtime storage errors are logged and answered with safe defaults. Only
failing to open the database is fatal, since the store is useless without
a handle.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Self

from sqlalchemy import (
    URL,
    Engine,
    Index,
    Insert,
    Integer,
    Text,
    create_engine,
    delete,
    func,
    insert,
    select,
    text,
)
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..errors import StorageInitError
from ..models import SessionToken, SessionTokenRecord
from ..telemetry import ATTR_BACKEND, ATTR_MIGRATED, ATTR_PURGED, get_logger, traced
from .base import Verifier, keys_to_purge, parse_token_table

logger = get_logger("sqlite_store")


class Base(DeclarativeBase):
    """Base class for token store models."""


class SessionTokenRow(Base):
    """One outstanding session token, keyed by the platform's lookup key."""

    __tablename__ = "session_tokens"

    lookup_key: Mapped[str] = mapped_column(Text, primary_key=True)
    signed_payload: Mapped[str] = mapped_column(Text, nullable=False)
    per_token_key: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("(strftime('%s', 'now'))")
    )

    __table_args__ = (Index("idx_session_tokens_created_at", "created_at"),)


class SQLiteSessionTokenStore:
    """Session tokens in a single SQLite table."""

    def __init__(self, path: str | Path) -> None:
        """Open or create the database at ``path``.

        Raises:
            StorageInitError: If the directory or database cannot be created.
        """
        self.path = Path(path)
        self._engine: Engine | None = None
        try:
            directory = self.path.parent
            if not directory.exists():
                directory.mkdir(parents=True, exist_ok=True)
                logger.info("Created token storage directory", directory=str(directory))

            engine = create_engine(URL.create("sqlite", database=str(self.path)))
            Base.metadata.create_all(engine)
            with engine.connect() as conn:
                count = conn.scalar(select(func.count()).select_from(SessionTokenRow))
        except (OSError, SQLAlchemyError) as e:
            logger.error("Failed to initialize token store", path=str(self.path), error=str(e))
            raise StorageInitError(
                f"Failed to initialize token store at {self.path}", path=str(self.path)
            ) from e

        self._engine = engine
        logger.info("Token store initialized", path=str(self.path), count=count)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _require_engine(self) -> Engine:
        if self._engine is None:
            raise InvalidRequestError("Token store is closed")
        return self._engine

    @staticmethod
    def _upsert(lookup_key: str, token: SessionToken) -> Insert:
        return (
            insert(SessionTokenRow)
            .prefix_with("OR REPLACE")
            .values(
                lookup_key=lookup_key,
                signed_payload=token.signed_payload,
                per_token_key=token.per_token_key,
            )
        )

    def get(self, lookup_key: str) -> SessionToken | None:
        try:
            with self._require_engine().connect() as conn:
                row = conn.execute(
                    select(SessionTokenRow.signed_payload, SessionTokenRow.per_token_key).where(
                        SessionTokenRow.lookup_key == lookup_key
                    )
                ).first()
        except SQLAlchemyError as e:
            logger.error("Failed to get session token", error=str(e))
            return None

        if row is None:
            return None
        return SessionToken(signed_payload=row.signed_payload, per_token_key=row.per_token_key)

    def set(self, lookup_key: str, token: SessionToken) -> None:
        try:
            with self._require_engine().begin() as conn:
                conn.execute(self._upsert(lookup_key, token))
            logger.debug("Saved session token")
        except SQLAlchemyError as e:
            logger.error("Failed to save session token", error=str(e))

    def delete(self, lookup_key: str) -> None:
        try:
            with self._require_engine().begin() as conn:
                conn.execute(delete(SessionTokenRow).where(SessionTokenRow.lookup_key == lookup_key))
            logger.debug("Deleted session token")
        except SQLAlchemyError as e:
            logger.error("Failed to delete session token", error=str(e))

    def get_all(self) -> dict[str, SessionToken]:
        try:
            with self._require_engine().connect() as conn:
                rows = conn.execute(
                    select(
                        SessionTokenRow.lookup_key,
                        SessionTokenRow.signed_payload,
                        SessionTokenRow.per_token_key,
                    )
                ).all()
        except SQLAlchemyError as e:
            logger.error("Failed to get all session tokens", error=str(e))
            return {}

        return {
            row.lookup_key: SessionToken(
                signed_payload=row.signed_payload, per_token_key=row.per_token_key
            )
            for row in rows
        }

    def records(self) -> list[SessionTokenRecord]:
        """All records, oldest first."""
        try:
            with self._require_engine().connect() as conn:
                rows = conn.execute(
                    select(
                        SessionTokenRow.lookup_key,
                        SessionTokenRow.signed_payload,
                        SessionTokenRow.per_token_key,
                        SessionTokenRow.created_at,
                    ).order_by(SessionTokenRow.created_at, SessionTokenRow.lookup_key)
                ).all()
        except SQLAlchemyError as e:
            logger.error("Failed to list session token records", error=str(e))
            return []

        return [
            SessionTokenRecord(
                lookup_key=row.lookup_key,
                token=SessionToken(
                    signed_payload=row.signed_payload, per_token_key=row.per_token_key
                ),
                created_at=datetime.fromtimestamp(int(row.created_at), tz=UTC),
            )
            for row in rows
        ]

    @traced(
        "session_store.cleanup_expired",
        attributes={ATTR_BACKEND: "sqlite"},
        result_attribute=ATTR_PURGED,
    )
    def cleanup_expired(self, verifier: Verifier) -> int:
        purge = keys_to_purge(self.get_all(), verifier)
        if not purge:
            return 0

        try:
            with self._require_engine().begin() as conn:
                conn.execute(
                    delete(SessionTokenRow).where(SessionTokenRow.lookup_key.in_(list(purge)))
                )
        except SQLAlchemyError as e:
            logger.error("Failed to clean up session tokens", error=str(e))
            return 0

        for outcome in purge.values():
            logger.debug("Deleted session token", outcome=outcome)
        logger.info("Cleaned up session tokens", deleted=len(purge))
        return len(purge)

    @traced(
        "session_store.migrate_from_json",
        attributes={ATTR_BACKEND: "sqlite"},
        result_attribute=ATTR_MIGRATED,
    )
    def migrate_from_json(self, json_path: str | Path) -> int:
        """Import a JSON token file written by the file store.

        All entries are written in one transaction. Only after that succeeds
        is the source renamed to ``<json_path>.bak``, so the import is not
        silently repeated.

        Returns:
            Number of tokens migrated; 0 if the file does not exist or the
            migration failed.
        """
        source = Path(json_path)
        if not source.exists():
            logger.info("No JSON token file found, skipping migration", path=str(source))
            return 0

        try:
            tokens = parse_token_table(json.loads(source.read_text(encoding="utf-8")))

            with self._require_engine().begin() as conn:
                for lookup_key, token in tokens.items():
                    conn.execute(self._upsert(lookup_key, token))
            logger.info("Migrated session tokens", count=len(tokens), path=str(source))

            backup = source.with_name(f"{source.name}.bak")
            source.replace(backup)
            logger.info("Backed up original JSON token file", backup=str(backup))
        except (OSError, ValueError, SQLAlchemyError) as e:
            logger.error("Failed to migrate session tokens", path=str(source), error=str(e))
            return 0

        return len(tokens)

    def close(self) -> None:
        """Release the database handle. Safe to call more than once."""
        if self._engine is None:
            return
        try:
            self._engine.dispose()
            logger.info("Token store connection closed")
        except SQLAlchemyError as e:
            logger.error("Failed to close token store connection", error=str(e))
        finally:
            self._engine = None
