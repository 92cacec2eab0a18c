"""Pydantic models for speaker token lifecycle.

Frozen models for the persisted and exchanged token shapes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SessionToken(BaseModel):
    """Signed envelope handed (as an opaque string) to the speaker platform.

    ``signed_payload`` is a JWT holding the service token; ``per_token_key``
    is mixed into the signing secret and must come back at verification.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    signed_payload: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("signedPayload", "signed_payload", "token"),
        serialization_alias="signedPayload",
    )
    per_token_key: str = Field(
        ...,
        validation_alias=AliasChoices("perTokenKey", "per_token_key", "key"),
        serialization_alias="perTokenKey",
    )

    def to_json_dict(self) -> dict[str, str]:
        """Persisted/wire representation with camelCase keys."""
        return self.model_dump(by_alias=True)


class SessionTokenRecord(BaseModel):
    """Unit of persistence in a session token store."""

    model_config = ConfigDict(frozen=True)

    lookup_key: str
    token: SessionToken
    created_at: datetime


class AccessTokenEntry(BaseModel):
    """Cached mapping from a minted access token back to its auth token."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    auth_token: str
    issued_at: datetime


class SessionTokenClaims(BaseModel):
    """Claims carried inside ``SessionToken.signed_payload``."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    service_token: str = Field(..., alias="serviceToken")
    iat: int
    exp: int
    ver: int | None = None

    def to_jwt_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def session_tokens_to_json(tokens: dict[str, SessionToken]) -> dict[str, dict[str, str]]:
    """Serialize a lookup-key table into its JSON file shape."""
    return {lookup_key: token.to_json_dict() for lookup_key, token in tokens.items()}
