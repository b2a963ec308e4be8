from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class TransactionRecord(BaseModel):
    """A stored transaction. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Random transaction id (UUID4)")
    party_id: str = Field(..., description="Party identifier label the token was encrypted for")
    token: str = Field(..., description="base64 nonce|tag|ciphertext")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class OpaqueTransaction(BaseModel):
    """What fetch_opaque exposes: the label and the still-encrypted token."""

    model_config = ConfigDict(frozen=True)

    id: str
    party_id: str
    token: str
