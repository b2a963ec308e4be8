# PUBLIC_INTERFACE
"""
Request/response models for the transaction endpoints.

Field names keep the camelCase wire names used by existing clients.
"""
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field


# PUBLIC_INTERFACE
class EncryptRequest(BaseModel):
    """Body of POST /tx/encrypt."""
    partyId: str = Field(..., min_length=1, description="Party identifier; its SHA-256 is the encryption key")
    payload: Dict[str, Any] = Field(..., description="JSON object to encrypt")


# PUBLIC_INTERFACE
class EncryptResponse(BaseModel):
    """Created transaction id and its token."""
    id: str = Field(..., description="Transaction id")
    encrypted: str = Field(..., description="base64 token: nonce(12) | tag(16) | ciphertext")


# PUBLIC_INTERFACE
class FetchResponse(BaseModel):
    """Stored transaction without decryption."""
    id: str
    partyId: str = Field(..., description="Party label the token was encrypted for")
    encrypted: str


# PUBLIC_INTERFACE
class DecryptRequest(BaseModel):
    """Body of POST /tx/{id}/decrypt."""
    partyId: str = Field(..., min_length=1, description="Must equal the partyId used at creation")


# PUBLIC_INTERFACE
class DecryptResponse(BaseModel):
    """Decrypted payload."""
    id: str
    payload: Dict[str, Any]


# PUBLIC_INTERFACE
class HealthResponse(BaseModel):
    """Response model for health checks."""
    status: str = Field(..., description="Overall service status string, e.g. 'ok' or 'error'.")
