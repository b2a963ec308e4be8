# PUBLIC_INTERFACE
"""
Transaction endpoints.

POST /tx/encrypt       - encrypt a payload and store it
GET  /tx/{id}          - fetch the stored token (no decryption)
POST /tx/{id}/decrypt  - decrypt after checking the partyId against the record
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from ...core.errors import ErrorResponse, outcome_error
from ...core.transaction_store import TransactionStore
from ..models import DecryptRequest, DecryptResponse, EncryptRequest, EncryptResponse, FetchResponse

router = APIRouter(prefix="/tx", tags=["transactions"])


# PUBLIC_INTERFACE
def store_dep(request: Request) -> TransactionStore:
    """FastAPI dependency returning the store owned by the running app."""
    return request.app.state.transaction_store


@router.post(
    "/encrypt",
    response_model=EncryptResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Encrypt and store a payload",
    responses={400: {"model": ErrorResponse, "description": "Invalid partyId or payload"}},
)
def encrypt_transaction(body: EncryptRequest, store: TransactionStore = Depends(store_dep)):
    """Encrypt the payload under a key derived from partyId and store it under a new id."""
    created = store.create(body.partyId, body.payload)
    if not created.ok:
        raise outcome_error(created)
    record = created.value
    return EncryptResponse(id=record.id, encrypted=record.token)


@router.get(
    "/{tx_id}",
    response_model=FetchResponse,
    summary="Fetch an encrypted transaction",
    responses={404: {"model": ErrorResponse, "description": "Unknown transaction id"}},
)
def fetch_transaction(tx_id: str, store: TransactionStore = Depends(store_dep)):
    """Return the stored token and party label without decrypting."""
    fetched = store.fetch_opaque(tx_id)
    if not fetched.ok:
        raise outcome_error(fetched)
    opaque = fetched.value
    return FetchResponse(id=opaque.id, partyId=opaque.party_id, encrypted=opaque.token)


@router.post(
    "/{tx_id}/decrypt",
    response_model=DecryptResponse,
    summary="Decrypt a stored transaction",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid partyId or decryption failure"},
        403: {"model": ErrorResponse, "description": "partyId does not match the transaction"},
        404: {"model": ErrorResponse, "description": "Unknown transaction id"},
    },
)
def decrypt_transaction(tx_id: str, body: DecryptRequest, store: TransactionStore = Depends(store_dep)):
    """Check partyId against the stored label, then decrypt and return the payload."""
    opened = store.decrypt(tx_id, body.partyId)
    if not opened.ok:
        raise outcome_error(opened)
    return DecryptResponse(id=tx_id, payload=opened.value)
