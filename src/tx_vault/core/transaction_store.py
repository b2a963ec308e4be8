# PUBLIC_INTERFACE
"""
Thread-safe in-memory transaction store.

- Payloads are encrypted with TokenCodec before they are stored.
- Records are immutable; inserts take a lock, lookups do not.
- No persistence; ephemeral only.
"""
from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from ..security.crypto import TokenCodec
from .logging import get_logger
from .models import OpaqueTransaction, TransactionRecord
from .observability import increment_metric, mask_secret_value
from .outcomes import Failure, Outcome

logger = get_logger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


# PUBLIC_INTERFACE
class TransactionStore(ABC):
    """Abstract transaction store. Implementations own the id -> record mapping."""

    def __init__(self, codec: Optional[TokenCodec] = None):
        self.codec = codec or TokenCodec()

    @abstractmethod
    def _insert(self, party_id: str, token: str) -> TransactionRecord:
        """Allocate a fresh id, store the record and return it."""
        raise NotImplementedError

    @abstractmethod
    def _lookup(self, tx_id: str) -> Optional[TransactionRecord]:
        """Exact-match lookup, None when absent."""
        raise NotImplementedError

    # PUBLIC_INTERFACE
    def create(self, party_id: str, payload: Dict[str, Any]) -> Outcome[TransactionRecord]:
        """Encrypt payload for party_id and store it under a new id."""
        if not isinstance(party_id, str):
            return Outcome.fail(Failure.INPUT_VALIDATION, "partyId must be a string")
        if not isinstance(payload, dict):
            return Outcome.fail(Failure.INPUT_VALIDATION, "payload must be a JSON object")
        try:
            token = self.codec.encrypt(payload, party_id)
        except (TypeError, ValueError) as exc:
            return Outcome.fail(Failure.INPUT_VALIDATION, f"payload is not JSON-serializable: {exc}")

        record = self._insert(party_id, token)
        increment_metric("transactions_created_total")
        logger.info("transaction_created", extra={"tx_id": record.id, "party": mask_secret_value(party_id)})
        return Outcome.success(record)

    # PUBLIC_INTERFACE
    def get_record(self, tx_id: str) -> Outcome[TransactionRecord]:
        """Return the full record for tx_id."""
        if not isinstance(tx_id, str):
            return Outcome.fail(Failure.INPUT_VALIDATION, "transaction id must be a string")
        record = self._lookup(tx_id)
        if record is None:
            return Outcome.fail(Failure.NOT_FOUND, f"Transaction '{tx_id}' not found")
        return Outcome.success(record)

    # PUBLIC_INTERFACE
    def fetch_opaque(self, tx_id: str) -> Outcome[OpaqueTransaction]:
        """Return the stored token and its party label without decrypting."""
        found = self.get_record(tx_id)
        if not found.ok:
            return Outcome.fail(found.failure, found.message)  # type: ignore[arg-type]
        record = found.value
        return Outcome.success(OpaqueTransaction(id=record.id, party_id=record.party_id, token=record.token))

    # PUBLIC_INTERFACE
    def decrypt(self, tx_id: str, party_id: str) -> Outcome[Dict[str, Any]]:
        """Decrypt the payload of tx_id after checking party_id against the stored label.

        The label check runs before any cryptography; codec failures come back
        as DECRYPTION_FAILURE with the codec's failure in ``cause``.
        """
        if not isinstance(party_id, str):
            return Outcome.fail(Failure.INPUT_VALIDATION, "partyId must be a string")
        found = self.get_record(tx_id)
        if not found.ok:
            return Outcome.fail(found.failure, found.message)  # type: ignore[arg-type]
        record = found.value

        if party_id != record.party_id:
            increment_metric("authorization_failures_total")
            logger.warning("decrypt_forbidden", extra={"tx_id": tx_id, "party": mask_secret_value(party_id)})
            return Outcome.fail(Failure.AUTHORIZATION_FAILURE, "partyId does not match this transaction")

        opened = self.codec.decrypt(record.token, party_id)
        if not opened.ok:
            increment_metric("decrypt_failures_total")
            logger.warning("decrypt_failed", extra={"tx_id": tx_id, "reason": opened.failure.value})
            return Outcome.fail(Failure.DECRYPTION_FAILURE, "Unable to decrypt transaction", cause=opened.failure)

        increment_metric("decrypt_success_total")
        return Outcome.success(opened.value)


# PUBLIC_INTERFACE
class InMemoryTransactionStore(TransactionStore):
    """Process-local store backed by a dict."""

    def __init__(self, codec: Optional[TokenCodec] = None, id_factory: Callable[[], str] = _new_id):
        super().__init__(codec)
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._records: Dict[str, TransactionRecord] = {}

    def _insert(self, party_id: str, token: str) -> TransactionRecord:
        with self._lock:
            tx_id = self._id_factory()
            while tx_id in self._records:
                tx_id = self._id_factory()
            record = TransactionRecord(id=tx_id, party_id=party_id, token=token)
            self._records[tx_id] = record
        return record

    def _lookup(self, tx_id: str) -> Optional[TransactionRecord]:
        # single dict.get is atomic; records are never mutated after insert
        return self._records.get(tx_id)

    def __len__(self) -> int:
        return len(self._records)
