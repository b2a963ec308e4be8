# PUBLIC_INTERFACE
"""
AES-256-GCM token codec keyed by a party identifier.

The key is SHA-256 of the identifier, so the identifier itself is the
credential. A token is the base64 text of nonce (12 B) | tag (16 B) | ciphertext.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import json
import secrets
from typing import Any, Callable, Dict, Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..core.logging import get_logger
from ..core.outcomes import Failure, Outcome

logger = get_logger(__name__)

NONCE_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32


class RandomSourceError(RuntimeError):
    """The injected random source returned the wrong number of bytes."""


class MalformedTokenError(ValueError):
    """Token text is not base64 or too short to hold a nonce and tag."""


# PUBLIC_INTERFACE
def derive_key(party_id: str) -> bytes:
    """Derive the 32-byte AES-256 key for a party identifier (any string, including empty)."""
    return hashlib.sha256(party_id.encode("utf-8")).digest()


# PUBLIC_INTERFACE
def pack_token(nonce: bytes, tag: bytes, ciphertext: bytes) -> str:
    """Pack nonce|tag|ciphertext and encode as standard base64 text."""
    return base64.b64encode(nonce + tag + ciphertext).decode("ascii")


# PUBLIC_INTERFACE
def unpack_token(token: str) -> Tuple[bytes, bytes, bytes]:
    """Split a token into (nonce, tag, ciphertext). Raises MalformedTokenError."""
    try:
        packed = base64.b64decode(token.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, AttributeError) as exc:
        raise MalformedTokenError("Token is not valid base64") from exc
    if len(packed) < NONCE_LENGTH + TAG_LENGTH:
        raise MalformedTokenError("Token is too short")
    nonce = packed[:NONCE_LENGTH]
    tag = packed[NONCE_LENGTH:NONCE_LENGTH + TAG_LENGTH]
    return nonce, tag, packed[NONCE_LENGTH + TAG_LENGTH:]


def serialize_payload(payload: Any) -> bytes:
    # compact separators match the JSON.stringify output of existing tokens
    # NaN and Infinity are not JSON; JSON.parse on the other side rejects them
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


# PUBLIC_INTERFACE
class TokenCodec:
    """Encrypt JSON payloads into tokens and back, keyed by party identifier.

    The random source is injectable so tests can pin the nonce.
    """

    def __init__(self, random_bytes: Callable[[int], bytes] = secrets.token_bytes) -> None:
        self._random_bytes = random_bytes

    # PUBLIC_INTERFACE
    def encrypt(self, payload: Dict[str, Any], party_id: str) -> str:
        """Encrypt a JSON-serializable payload; returns the base64 token.

        Raises TypeError/ValueError when the payload is not JSON-serializable (NaN and
        Infinity included) and RandomSourceError when the random source misbehaves.
        """
        key = derive_key(party_id)
        nonce = self._random_bytes(NONCE_LENGTH)
        if len(nonce) != NONCE_LENGTH:
            raise RandomSourceError(f"Random source returned {len(nonce)} bytes, expected {NONCE_LENGTH}")
        plaintext = serialize_payload(payload)
        # AESGCM returns ciphertext with the tag appended
        sealed = AESGCM(key).encrypt(nonce, plaintext, None)
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return pack_token(nonce, tag, ciphertext)

    # PUBLIC_INTERFACE
    def decrypt(self, token: str, party_id: str) -> Outcome[Dict[str, Any]]:
        """Decrypt a token produced by encrypt with the same party identifier."""
        key = derive_key(party_id)
        try:
            nonce, tag, ciphertext = unpack_token(token)
        except MalformedTokenError as exc:
            return Outcome.fail(Failure.MALFORMED_TOKEN, str(exc))

        try:
            plaintext = AESGCM(key).decrypt(nonce, ciphertext + tag, None)
        except InvalidTag:
            # wrong identifier and tampered bytes must look the same
            return Outcome.fail(Failure.AUTHENTICATION_FAILURE, "Token authentication failed")

        try:
            payload = json.loads(plaintext.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.error("Authenticated token did not contain JSON", extra={"plaintext_length": len(plaintext)})
            return Outcome.fail(Failure.PAYLOAD_CORRUPT, "Decrypted payload is not valid JSON")
        return Outcome.success(payload)
