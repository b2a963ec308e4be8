import pytest
from fastapi.testclient import TestClient

from tx_vault.app import create_app
from tx_vault.core.transaction_store import InMemoryTransactionStore
from tx_vault.security.crypto import TokenCodec


class FixedRandom:
    """Deterministic random source: returns the queued byte strings in order."""

    def __init__(self, *chunks: bytes):
        self.chunks = list(chunks)
        self.calls = []

    def __call__(self, n: int) -> bytes:
        self.calls.append(n)
        return self.chunks.pop(0)


@pytest.fixture
def codec():
    return TokenCodec()


@pytest.fixture
def store():
    return InMemoryTransactionStore()


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store)) as c:
        yield c
