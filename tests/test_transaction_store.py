# PUBLIC_INTERFACE
"""
Unit tests for the in-memory transaction store and its authorization gate.
"""
import threading

import pytest
from pydantic import ValidationError

from tx_vault.core.outcomes import Failure
from tx_vault.core.transaction_store import InMemoryTransactionStore
from tx_vault.security.crypto import RandomSourceError, TokenCodec
from conftest import FixedRandom

PAYLOAD = {"amount": 100, "currency": "AED"}


class SpyCodec(TokenCodec):
    """Codec that records decrypt calls."""

    def __init__(self):
        super().__init__()
        self.decrypt_calls = 0

    def decrypt(self, token, party_id):
        self.decrypt_calls += 1
        return super().decrypt(token, party_id)


def test_end_to_end_scenario(store):
    created = store.create("party_123", PAYLOAD)
    assert created.ok
    tx_id, token = created.value.id, created.value.token

    fetched = store.fetch_opaque(tx_id)
    assert fetched.ok
    assert (fetched.value.id, fetched.value.party_id, fetched.value.token) == (tx_id, "party_123", token)

    assert store.decrypt(tx_id, "party_123").value == PAYLOAD
    assert store.decrypt(tx_id, "party_999").failure is Failure.AUTHORIZATION_FAILURE
    assert store.decrypt("nonexistent-id", "party_123").failure is Failure.NOT_FOUND


def test_ids_are_unique_uuid_strings(store):
    ids = {store.create("p", {"n": i}).value.id for i in range(50)}
    assert len(ids) == 50
    assert all(len(i) == 36 for i in ids)


def test_id_collision_is_regenerated():
    ids = iter(["dup", "dup", "fresh"])
    store = InMemoryTransactionStore(id_factory=lambda: next(ids))
    assert store.create("p", PAYLOAD).value.id == "dup"
    assert store.create("p", PAYLOAD).value.id == "fresh"
    assert len(store) == 2


def test_get_record_returns_full_record(store):
    record = store.create("party_123", PAYLOAD).value
    found = store.get_record(record.id)
    assert found.value == record
    assert found.value.created_at is not None


def test_records_are_immutable(store):
    record = store.create("party_123", PAYLOAD).value
    with pytest.raises(ValidationError):
        record.party_id = "someone_else"


def test_authorization_checked_before_decryption():
    codec = SpyCodec()
    store = InMemoryTransactionStore(codec=codec)
    tx_id = store.create("party_123", PAYLOAD).value.id

    denied = store.decrypt(tx_id, "party_999")
    assert denied.failure is Failure.AUTHORIZATION_FAILURE
    assert codec.decrypt_calls == 0

    assert store.decrypt(tx_id, "party_123").ok
    assert codec.decrypt_calls == 1


def test_label_comparison_is_exact(store):
    tx_id = store.create("party_123", PAYLOAD).value.id
    for other in ("Party_123", "party_123 ", " party_123", "party_12"):
        assert store.decrypt(tx_id, other).failure is Failure.AUTHORIZATION_FAILURE


def test_codec_failure_surfaces_as_decryption_failure():
    store = InMemoryTransactionStore()
    tx_id = store.create("party_123", PAYLOAD).value.id
    # swap in a token for the same label encrypted under another key
    forged = store.get_record(tx_id).value.model_copy(update={"token": TokenCodec().encrypt(PAYLOAD, "other")})
    store._records[tx_id] = forged

    opened = store.decrypt(tx_id, "party_123")
    assert opened.failure is Failure.DECRYPTION_FAILURE
    assert opened.cause is Failure.AUTHENTICATION_FAILURE


def test_malformed_stored_token_surfaces_as_decryption_failure(store):
    tx_id = store.create("party_123", PAYLOAD).value.id
    store._records[tx_id] = store.get_record(tx_id).value.model_copy(update={"token": "!!"})
    opened = store.decrypt(tx_id, "party_123")
    assert opened.failure is Failure.DECRYPTION_FAILURE
    assert opened.cause is Failure.MALFORMED_TOKEN


def test_decrypt_is_repeatable(store):
    tx_id = store.create("party_123", PAYLOAD).value.id
    for _ in range(3):
        assert store.decrypt(tx_id, "party_123").value == PAYLOAD


def test_not_found_does_not_mutate(store):
    store.create("party_123", PAYLOAD)
    before = dict(store._records)
    assert store.get_record("missing").failure is Failure.NOT_FOUND
    assert store.fetch_opaque("missing").failure is Failure.NOT_FOUND
    assert store.decrypt("missing", "party_123").failure is Failure.NOT_FOUND
    assert store._records == before


@pytest.mark.parametrize(
    "party_id, payload",
    [(None, PAYLOAD), (123, PAYLOAD), ("p", None), ("p", [1, 2]), ("p", "text"), ("p", {"x": object()})],
)
def test_create_rejects_invalid_input(store, party_id, payload):
    created = store.create(party_id, payload)
    assert created.failure is Failure.INPUT_VALIDATION
    assert len(store) == 0


def test_decrypt_rejects_non_string_party(store):
    tx_id = store.create("party_123", PAYLOAD).value.id
    assert store.decrypt(tx_id, None).failure is Failure.INPUT_VALIDATION


def test_empty_party_id_is_accepted_by_the_store(store):
    tx_id = store.create("", PAYLOAD).value.id
    assert store.decrypt(tx_id, "").value == PAYLOAD


def test_failures_do_not_affect_other_records(store):
    a = store.create("a", {"n": 1}).value.id
    b = store.create("b", {"n": 2}).value.id
    store.decrypt(a, "b")
    store.decrypt("missing", "a")
    assert store.decrypt(a, "a").value == {"n": 1}
    assert store.decrypt(b, "b").value == {"n": 2}


def test_concurrent_creates_and_reads(store):
    results = []
    lock = threading.Lock()

    def worker(n):
        party = f"party_{n}"
        tx_id = store.create(party, {"n": n}).value.id
        opened = store.decrypt(tx_id, party)
        with lock:
            results.append((tx_id, opened.value))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(32)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 32
    assert len({tx_id for tx_id, _ in results}) == 32
    assert sorted(v["n"] for _, v in results) == list(range(32))


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_create_rejects_non_finite_numbers(store, value):
    created = store.create("p", {"x": value})
    assert created.failure is Failure.INPUT_VALIDATION
    assert len(store) == 0


@pytest.mark.parametrize("tx_id", [None, 123, ["x"]])
def test_reads_reject_non_string_ids(store, tx_id):
    store.create("party_123", PAYLOAD)
    assert store.get_record(tx_id).failure is Failure.INPUT_VALIDATION
    assert store.fetch_opaque(tx_id).failure is Failure.INPUT_VALIDATION
    assert store.decrypt(tx_id, "party_123").failure is Failure.INPUT_VALIDATION
    assert len(store) == 1


def test_broken_random_source_is_not_an_input_error():
    store = InMemoryTransactionStore(codec=TokenCodec(random_bytes=FixedRandom(b"short")))
    with pytest.raises(RandomSourceError):
        store.create("p", PAYLOAD)
    assert len(store) == 0
