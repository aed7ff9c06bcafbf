import pytest
from pymongo.errors import ServerSelectionTimeoutError

from app.core.exceptions import StoreUnavailableError
from app.flow.states import PhoneState, SubscriptionRecord
from app.services.subscription_store import (
    PENDING_MARKER,
    SubscriptionStore,
    decode_phone_number,
    encode_phone_number,
)


class FakeCollection:
    """Just enough of a Motor collection for SubscriptionStore."""

    def __init__(self):
        self.documents = {}
        self.broken = False

    def _check(self):
        if self.broken:
            raise ServerSelectionTimeoutError("no servers")

    async def find_one(self, query):
        self._check()
        return self.documents.get(query["user_id"])

    async def replace_one(self, query, document, upsert=False):
        self._check()
        assert upsert
        self.documents[query["user_id"]] = dict(document)

    async def delete_one(self, query):
        self._check()
        self.documents.pop(query["user_id"], None)


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return SubscriptionStore(collection)


def test_pending_is_stored_with_marker(store, collection, run):
    run(store.put(SubscriptionRecord.pending("U", "+15551234567")))

    assert collection.documents["U"]["phone_number"] == "pending:+15551234567"
    assert "updated_at" in collection.documents["U"]


def test_confirmed_is_stored_bare(store, collection, run):
    run(store.put(SubscriptionRecord.confirmed("U", "+15551234567")))

    assert collection.documents["U"]["phone_number"] == "+15551234567"


def test_get_decodes_marker(store, collection, run):
    collection.documents["U"] = {"user_id": "U", "phone_number": "pending:+15551234567"}

    record = run(store.get("U"))

    assert record == SubscriptionRecord.pending("U", "+15551234567")


def test_get_missing_user_returns_none(store, run):
    assert run(store.get("nobody")) is None


def test_put_overwrites_single_record(store, collection, run):
    run(store.put(SubscriptionRecord.confirmed("U", "+15550000000")))
    run(store.put(SubscriptionRecord.pending("U", "+15551234567")))

    assert len(collection.documents) == 1
    assert run(store.get("U")).state == PhoneState.PENDING


def test_delete_removes_record(store, collection, run):
    run(store.put(SubscriptionRecord.confirmed("U", "+15551234567")))
    run(store.delete("U"))

    assert run(store.get("U")) is None


@pytest.mark.parametrize("operation", ["get", "put", "delete"])
def test_driver_errors_become_store_unavailable(store, collection, run, operation):
    collection.broken = True
    calls = {
        "get": lambda: store.get("U"),
        "put": lambda: store.put(SubscriptionRecord.pending("U", "+1")),
        "delete": lambda: store.delete("U"),
    }

    with pytest.raises(StoreUnavailableError):
        run(calls[operation]())


def test_unset_records_cannot_be_encoded():
    with pytest.raises(ValueError):
        encode_phone_number(SubscriptionRecord.unset("U"))


def test_empty_stored_value_decodes_to_none():
    assert decode_phone_number("U", "") is None
    assert decode_phone_number("U", None) is None
    assert decode_phone_number("U", f"{PENDING_MARKER}+1").state == PhoneState.PENDING


def test_confirmed_number_with_marker_is_rejected():
    record = SubscriptionRecord.confirmed("U", f"{PENDING_MARKER}+1")

    with pytest.raises(ValueError):
        encode_phone_number(record)


def test_pending_number_with_marker_reads_back_pending(store, run):
    record = SubscriptionRecord.pending("U", f"{PENDING_MARKER}+1")

    run(store.put(record))

    assert run(store.get("U")) == record
