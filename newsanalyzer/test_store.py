"""
Tests for HistoryStore against an in-memory collection.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from newsanalyzer.conftest import BrokenCollection
from newsanalyzer.core.store import HistoryStore, StoreError, StoreState
from newsanalyzer.schemas import AnalysisResult

RESULT = AnalysisResult(
    is_fake=False,
    confidence=88,
    features=["Named sources"],
    explanation="Consistent with official statements.",
)


def seed(collection, count):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(count):
        collection.docs.append({
            "_id": ObjectId(),
            "title": f"Article {i}",
            "content": "x" * 60,
            **RESULT.model_dump(by_alias=True),
            "createdAt": base + timedelta(minutes=i),
        })


def test_state_reflects_collection(store):
    assert store.state is StoreState.CONNECTED
    assert HistoryStore().state is StoreState.DISCONNECTED


def test_save_persists_request_and_result(store, collection):
    record_id = asyncio.run(store.save("Title", "Body " * 20, RESULT))
    assert len(collection.docs) == 1
    doc = collection.docs[0]
    assert str(doc["_id"]) == record_id
    assert doc["title"] == "Title"
    assert doc["isFake"] is False
    assert doc["confidence"] == 88
    assert doc["features"] == ["Named sources"]
    assert isinstance(doc["createdAt"], datetime)


def test_list_recent_newest_first_and_limited(store, collection):
    seed(collection, 15)
    records = asyncio.run(store.list_recent(10))
    assert len(records) == 10
    assert [r.title for r in records] == [f"Article {i}" for i in range(14, 4, -1)]
    wire = records[0].to_wire()
    assert set(wire) == {
        "_id", "title", "content", "isFake", "confidence", "features", "explanation", "createdAt",
    }
    assert isinstance(wire["_id"], str)


def test_delete_by_id(store, collection):
    seed(collection, 2)
    target = str(collection.docs[0]["_id"])
    assert asyncio.run(store.delete_by_id(target)) is True
    assert asyncio.run(store.delete_by_id(target)) is False
    assert len(collection.docs) == 1


def test_delete_with_malformed_id_is_not_found(store):
    assert asyncio.run(store.delete_by_id("not-an-object-id")) is False


def test_disconnected_store():
    store = HistoryStore()
    assert asyncio.run(store.list_recent(10)) == []
    with pytest.raises(StoreError):
        asyncio.run(store.save("t", "c" * 60, RESULT))
    with pytest.raises(StoreError):
        asyncio.run(store.delete_by_id(str(ObjectId())))


def test_driver_errors():
    store = HistoryStore(BrokenCollection())
    assert asyncio.run(store.list_recent(10)) == []
    with pytest.raises(StoreError):
        asyncio.run(store.save("t", "c" * 60, RESULT))
    with pytest.raises(StoreError):
        asyncio.run(store.delete_by_id(str(ObjectId())))


def test_connect_without_uri_is_disconnected():
    store = asyncio.run(HistoryStore.connect(None))
    assert store.state is StoreState.DISCONNECTED


def test_connect_with_bad_uri_is_disconnected():
    store = asyncio.run(HistoryStore.connect("not-a-uri"))
    assert store.state is StoreState.DISCONNECTED
    assert asyncio.run(store.list_recent(10)) == []
