"""
Pytest fixtures: in-memory Mongo collection and a scripted chat model.
"""

from __future__ import annotations

import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from langchain_core.language_models import FakeListChatModel
from pymongo.errors import ServerSelectionTimeoutError

from newsanalyzer.analysis.news_analyzer import NewsAnalyzer
from newsanalyzer.core.config import Settings
from newsanalyzer.core.llm_chains import ChatModelClient
from newsanalyzer.core.store import HistoryStore
from newsanalyzer.main import create_app

FILLER_CONTENT = "The bakery on Main Street was recognised by the city council."

GENUINE_REPLY = (
    '{"isFake": false, "confidence": 92, "features": ["Verified by two sources"], '
    '"explanation": "Claims match public records."}'
)


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction):
        self._docs = sorted(self._docs, key=lambda d: d[key], reverse=direction < 0)
        return self

    def limit(self, n):
        self._docs = self._docs[:n]
        return self

    async def to_list(self, length=None):
        return [copy.deepcopy(d) for d in self._docs[:length]]


class FakeCollection:
    """The slice of pymongo's async collection API that HistoryStore uses."""

    def __init__(self):
        self.docs = []

    async def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self):
        return FakeCursor(list(self.docs))

    async def find_one_and_delete(self, query):
        for i, doc in enumerate(self.docs):
            if doc["_id"] == query["_id"]:
                return self.docs.pop(i)
        return None


class BrokenCollection:
    async def insert_one(self, doc):
        raise ServerSelectionTimeoutError("No servers available")

    def find(self):
        raise ServerSelectionTimeoutError("No servers available")

    async def find_one_and_delete(self, query):
        raise ServerSelectionTimeoutError("No servers available")


class UnreachableLLM:
    async def ainvoke(self, prompt):
        raise ConnectionError("connection reset by peer")


def make_analyzer(*replies: str) -> NewsAnalyzer:
    return NewsAnalyzer(ChatModelClient(FakeListChatModel(responses=list(replies))))


@pytest.fixture
def settings():
    return Settings(openai_api_key="test-key")


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return HistoryStore(collection)


@pytest.fixture
def make_client(settings, store):
    """Build a TestClient around a given analyzer (and optionally a different store)."""

    def _make(analyzer: NewsAnalyzer, history_store: HistoryStore = None) -> TestClient:
        app = create_app(settings, analyzer=analyzer, store=history_store or store)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client(make_analyzer(GENUINE_REPLY))
