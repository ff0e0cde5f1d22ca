"""Shared pytest fixtures: in-memory perfume collection, stub notes client, API client."""

from __future__ import annotations

import copy
import importlib
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.clients.notes_client import NotesFallback, NotesFound, NotesLookup, get_notes_client
from app.config import Settings, get_settings
from app.main import app

perfume_routes = importlib.import_module("app.routers.perfume_router")


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs = sorted(self._docs, key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for d in self._docs:
            yield copy.deepcopy(d)


class FakeCollection:
    """Motor-shaped collection over a dict; supports the calls PerfumeDAL makes."""

    def __init__(self) -> None:
        self.docs: Dict[ObjectId, Dict[str, Any]] = {}
        self.unique_keys: List[str] = []
        self.indexes: List[Dict[str, Any]] = []

    @staticmethod
    def _matches(doc: Dict[str, Any], filt: Optional[Dict[str, Any]]) -> bool:
        return all(doc.get(k) == v for k, v in (filt or {}).items())

    def _first(self, filt: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return next((d for d in self.docs.values() if self._matches(d, filt)), None)

    def find(self, filt: Optional[Dict[str, Any]] = None) -> FakeCursor:
        return FakeCursor([d for d in self.docs.values() if self._matches(d, filt)])

    async def find_one(self, filt: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = self._first(filt)
        return copy.deepcopy(doc) if doc else None

    async def insert_one(self, doc: Dict[str, Any]) -> SimpleNamespace:
        for key in self.unique_keys:
            if self._first({key: doc.get(key)}):
                raise DuplicateKeyError(f"E11000 duplicate key error: {key}")
        doc.setdefault("_id", ObjectId())
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def find_one_and_update(
        self,
        filt: Dict[str, Any],
        update: Dict[str, Any],
        return_document: bool = ReturnDocument.BEFORE,
    ) -> Optional[Dict[str, Any]]:
        doc = self._first(filt)
        if doc is None:
            return None
        before = copy.deepcopy(doc)
        doc.update(update.get("$set", {}))
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before

    async def delete_one(self, filt: Dict[str, Any]) -> SimpleNamespace:
        doc = self._first(filt)
        if doc is None:
            return SimpleNamespace(deleted_count=0)
        del self.docs[doc["_id"]]
        return SimpleNamespace(deleted_count=1)

    async def create_index(self, keys, **kwargs) -> str:
        self.indexes.append({"keys": keys, **kwargs})
        if kwargs.get("unique"):
            self.unique_keys.extend(k for k, _ in keys)
        return kwargs.get("name", "idx")

    def seed(self, **fields: Any) -> ObjectId:
        doc = {"_id": ObjectId(), "priceBDT": None, "topNotes": "", **fields}
        self.docs[doc["_id"]] = doc
        return doc["_id"]


class FakeDatabase:
    def __init__(self, name: str = "perfume_catalog") -> None:
        self.name = name
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


class StubNotesClient:
    """Returns a canned lookup result and records every call."""

    def __init__(self, result: Optional[NotesLookup] = None) -> None:
        self.result: NotesLookup = result or NotesFound("bergamot, neroli")
        self.calls: List[Dict[str, str]] = []

    async def fetch_top_notes(self, name: str, token: str) -> NotesLookup:
        self.calls.append({"name": name, "token": token})
        return self.result

    def fail(self, reason: str = "timeout") -> None:
        self.result = NotesFallback(reason)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        mongodb_uri="mongodb://localhost:27017/perfumes",
        apify_token="apify-test-token",
    )


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def perfumes(fake_db: FakeDatabase, test_settings: Settings) -> FakeCollection:
    return fake_db[test_settings.perfumes_collection]


@pytest.fixture
def notes() -> StubNotesClient:
    return StubNotesClient()


@pytest.fixture
def acquire_calls(monkeypatch: pytest.MonkeyPatch, fake_db: FakeDatabase) -> List[str]:
    """Route the connection manager to the in-memory database; records URIs used."""
    calls: List[str] = []

    async def _acquire(uri: str, *, default_db: str = "perfume_catalog") -> FakeDatabase:
        calls.append(uri)
        return fake_db

    monkeypatch.setattr(perfume_routes, "acquire", _acquire)
    return calls


@pytest.fixture
def api(test_settings: Settings, notes: StubNotesClient, acquire_calls: List[str]) -> TestClient:
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_notes_client] = lambda: notes
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
