"""
Pytest configuration and fixtures
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import pytest
import pytest_asyncio
import bson
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError, OperationFailure

from recordstore.main import app
from recordstore.db.mongo import get_store
from recordstore.repos.record_store import RecordStore


class FakeCollection:
    """In-memory stand-in for the part of a Motor collection the store uses"""

    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self.indexes: dict[str, dict[str, Any]] = {}
        self.calls: list[str] = []
        # Set to an exception instance to make every call fail with it
        self.error: Optional[Exception] = None

    def _check(self, call: str) -> None:
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    @staticmethod
    def _matches(doc: dict[str, Any], filter: dict[str, Any]) -> bool:
        return all(doc.get(k) == v for k, v in filter.items())

    def _check_unique(self, doc: dict[str, Any]) -> None:
        for name, index in self.indexes.items():
            if not index["unique"]:
                continue
            field = index["key"]
            for other in self.docs:
                if other["_id"] != doc["_id"] and other.get(field) == doc.get(field):
                    raise DuplicateKeyError(f"E11000 duplicate key error index: {name}")

    async def create_index(self, keys: str, name: Optional[str] = None, unique: bool = False) -> str:
        name = name or f"{keys}_1"
        self.indexes[name] = {"key": keys, "unique": unique}
        return name

    async def find_one(self, filter: dict[str, Any], hint: Optional[str] = None) -> Optional[dict[str, Any]]:
        self._check("find_one")
        bson.encode(filter)
        if hint is not None and hint not in self.indexes:
            raise OperationFailure("hint provided does not correspond to an existing index")
        found = next((dict(doc) for doc in self.docs if self._matches(doc, filter)), None)
        # Lets another task run between a lookup and the write that follows it
        await asyncio.sleep(0)
        return found

    async def find_one_and_replace(
        self,
        filter: dict[str, Any],
        replacement: dict[str, Any],
        upsert: bool = False,
        return_document: bool = False,
    ) -> Optional[dict[str, Any]]:
        self._check("find_one_and_replace")
        bson.encode(filter)
        bson.encode(replacement)
        for i, doc in enumerate(self.docs):
            if self._matches(doc, filter):
                new_doc = {"_id": doc["_id"], **replacement}
                self._check_unique(new_doc)
                self.docs[i] = new_doc
                return dict(new_doc) if return_document else dict(doc)
        if not upsert:
            return None
        new_doc = {"_id": ObjectId(), **replacement}
        self._check_unique(new_doc)
        self.docs.append(new_doc)
        return dict(new_doc) if return_document else None


class FakeDatabase:
    """In-memory stand-in for a Motor database"""

    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}
        self.ping_error: Optional[Exception] = None

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]

    async def command(self, name: str) -> dict[str, Any]:
        if self.ping_error is not None:
            raise self.ping_error
        return {"ok": 1.0}


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest_asyncio.fixture
async def store(fake_db: FakeDatabase) -> RecordStore:
    """Record store over the in-memory database, indexes created"""
    store = RecordStore(fake_db)  # type: ignore[arg-type]
    await store.ensure_indexes()
    return store


@pytest.fixture
def client(fake_db: FakeDatabase):
    """Create a test client for the FastAPI application"""
    store = RecordStore(fake_db)  # type: ignore[arg-type]
    asyncio.run(store.ensure_indexes())
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
