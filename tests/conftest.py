import copy
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from wellness.main import app, get_assessment_store, get_progress_updater, get_question_bank
from wellness.persistence import AssessmentStore
from wellness.question_bank import QuestionBank, build_question_bank


@pytest.fixture
def small_bank() -> QuestionBank:
    return build_question_bank(
        {
            "depression": ("I often feel lonely or sad", "I feel like no one understands me"),
            "stress": ("I worry about disappointing others",),
        },
        version="test",
    )


class FakeCursor:
    def __init__(self, documents):
        self.documents = documents

    def sort(self, key, direction):
        self.documents = sorted(self.documents, key=lambda doc: doc.get(key), reverse=direction < 0)
        return self

    def limit(self, count):
        self.documents = self.documents[:count]
        return self

    async def to_list(self, length=None):
        return list(self.documents if length is None else self.documents[:length])


class FakeCollection:
    """Just enough of a Motor collection for the store and aggregator."""

    def __init__(self, documents=None):
        self.documents: List[Dict[str, Any]] = list(documents or [])
        self.indexes = []

    @staticmethod
    def _matches(document, query):
        return all(document.get(key) == value for key, value in query.items())

    async def insert_one(self, document):
        self.documents.append(copy.deepcopy(document))

    async def find_one(self, query, projection=None):
        for document in self.documents:
            if self._matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query, projection=None):
        return FakeCursor([copy.deepcopy(d) for d in self.documents if self._matches(d, query)])

    async def count_documents(self, query):
        return sum(1 for d in self.documents if self._matches(d, query))

    async def create_index(self, keys, **kwargs):
        self.indexes.append((keys, kwargs))

    async def update_one(self, query, update, upsert=False):
        for document in self.documents:
            if self._matches(document, query):
                document.update(update["$set"])
                return
        if upsert:
            self.documents.append({**query, **update["$set"]})


class BrokenCollection(FakeCollection):
    async def insert_one(self, document):
        raise ConnectionError("database unavailable")

    async def find_one(self, query, projection=None):
        raise ConnectionError("database unavailable")


class InMemoryAssessmentStore(AssessmentStore):
    def __init__(self):
        self.saved = []

    async def save(self, payload):
        self.saved.append(payload)

    async def history(self, user_id, limit=50):
        documents = [p.model_dump() for p in self.saved if p.user_id == user_id]
        documents.sort(key=lambda doc: doc["completed_at"], reverse=True)
        return documents[:limit]


class FailingAssessmentStore(InMemoryAssessmentStore):
    async def save(self, payload):
        raise ConnectionError("database unavailable")


@pytest.fixture
def memory_store():
    return InMemoryAssessmentStore()


@pytest.fixture
def progress_calls():
    return []


@pytest.fixture
def client(memory_store, progress_calls):
    async def record_progress(user_id):
        progress_calls.append(user_id)

    app.dependency_overrides[get_assessment_store] = lambda: memory_store
    app.dependency_overrides[get_progress_updater] = lambda: record_progress
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def small_bank_client(client, small_bank):
    app.dependency_overrides[get_question_bank] = lambda: small_bank
    return client


class FakeAdmin:
    def __init__(self, healthy=True):
        self.healthy = healthy
        self.commands = []

    async def command(self, name):
        self.commands.append(name)
        if not self.healthy:
            raise ConnectionError("server selection timeout")
        return {"ok": 1}


class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


class FakeMotorClient:
    def __init__(self, uri=None, healthy=True):
        self.uri = uri
        self.admin = FakeAdmin(healthy)
        self.databases: Dict[str, FakeDatabase] = {}
        self.closed = False

    def __getitem__(self, name):
        return self.databases.setdefault(name, FakeDatabase())

    def close(self):
        self.closed = True


@pytest.fixture
def no_database(monkeypatch):
    from wellness import config, db

    monkeypatch.setattr(config, "MONGODB_URI", "")
    monkeypatch.setattr(db, "_async_client", None)


@pytest.fixture
def fake_motor(monkeypatch):
    from wellness import config, db

    fake = FakeMotorClient(uri="mongodb://fake")
    monkeypatch.setattr(config, "MONGODB_URI", "mongodb://fake")
    monkeypatch.setattr(db, "_async_client", fake)
    return fake
