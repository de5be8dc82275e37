import asyncio

import pytest

from tests.conftest import FakeMotorClient
from wellness import config, db


def test_missing_uri_raises_on_first_use(no_database):
    with pytest.raises(ValueError, match="MONGODB_URI"):
        db.get_async_client()


def test_client_is_created_once_and_closed(monkeypatch):
    created = []

    def make_client(uri):
        client = FakeMotorClient(uri)
        created.append(client)
        return client

    monkeypatch.setattr(config, "MONGODB_URI", "mongodb://example")
    monkeypatch.setattr(db, "_async_client", None)
    monkeypatch.setattr(db, "AsyncIOMotorClient", make_client)

    first = db.get_async_client()
    assert db.get_async_client() is first
    assert [c.uri for c in created] == ["mongodb://example"]

    db.close_client()
    assert first.closed
    assert db._async_client is None


def test_collections_come_from_configured_database(fake_motor, monkeypatch):
    monkeypatch.setattr(config, "DB_NAME", "wellness_test")
    assessments = db.async_assessments()
    assert fake_motor["wellness_test"]["assessment_responses"] is assessments


def test_create_indexes(fake_motor):
    asyncio.run(db.create_indexes())

    database = fake_motor[config.DB_NAME]
    assert len(database["assessment_responses"].indexes) == 2
    assert database["demographics"].indexes == [([("user_id", 1)], {})]
    progress_indexes = database["student_progress"].indexes
    assert ([("user_id", 1)], {"unique": True}) in progress_indexes


def test_health_check_healthy(fake_motor):
    database = fake_motor[config.DB_NAME]
    database["assessment_responses"].documents.extend([{"user_id": "a"}, {"user_id": "b"}])

    report = asyncio.run(db.check_database_health())

    assert report["status"] == "healthy"
    assert report["database"] == config.DB_NAME
    assert report["collections"]["assessment_responses"] == {"count": 2}
    assert report["collections"]["student_progress"] == {"count": 0}
    assert fake_motor.admin.commands == ["ping"]


def test_health_check_unhealthy_when_ping_fails(monkeypatch):
    monkeypatch.setattr(config, "MONGODB_URI", "mongodb://fake")
    monkeypatch.setattr(db, "_async_client", FakeMotorClient(healthy=False))

    report = asyncio.run(db.check_database_health())

    assert report["status"] == "unhealthy"
    assert "server selection timeout" in report["error"]


def test_health_check_unhealthy_without_uri(no_database):
    report = asyncio.run(db.check_database_health())
    assert report == {"status": "unhealthy", "error": "MONGODB_URI is missing in .env"}
