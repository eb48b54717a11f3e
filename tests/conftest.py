import os

import mongomock
import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("REMINDER_SCHEDULER_ENABLED", "false")

from app.db import database  # noqa: E402
from app.main import app  # noqa: E402

USER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def mongo_db(monkeypatch):
    """Swap the Mongo database for an in-memory one."""
    db = mongomock.MongoClient()["memory_journal_test"]
    monkeypatch.setattr(database, "_db", db)
    return db


@pytest.fixture
def client(mongo_db):
    yield TestClient(app, headers={"X-User-ID": USER_ID})
    app.dependency_overrides.clear()


@pytest.fixture
def other_client(mongo_db):
    return TestClient(app, headers={"X-User-ID": OTHER_USER_ID})
