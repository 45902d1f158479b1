import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from gottago.deps import get_db
from gottago.main import app
from gottago.security.auth import create_access_token
from gottago.ws.manager import manager


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("MONGO_URI", raising=False)
    monkeypatch.delenv("MAPBOX_TOKEN", raising=False)
    yield
    app.dependency_overrides.clear()
    manager.sessions.clear()


@pytest.fixture
def mock_db():
    return AsyncMongoMockClient()["gottago_test"]


@pytest.fixture
def client(mock_db):
    app.dependency_overrides[get_db] = lambda: mock_db
    return TestClient(app)


@pytest.fixture
def offline_client():
    """Client with no database configured."""
    app.dependency_overrides[get_db] = lambda: None
    return TestClient(app)


@pytest.fixture
def make_user(mock_db):
    def _make(email="user@example.com", role="user"):
        doc = {"email": email, "hashed_password": "x", "full_name": email.split("@")[0], "role": role}
        result = asyncio.run(mock_db.users.insert_one(doc))
        token = create_access_token(subject=email)
        return str(result.inserted_id), {"Authorization": f"Bearer {token}"}

    return _make
