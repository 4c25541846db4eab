from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_tracker.attendance_tracker.container import build_container
from src.attendance_tracker.attendance_tracker.database.memory_store import MemoryStore
from src.attendance_tracker.attendance_tracker.main import create_app


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday mid-morning
    return datetime(2025, 3, 12, 10, 0, 0)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def container(store):
    return build_container(backend="memory", store=store)


@pytest.fixture
def instructor(container):
    return container.user_service.create_user(
        username="prof",
        password="secret123",
        name="Prof. Ada",
        department="Mathematics",
    )


@pytest.fixture
def app():
    app = create_app("config.testing")
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    client = app.test_client()
    resp = client.post("/api/auth/login", json={"username": "faculty", "password": "password"})
    assert resp.status_code == 200
    return client
