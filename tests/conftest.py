"""
Shared fixtures.

No test here talks to Postgres: repository/db functions are replaced with
in-memory fakes through `monkeypatch`.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from auth import security
from main import app


@pytest.fixture(autouse=True)
def _test_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)


@pytest.fixture
def client():
    # Not entered as a context manager, so the lifespan (DB pool) never runs.
    return TestClient(app)


@pytest.fixture
def user_row():
    return {"id": 7, "username": "rami", "email": "rami@example.com", "created_at": None}


@pytest.fixture
def auth_headers(monkeypatch, user_row):
    from auth import repository as auth_repository

    async def fake_get_user_by_id(user_id):
        return user_row if user_id == user_row["id"] else None

    monkeypatch.setattr(auth_repository, "get_user_by_id", fake_get_user_by_id)
    token = security.build_access_token(user_id=user_row["id"], email=user_row["email"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def activity_log(monkeypatch):
    """Capture activity entries instead of inserting them."""
    from activity import repository as activity_repository

    entries: list[tuple] = []

    async def fake_insert_log(user_id, *, action, description=None):
        entries.append((user_id, action, description))

    monkeypatch.setattr(activity_repository, "insert_log", fake_insert_log)
    return entries
