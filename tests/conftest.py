"""
Shared fixtures: an in-memory stand-in for the async session and an API client.
"""
from typing import Any, List, Optional

import pytest
from fastapi.testclient import TestClient

USER_ID = "0b7a4c9e-3f1d-4c55-9d8e-2a6f1b0c7d11"
ADMIN_ID = "5e2d1c3b-8a9f-4e7d-b6c5-1f0e9d8c7b6a"


class FakeMappings:
    def __init__(self, rows: List[dict]):
        self._rows = rows

    def all(self) -> List[dict]:
        return list(self._rows)

    def first(self) -> Optional[dict]:
        return self._rows[0] if self._rows else None


class FakeResult:
    """Mimics the parts of a SQLAlchemy Result the services use"""

    def __init__(self, rows: Optional[List[dict]] = None, scalar: Any = None):
        self._rows = rows or []
        self._scalar = scalar

    def first(self):
        return tuple(self._rows[0].values()) if self._rows else None

    def mappings(self) -> FakeMappings:
        return FakeMappings(self._rows)

    def scalar(self) -> Any:
        return self._scalar


class FakeTransaction:
    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Records executed statements and replays queued results"""

    def __init__(self, results: Optional[List[Any]] = None):
        self.results = list(results or [])
        self.statements = []

    async def execute(self, query):
        self.statements.append(query)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def begin(self) -> FakeTransaction:
        return FakeTransaction()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def db_available(monkeypatch, fake_session):
    """Make the connection module hand out the fake session"""
    import src.database.connection as connection

    monkeypatch.setattr(connection, "engine", object())
    monkeypatch.setattr(connection, "async_session", lambda: fake_session)
    return fake_session


@pytest.fixture
def db_missing(monkeypatch):
    import src.database.connection as connection

    monkeypatch.setattr(connection, "engine", None)
    monkeypatch.setattr(connection, "async_session", None)


@pytest.fixture
def app():
    from src.main import app as fastapi_app
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def as_user(app):
    from src.services.auth import get_current_user, require_approved_user

    claims = {"sub": USER_ID, "email": "parent@example.com"}
    app.dependency_overrides[require_approved_user] = lambda: claims
    app.dependency_overrides[get_current_user] = lambda: claims
    return claims


@pytest.fixture
def as_admin(app):
    from src.services.auth import require_admin

    claims = {"sub": ADMIN_ID, "email": "admin@example.com"}
    app.dependency_overrides[require_admin] = lambda: claims
    return claims
