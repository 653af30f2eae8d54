"""Tests for health and readiness endpoints."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from catalogue_admin.api import health
from catalogue_admin.infrastructure.config import settings
from catalogue_admin.main import app


class UnreachableSession:
    """Session stand-in whose connection is refused."""

    async def __aenter__(self):
        raise OSError("connection refused")

    async def __aexit__(self, *exc_info) -> bool:
        return False


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def database_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "storage_backend", "database")


def test_health_reports_catalogue_service(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "service": "catalogue-admin",
        "version": settings.api_version,
    }


def test_memory_storage_always_ready(client: TestClient) -> None:
    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "storage": "memory"}


@pytest.mark.usefixtures("database_backend")
def test_database_ready_when_reachable(
    client: TestClient,
    monkeypatch: pytest.MonkeyPatch,
    tmp_path,
) -> None:
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ready.db'}", poolclass=NullPool
    )
    monkeypatch.setattr(health, "get_session_factory", lambda: async_sessionmaker(engine))

    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "storage": "database"}


@pytest.mark.usefixtures("database_backend")
def test_database_unavailable(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(health, "get_session_factory", lambda: UnreachableSession)

    response = client.get("/ready")

    assert response.status_code == 503
    assert response.json() == {"status": "unavailable", "storage": "database"}
