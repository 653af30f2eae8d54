"""Shared fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from catalogue_admin.application.catalogue_service import (
    reset_catalogue_repository,
    reset_permission_checker,
)
from catalogue_admin.infrastructure.config import settings
from catalogue_admin.main import app


@pytest.fixture(autouse=True)
def reset_state():
    """Reset in-memory catalogue and permissions before each test."""
    reset_catalogue_repository()
    reset_permission_checker()
    yield
    reset_catalogue_repository()
    reset_permission_checker()


@pytest.fixture
def client() -> TestClient:
    """Create test client without authentication."""
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Get authentication headers without a member identity."""
    return {"Authorization": f"Bearer {settings.catalogue_api_key}"}


@pytest.fixture
def auth_client() -> TestClient:
    """Create test client authenticated as the configured admin member."""
    return TestClient(
        app,
        headers={
            "Authorization": f"Bearer {settings.catalogue_api_key}",
            "X-Member-ID": str(settings.admin_member_ids[0]),
        },
    )
