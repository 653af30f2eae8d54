"""Tests for API middleware."""

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalogue_admin.api.middleware import is_public_path, setup_middleware


@pytest.fixture
def context_client(auth_headers: dict) -> TestClient:
    """Client for a bare app that only carries the catalogue middleware."""
    app = FastAPI()
    setup_middleware(app)

    @app.get("/context")
    async def context() -> dict:
        return structlog.contextvars.get_contextvars()

    @app.get("/broken")
    async def broken() -> None:
        raise RuntimeError("broken")

    return TestClient(app, headers=auth_headers)


class TestApiKeyMiddleware:
    """Tests for bearer API key authentication."""

    def test_missing_header(self, client: TestClient) -> None:
        response = client.get("/products", headers={"X-Request-ID": "req-401"})
        assert response.status_code == 401
        data = response.json()
        assert data["error_code"] == "UNAUTHORIZED"
        assert data["request_id"] == "req-401"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_wrong_scheme(self, client: TestClient) -> None:
        response = client.get("/products", headers={"Authorization": "Basic abc"})
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    def test_invalid_key(self, client: TestClient) -> None:
        response = client.get("/products", headers={"Authorization": "Bearer wrong"})
        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_API_KEY"

    def test_public_paths(self, client: TestClient) -> None:
        assert client.get("/health").status_code == 200
        assert client.get("/openapi.json").status_code == 200

    @pytest.mark.parametrize(
        "path,public",
        [
            ("/health", True),
            ("/ready/", True),
            ("/docs/oauth2-redirect", True),
            ("/products", False),
            ("/categories/1/breadcrumbs", False),
        ],
    )
    def test_is_public_path(self, path: str, public: bool) -> None:
        assert is_public_path(path) is public


class TestRequestContextMiddleware:
    """Tests for request correlation and caller context."""

    def test_generates_request_id(self, auth_client: TestClient) -> None:
        response = auth_client.get("/products")
        assert response.headers.get("X-Request-ID")

    def test_echoes_request_id(self, auth_client: TestClient) -> None:
        response = auth_client.get("/products/999", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
        assert response.json()["request_id"] == "req-123"

    def test_binds_caller_to_log_context(self, context_client: TestClient) -> None:
        response = context_client.get(
            "/context", headers={"X-Request-ID": "req-7", "X-Member-ID": "7"}
        )

        data = response.json()
        assert data["request_id"] == "req-7"
        assert data["member_id"] == "7"

    def test_anonymous_caller(self, context_client: TestClient) -> None:
        assert context_client.get("/context").json()["member_id"] is None

    def test_unhandled_error_envelope(self, context_client: TestClient) -> None:
        response = context_client.get("/broken", headers={"X-Request-ID": "req-500"})

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "req-500"
        assert response.json() == {
            "error_code": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "details": [],
            "request_id": "req-500",
        }
