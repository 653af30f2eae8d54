"""HTTP middleware for the catalogue admin API.

Two layers wrap every route:
- ``RequestContextMiddleware`` binds the request ID and the caller's
  ``X-Member-ID`` into the structlog context, logs each request and
  turns unhandled exceptions into the standard error envelope.
- ``ApiKeyMiddleware`` rejects calls without the admin API key.
"""

import secrets
import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from catalogue_admin.infrastructure.config import settings

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"
MEMBER_ID_HEADER = "X-Member-ID"

# Health checks and API docs are reachable without the admin key
PUBLIC_PATHS = frozenset({"/health", "/ready", "/openapi.json"})
PUBLIC_PREFIXES = ("/docs", "/redoc")


def is_public_path(path: str) -> bool:
    path = path.rstrip("/") or "/"
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


def error_envelope(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an error response carrying the request ID."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": [],
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlate logs and responses for one catalogue request.

    The member ID is bound as sent; ``get_member`` validates it.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            member_id=request.headers.get(MEMBER_ID_HEADER),
        ):
            start_time = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "Unhandled exception",
                    method=request.method,
                    path=request.url.path,
                )
                response = error_envelope(
                    request,
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "INTERNAL_ERROR",
                    "An internal error occurred",
                )

            logger.info(
                "Catalogue request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require ``Authorization: Bearer <catalogue_api_key>`` on admin routes."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if is_public_path(request.url.path):
            return await call_next(request)

        scheme, _, api_key = request.headers.get("Authorization", "").partition(" ")
        if not scheme:
            error_code, message = "UNAUTHORIZED", "Missing Authorization header"
        elif scheme.lower() != "bearer" or not api_key:
            error_code, message = (
                "UNAUTHORIZED",
                "Invalid Authorization header format. Use 'Bearer <api_key>'",
            )
        elif not secrets.compare_digest(api_key.encode(), settings.catalogue_api_key.encode()):
            error_code, message = "INVALID_API_KEY", "Invalid API key"
        else:
            return await call_next(request)

        logger.warning("Catalogue API key rejected", error_code=error_code, path=request.url.path)
        return error_envelope(
            request,
            status.HTTP_401_UNAUTHORIZED,
            error_code,
            message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def setup_middleware(app: FastAPI) -> None:
    """Install the middleware; the last one added runs first."""
    app.add_middleware(ApiKeyMiddleware)
    app.add_middleware(RequestContextMiddleware)
