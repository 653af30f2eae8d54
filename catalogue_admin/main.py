"""Catalogue admin main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalogue_admin.api.categories import router as categories_router
from catalogue_admin.api.health import router as health_router
from catalogue_admin.api.middleware import setup_middleware
from catalogue_admin.api.products import router as products_router
from catalogue_admin.domain.exceptions import (
    CategoryNotFoundError,
    DomainError,
    InvalidCategoryHierarchyError,
    MoneyError,
    PermissionDeniedError,
    ProductNotFoundError,
    ProductNotPersistedError,
    RequiredFieldError,
)
from catalogue_admin.infrastructure.config import settings
from catalogue_admin.infrastructure.logging_config import configure_logging

logger = structlog.get_logger()

# Checked in order; the first matching class wins.
DOMAIN_ERROR_STATUS: list[tuple[type[DomainError], int, str]] = [
    (ProductNotFoundError, status.HTTP_404_NOT_FOUND, "PRODUCT_NOT_FOUND"),
    (CategoryNotFoundError, status.HTTP_404_NOT_FOUND, "CATEGORY_NOT_FOUND"),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN, "PERMISSION_DENIED"),
    (RequiredFieldError, status.HTTP_422_UNPROCESSABLE_ENTITY, "REQUIRED_FIELD"),
    (InvalidCategoryHierarchyError, status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_HIERARCHY"),
    (ProductNotPersistedError, status.HTTP_422_UNPROCESSABLE_ENTITY, "PRODUCT_NOT_PERSISTED"),
    (MoneyError, status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_MONEY"),
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    configure_logging()
    logger.info(
        "Starting catalogue admin API",
        version=settings.api_version,
        debug=settings.debug,
        storage_backend=settings.storage_backend,
    )

    yield

    logger.info("Shutting down catalogue admin API")


app = FastAPI(
    title="Catalogue Admin API",
    description="Product catalogue administration backend",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request context and API key middleware
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)
app.include_router(categories_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


def _error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: list | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details or [],
            "request_id": getattr(request.state, "request_id", None),
        },
    )


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map domain errors to HTTP status codes."""
    status_code, error_code = status.HTTP_400_BAD_REQUEST, "DOMAIN_ERROR"
    for error_class, code, name in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_class):
            status_code, error_code = code, name
            break

    logger.info(
        "Domain error",
        path=request.url.path,
        error_code=error_code,
        error=exc.message,
    )
    details = [
        {"field": key, "message": str(value)} for key, value in exc.details.items()
    ]
    return _error_response(request, status_code, error_code, exc.message, details)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return _error_response(request, exc.status_code, error_code, message, details)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with consistent format."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An internal error occurred",
    )
