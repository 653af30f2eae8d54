"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from catalogue_admin.api.categories import router as categories_router
from catalogue_admin.api.health import router as health_router
from catalogue_admin.api.products import router as products_router

__all__ = [
    "categories_router",
    "health_router",
    "products_router",
]
