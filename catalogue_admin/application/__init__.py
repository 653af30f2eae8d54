"""Application layer module.

Contains application services (use cases) that orchestrate
domain logic and infrastructure.
"""

from catalogue_admin.application.catalogue_service import (
    CatalogueService,
    CategoryData,
    ImageData,
    ProductData,
    RelatedData,
    get_catalogue_service,
)

__all__ = [
    "CatalogueService",
    "CategoryData",
    "ImageData",
    "ProductData",
    "RelatedData",
    "get_catalogue_service",
]
