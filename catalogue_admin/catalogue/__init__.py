"""Catalogue hierarchy and storage.

Provides hierarchy traversal, derived display values, the admin grid,
taxonomy import and the repositories backing the catalogue.
"""

from catalogue_admin.catalogue.display import (
    PlaceholderImageHelper,
    SummaryRelation,
    generate_stock_id,
    primary_display_image,
    render_summary_list,
    sorted_images,
)
from catalogue_admin.catalogue.grid import CatalogueGrid, PaginatedResult, PaginationParams
from catalogue_admin.catalogue.hierarchy import HierarchyObserver, HierarchyResolver, join_links
from catalogue_admin.catalogue.repository import (
    CatalogueRepository,
    InMemoryCatalogueRepository,
    SqlCatalogueRepository,
)
from catalogue_admin.catalogue.taxonomy import TaxonomyParser

__all__ = [
    # Hierarchy
    "HierarchyObserver",
    "HierarchyResolver",
    "join_links",
    # Display
    "PlaceholderImageHelper",
    "SummaryRelation",
    "generate_stock_id",
    "primary_display_image",
    "render_summary_list",
    "sorted_images",
    # Grid
    "CatalogueGrid",
    "PaginatedResult",
    "PaginationParams",
    # Repository
    "CatalogueRepository",
    "InMemoryCatalogueRepository",
    "SqlCatalogueRepository",
    # Taxonomy
    "TaxonomyParser",
]
