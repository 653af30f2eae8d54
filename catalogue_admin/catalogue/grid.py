"""Admin grid configuration for products.

Describes which columns the product grid and CSV export show, how rows
are searched, sorted and paginated, and which bulk actions are offered.
Rendering is left to the client; rows here are plain dictionaries.
"""

import csv
import io
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from catalogue_admin.catalogue.display import (
    PlaceholderImageHelper,
    categories_list,
    cms_thumbnail,
    images_list,
    related_products_list,
    tags_list,
)
from catalogue_admin.catalogue.hierarchy import HierarchyResolver
from catalogue_admin.domain.entities import Product
from catalogue_admin.domain.value_objects import SiteConfig

T = TypeVar("T")


SUMMARY_FIELDS = [
    "cms_thumbnail",
    "stock_id",
    "title",
    "price",
    "categories_list",
    "tags_list",
    "disabled",
]

EXPORT_FIELDS = [
    "id",
    "stock_id",
    "title",
    "content",
    "price",
    "categories_list",
    "tags_list",
    "images_list",
    "related_products_list",
    "disabled",
]

FIELD_LABELS = {
    "cms_thumbnail": "Thumbnail",
    "id": "ID",
    "stock_id": "Stock ID",
    "title": "Title",
    "content": "Content",
    "price": "Price",
    "categories_list": "Categories",
    "tags_list": "Tags",
    "images_list": "Images",
    "related_products_list": "Related Products",
    "disabled": "Disabled",
}

SEARCHABLE_FIELDS = ["title", "content", "stock_id"]

DEFAULT_SORT = "title"

BULK_ACTIONS = ["enable", "disable"]


@dataclass
class PaginationParams:
    """Pagination parameters.

    Attributes:
        page: Page number (1-indexed).
        page_size: Items per page.
    """

    page: int = 1
    page_size: int = 20

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Get limit (alias for page_size)."""
        return self.page_size


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: List of items.
        total: Total count.
        page: Current page.
        page_size: Items per page.
    """

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1


@dataclass
class CatalogueGrid:
    """Product grid and export built from the field lists above.

    Attributes:
        resolver: Resolver used for category hierarchy names.
        site_config: Supplies the default thumbnail.
        placeholder: Supplies the last-resort thumbnail.
        summary_fields: Columns shown in the grid.
        export_fields: Columns written to CSV.
    """

    resolver: HierarchyResolver = field(default_factory=HierarchyResolver)
    site_config: SiteConfig = field(default_factory=SiteConfig)
    placeholder: PlaceholderImageHelper = field(default_factory=PlaceholderImageHelper)
    summary_fields: list[str] = field(default_factory=lambda: list(SUMMARY_FIELDS))
    export_fields: list[str] = field(default_factory=lambda: list(EXPORT_FIELDS))

    def _columns(self) -> dict[str, Callable[[Product], Any]]:
        return {
            "cms_thumbnail": lambda p: cms_thumbnail(p, self.site_config, self.placeholder).url,
            "id": lambda p: p.id,
            "stock_id": lambda p: p.stock_id or "",
            "title": lambda p: p.title,
            "content": lambda p: p.content,
            "price": lambda p: str(p.price.to_decimal()),
            "categories_list": lambda p: categories_list(p, self.resolver),
            "tags_list": tags_list,
            "images_list": images_list,
            "related_products_list": related_products_list,
            "disabled": lambda p: p.disabled,
        }

    def row(self, product: Product, fields: Iterable[str]) -> dict[str, Any]:
        """Build one row with the given columns.

        Args:
            product: Product to render.
            fields: Column names.

        Returns:
            Mapping of column name to value.
        """
        columns = self._columns()
        return {name: columns[name](product) for name in fields}

    def summary_row(self, product: Product) -> dict[str, Any]:
        return self.row(product, self.summary_fields)

    def export_row(self, product: Product) -> dict[str, Any]:
        return self.row(product, self.export_fields)

    def search(self, products: Iterable[Product], query: str | None) -> list[Product]:
        """Filter products by case-insensitive substring on searchable fields.

        Args:
            products: Products to filter.
            query: Search text, None or blank keeps everything.

        Returns:
            Matching products sorted by title.
        """
        matches = list(products)
        if query and query.strip():
            needle = query.strip().lower()
            matches = [
                p for p in matches
                if any(needle in (getattr(p, name) or "").lower() for name in SEARCHABLE_FIELDS)
            ]
        return sorted(matches, key=lambda p: getattr(p, DEFAULT_SORT).lower())

    def page(
        self,
        products: Iterable[Product],
        query: str | None = None,
        pagination: PaginationParams | None = None,
    ) -> PaginatedResult[dict[str, Any]]:
        """Search, sort and paginate products into summary rows.

        Args:
            products: All candidate products.
            query: Optional search text.
            pagination: Page to return.

        Returns:
            One page of summary rows.
        """
        pagination = pagination or PaginationParams()
        matches = self.search(products, query)
        window = matches[pagination.offset:pagination.offset + pagination.limit]
        return PaginatedResult(
            items=[self.summary_row(p) for p in window],
            total=len(matches),
            page=pagination.page,
            page_size=pagination.page_size,
        )

    def export_csv(self, products: Iterable[Product]) -> str:
        """Export products as CSV with a header row of field labels.

        Args:
            products: Products to export, in the grid's default order.

        Returns:
            CSV text.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow([FIELD_LABELS.get(name, name) for name in self.export_fields])
        for product in self.search(products, None):
            row = self.export_row(product)
            writer.writerow([row[name] for name in self.export_fields])
        return buffer.getvalue()
