"""Catalogue entities.

Products, categories and tags. Categories link to their parent by
reference, so a graph built from storage is a snapshot that can be
walked without touching the persistence layer. Nothing here forbids a
category from becoming its own ancestor; the hierarchy resolver guards
against that.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from catalogue_admin.domain.base import Entity
from catalogue_admin.domain.value_objects import ImageRef, Money


@dataclass(eq=False)
class Tag(Entity[int | None]):
    """Free-form product tag."""

    title: str = ""


@dataclass(eq=False)
class Category(Entity[int | None]):
    """A catalogue category.

    Attributes:
        id: Category ID (None until persisted).
        title: Display title.
        url_segment: Path segment used when building links.
        disabled: Whether the category is hidden.
        parent: Parent category, None for a root.
        children: Child categories.
        products: Member products.
    """

    title: str = ""
    url_segment: str = ""
    disabled: bool = False
    parent: "Category | None" = field(default=None, repr=False)
    children: list["Category"] = field(default_factory=list, repr=False)
    products: list["Product"] = field(default_factory=list, repr=False)

    @property
    def parent_id(self) -> int | None:
        """ID of the parent category, if any."""
        return self.parent.id if self.parent is not None else None

    @property
    def menu_title(self) -> str:
        return self.title

    def is_enabled(self) -> bool:
        return not self.disabled

    def is_disabled(self) -> bool:
        return self.disabled


@dataclass(frozen=True)
class ProductImage:
    """Image attached to a product with its sort position."""

    image: ImageRef
    sort_order: int = 0


@dataclass(frozen=True)
class RelatedProduct:
    """Related product row with its sort position."""

    product: "Product"
    sort_order: int = 0


@dataclass(eq=False)
class Product(Entity[int | None]):
    """A catalogue product.

    Attributes:
        id: Product ID (None until persisted).
        title: Product title.
        stock_id: Stock identifier (SKU), generated from the title when empty.
        content: Long description (HTML, not escaped here).
        content_summary: Short description.
        price: Price without tax.
        weight: Shipping weight.
        disabled: Whether the product is hidden.
        images: Attached images in stored order.
        tags: Assigned tags in stored order.
        related_products: Related products in stored order.
        categories: Categories the product belongs to, first one is the parent.
    """

    title: str = ""
    stock_id: str | None = None
    content: str = ""
    content_summary: str = ""
    price: Money = field(default_factory=Money.zero)
    weight: Decimal = Decimal("0")
    disabled: bool = False
    images: list[ProductImage] = field(default_factory=list, repr=False)
    tags: list[Tag] = field(default_factory=list, repr=False)
    related_products: list[RelatedProduct] = field(default_factory=list, repr=False)
    categories: list[Category] = field(default_factory=list, repr=False)

    @property
    def parent(self) -> Category | None:
        """Shortcut for the first category assigned to this product."""
        return self.categories[0] if self.categories else None

    @property
    def menu_title(self) -> str:
        return self.title

    def is_enabled(self) -> bool:
        return not self.disabled

    def is_disabled(self) -> bool:
        return self.disabled

    def sorted_related_products(self) -> list["Product"]:
        """Get related products ordered by sort position, then title.

        Returns:
            Related products.
        """
        rows = sorted(
            self.related_products,
            key=lambda row: (row.sort_order, row.product.title),
        )
        return [row.product for row in rows]
