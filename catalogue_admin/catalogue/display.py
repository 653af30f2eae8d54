"""Derived display values for products.

Primary image selection with fallbacks, comma separated summary lists
and stock ID generation. Output is plain text; escaping is left to
whatever renders it.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

from catalogue_admin.catalogue.hierarchy import HierarchyResolver
from catalogue_admin.domain.entities import Category, Product
from catalogue_admin.domain.exceptions import ProductNotPersistedError
from catalogue_admin.domain.value_objects import ImageRef, SiteConfig

SUMMARY_SEPARATOR = ", "
DEFAULT_STOCK_ID_SEPARATOR = "-"


# ============================================================================
# Images
# ============================================================================


class PlaceholderImageHelper:
    """Generates the image used when neither the product nor the site has one.

    Attributes:
        name: File name of the placeholder.
        url: Public URL of the placeholder.
    """

    def __init__(
        self,
        name: str = "no-image.png",
        url: str = "/static/images/no-image.png",
    ) -> None:
        self.name = name
        self.url = url

    def generate_no_image(self) -> ImageRef:
        """Get the placeholder image reference.

        Returns:
            Image reference, never None.
        """
        return ImageRef(name=self.name, url=self.url)


def sorted_images(
    product: Product,
    site_config: SiteConfig | None = None,
    placeholder: PlaceholderImageHelper | None = None,
) -> list[ImageRef]:
    """Get product images by sort position, or a single fallback image.

    Falls back to the site default image and then to a generated
    placeholder when the product has no images.

    Args:
        product: Product to read images from.
        site_config: Site configuration supplying the default image.
        placeholder: Helper generating the last-resort image.

    Returns:
        At least one image reference.
    """
    if product.images:
        rows = sorted(product.images, key=lambda row: row.sort_order)
        return [row.image for row in rows]

    default_image = site_config.default_product_image if site_config else None
    if default_image is not None and default_image.exists():
        return [default_image]

    helper = placeholder or PlaceholderImageHelper()
    return [helper.generate_no_image()]


def primary_display_image(
    product: Product,
    site_config: SiteConfig | None = None,
    placeholder: PlaceholderImageHelper | None = None,
) -> ImageRef:
    """Get the image with the lowest sort position, or a fallback.

    Args:
        product: Product to read images from.
        site_config: Site configuration supplying the default image.
        placeholder: Helper generating the last-resort image.

    Returns:
        Image reference, never None.
    """
    return sorted_images(product, site_config, placeholder)[0]


# Admin grids show the primary image as thumbnail; resizing is the
# renderer's job.
cms_thumbnail = primary_display_image


# ============================================================================
# Summary Lists
# ============================================================================


FieldSelector = str | Callable[[Any], Any]


class SummaryRelation(str, Enum):
    """Related collections that can be rendered as summary lists."""

    CATEGORIES = "categories"
    TAGS = "tags"
    IMAGES = "images"
    RELATED_PRODUCTS = "related_products"


def _related_items(entity: Product | Category, relation: SummaryRelation) -> list[Any]:
    rows = getattr(entity, relation.value, None) or []
    if relation == SummaryRelation.IMAGES:
        return [row.image for row in rows]
    if relation == SummaryRelation.RELATED_PRODUCTS:
        return [row.product for row in rows]
    return list(rows)


def _default_selector(
    relation: SummaryRelation,
    resolver: HierarchyResolver,
) -> FieldSelector:
    if relation == SummaryRelation.CATEGORIES:
        return resolver.full_hierarchy
    if relation == SummaryRelation.TAGS:
        return "title"
    if relation == SummaryRelation.IMAGES:
        return "name"
    return "stock_id"


def render_summary_list(
    entity: Product | Category,
    relation: SummaryRelation,
    field_selector: FieldSelector | None = None,
    resolver: HierarchyResolver | None = None,
) -> str:
    """Render a related collection as a comma separated string.

    Items are read in stored order. Missing values render as empty text.

    Args:
        entity: Entity owning the collection.
        relation: Which collection to read.
        field_selector: Attribute name or callable extracting each value.
            Defaults to full hierarchy for categories, title for tags,
            file name for images and stock ID for related products.
        resolver: Resolver used for the category full hierarchy.

    Returns:
        Joined values, empty string for an empty collection.
    """
    selector = field_selector or _default_selector(relation, resolver or HierarchyResolver())

    values = []
    for item in _related_items(entity, relation):
        value = selector(item) if callable(selector) else getattr(item, selector, None)
        values.append("" if value is None else str(value))

    return SUMMARY_SEPARATOR.join(values)


def categories_list(product: Product, resolver: HierarchyResolver | None = None) -> str:
    """Generate a comma separated list of category hierarchies."""
    return render_summary_list(product, SummaryRelation.CATEGORIES, resolver=resolver)


def tags_list(product: Product) -> str:
    """Generate a comma separated list of tag titles."""
    return render_summary_list(product, SummaryRelation.TAGS)


def images_list(product: Product) -> str:
    """Generate a comma separated list of image file names."""
    return render_summary_list(product, SummaryRelation.IMAGES)


def related_products_list(product: Product) -> str:
    """Generate a comma separated list of related product stock IDs."""
    return render_summary_list(product, SummaryRelation.RELATED_PRODUCTS)


# ============================================================================
# Stock IDs
# ============================================================================


def generate_stock_id(
    product: Product,
    separator: str = DEFAULT_STOCK_ID_SEPARATOR,
) -> str:
    """Generate a stock ID from the title initials and the product ID.

    "Blue Suede Shoes" with ID 42 becomes "BSS-42". An empty title
    gives just the separator and ID.

    Args:
        product: Persisted product.
        separator: Text between the initials and the ID.

    Returns:
        Generated stock ID.

    Raises:
        ProductNotPersistedError: If the product has no ID yet.
    """
    if product.id is None:
        raise ProductNotPersistedError(product.title)

    initials = "".join(token[0] for token in (product.title or "").split())
    return f"{initials}{separator}{product.id}"
