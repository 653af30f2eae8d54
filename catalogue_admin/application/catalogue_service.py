"""Catalogue application service.

Orchestrates catalogue administration:
- Creating, editing and deleting products and categories
- Permission checks before every write
- Stock ID generation after a product's first write
- Bulk enable/disable
- Breadcrumbs, levels, grid pages and CSV export
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import structlog

from catalogue_admin.catalogue.display import (
    PlaceholderImageHelper,
    categories_list,
    generate_stock_id,
    images_list,
    primary_display_image,
    related_products_list,
    sorted_images,
    tags_list,
)
from catalogue_admin.catalogue.grid import CatalogueGrid, PaginatedResult, PaginationParams
from catalogue_admin.catalogue.hierarchy import CatalogueEntity, HierarchyObserver, HierarchyResolver
from catalogue_admin.catalogue.repository import CatalogueRepository, InMemoryCatalogueRepository
from catalogue_admin.catalogue.taxonomy import TaxonomyParser, slugify
from catalogue_admin.domain.entities import Category, Product, ProductImage, RelatedProduct, Tag
from catalogue_admin.domain.exceptions import (
    CategoryNotFoundError,
    InvalidCategoryHierarchyError,
    PermissionDeniedError,
    ProductNotFoundError,
    RequiredFieldError,
)
from catalogue_admin.domain.permissions import (
    ADMIN,
    Action,
    CataloguePermissions,
    EntityKind,
    InMemoryPermissionChecker,
)
from catalogue_admin.domain.value_objects import (
    BreadcrumbEntry,
    ImageRef,
    Member,
    Money,
    SiteConfig,
    ViewAccess,
)
from catalogue_admin.infrastructure.config import Settings, settings

logger = structlog.get_logger()


# ============================================================================
# Input Data Transfer Objects
# ============================================================================


@dataclass
class ImageData:
    """Image to attach to a product."""

    name: str
    url: str
    sort_order: int = 0
    id: int | None = None


@dataclass
class RelatedData:
    """Related product to attach to a product."""

    product_id: int
    sort_order: int = 0


@dataclass
class ProductData:
    """Product fields supplied by the caller.

    Fields left as None keep their current value on update and take the
    entity default on create.
    """

    title: str | None = None
    stock_id: str | None = None
    content: str | None = None
    content_summary: str | None = None
    price_cents: int | None = None
    currency: str | None = None
    weight: Decimal | None = None
    disabled: bool | None = None
    category_ids: list[int] | None = None
    tags: list[str] | None = None
    images: list[ImageData] | None = None
    related: list[RelatedData] | None = None


@dataclass
class CategoryData:
    """Category fields supplied by the caller.

    ``parent_id=0`` detaches the category from its parent.
    """

    title: str | None = None
    url_segment: str | None = None
    parent_id: int | None = None
    disabled: bool | None = None


# ============================================================================
# Output Data Transfer Objects
# ============================================================================


@dataclass
class ProductDetails:
    """Product with every derived display value."""

    product: Product
    link: str
    absolute_link: str
    primary_image: ImageRef
    images: list[ImageRef]
    categories_list: str
    tags_list: str
    images_list: str
    related_products_list: str
    breadcrumbs: list[BreadcrumbEntry] = field(default_factory=list)


@dataclass
class CategoryDetails:
    """Category with its derived display values."""

    category: Category
    link: str
    full_hierarchy: str
    breadcrumbs: list[BreadcrumbEntry] = field(default_factory=list)


# ============================================================================
# Singletons
# ============================================================================


_catalogue_repo: InMemoryCatalogueRepository | None = None
_permission_checker: InMemoryPermissionChecker | None = None


def get_catalogue_repository() -> InMemoryCatalogueRepository:
    """Get in-memory catalogue repository singleton."""
    global _catalogue_repo
    if _catalogue_repo is None:
        _catalogue_repo = InMemoryCatalogueRepository()
    return _catalogue_repo


def reset_catalogue_repository() -> None:
    """Reset catalogue repository (for testing)."""
    global _catalogue_repo
    _catalogue_repo = InMemoryCatalogueRepository()


def get_permission_checker() -> InMemoryPermissionChecker:
    """Get permission checker singleton, seeded with the configured admins."""
    global _permission_checker
    if _permission_checker is None:
        _permission_checker = InMemoryPermissionChecker(
            {member_id: {ADMIN} for member_id in settings.admin_member_ids}
        )
    return _permission_checker


def reset_permission_checker() -> None:
    """Reset permission checker (for testing)."""
    global _permission_checker
    _permission_checker = None


def build_site_config(config: Settings) -> SiteConfig:
    """Build the site configuration from settings.

    Args:
        config: Application settings.

    Returns:
        Site configuration value object.
    """
    default_image = None
    if config.default_product_image_url:
        default_image = ImageRef(
            name=config.default_product_image_name or config.default_product_image_url.rsplit("/", 1)[-1],
            url=config.default_product_image_url,
        )
    return SiteConfig(
        default_product_image=default_image,
        can_view_type=ViewAccess(config.site_can_view_type),
        viewer_groups=frozenset(config.site_viewer_groups),
    )


# ============================================================================
# Catalogue Service
# ============================================================================


class CatalogueService:
    """Application service for catalogue administration.

    Example usage:
        service = CatalogueService()
        product = await service.create_product(
            ProductData(title="Blue Suede Shoes", category_ids=[3]),
            member=Member(id=1),
        )
        product.stock_id  # "BSS-1"
    """

    def __init__(
        self,
        repository: CatalogueRepository | None = None,
        permissions: CataloguePermissions | None = None,
        config: Settings | None = None,
        observers: Iterable[HierarchyObserver] = (),
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            repository: Catalogue storage.
            permissions: Permission policy.
            config: Application settings.
            observers: Hierarchy observers passed to the resolver.
            request_id: Request ID for correlation.
        """
        self.repository = repository or get_catalogue_repository()
        self.permissions = permissions or CataloguePermissions(get_permission_checker())
        self.settings = config or settings
        self.request_id = request_id

        self.resolver = HierarchyResolver(
            base_url=self.settings.base_url,
            absolute_base_url=self.settings.absolute_base_url,
            observers=observers,
        )
        self.site_config = build_site_config(self.settings)
        self.placeholder = PlaceholderImageHelper(
            name=self.settings.placeholder_image_name,
            url=self.settings.placeholder_image_url,
        )
        self.grid = CatalogueGrid(
            resolver=self.resolver,
            site_config=self.site_config,
            placeholder=self.placeholder,
        )

    # ------------------------------------------------------------------
    # Permissions
    # ------------------------------------------------------------------

    def _require(self, action: Action, member: Member | None, kind: EntityKind) -> None:
        if not self.permissions.can(action, member, kind):
            raise PermissionDeniedError(
                action.value,
                kind.value,
                member.id if member is not None else None,
            )

    def can_view(self, member: Member | None = None) -> bool:
        """Check whether a member may view catalogue pages."""
        return self.permissions.can_view(member, self.site_config)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def get_product(self, product_id: int) -> Product:
        """Get a product by ID.

        Raises:
            ProductNotFoundError: If no such product exists.
        """
        product = await self.repository.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def list_products(self) -> list[Product]:
        return await self.repository.list_products()

    async def create_product(self, data: ProductData, member: Member | None = None) -> Product:
        """Create a product.

        Args:
            data: Product fields.
            member: Caller identity.

        Returns:
            Written product, with a stock ID when generation is enabled.

        Raises:
            PermissionDeniedError: If the member may not create products.
                Also raised when new tags are named without tag rights.
            RequiredFieldError: If title (or stock ID) is missing.
        """
        self._require(Action.CREATE, member, EntityKind.PRODUCT)

        product = Product(id=None)
        await self._apply_product_data(product, data, member)

        product = await self._write_product(product)
        logger.info(
            "Product created",
            product_id=product.id,
            stock_id=product.stock_id,
            request_id=self.request_id,
        )
        return product

    async def update_product(
        self,
        product_id: int,
        data: ProductData,
        member: Member | None = None,
    ) -> Product:
        """Update a product.

        Raises:
            PermissionDeniedError: If the member may not edit products.
            ProductNotFoundError: If no such product exists.
            RequiredFieldError: If a required field ends up empty.
        """
        self._require(Action.EDIT, member, EntityKind.PRODUCT)

        product = await self.get_product(product_id)
        await self._apply_product_data(product, data, member)

        product = await self._write_product(product)
        logger.info("Product updated", product_id=product.id, request_id=self.request_id)
        return product

    async def delete_product(self, product_id: int, member: Member | None = None) -> None:
        """Delete a product.

        Raises:
            PermissionDeniedError: If the member may not delete products.
            ProductNotFoundError: If no such product exists.
        """
        self._require(Action.DELETE, member, EntityKind.PRODUCT)

        if not await self.repository.delete_product(product_id):
            raise ProductNotFoundError(product_id)
        logger.info("Product deleted", product_id=product_id, request_id=self.request_id)

    async def bulk_set_disabled(
        self,
        product_ids: Iterable[int],
        disabled: bool,
        member: Member | None = None,
    ) -> list[int]:
        """Enable or disable several products at once.

        Unknown IDs are skipped.

        Args:
            product_ids: Products to change.
            disabled: New disabled flag.
            member: Caller identity.

        Returns:
            IDs of the products that were changed.
        """
        self._require(Action.EDIT, member, EntityKind.PRODUCT)

        changed = []
        for product_id in product_ids:
            product = await self.repository.get_product(product_id)
            if product is None:
                logger.warning(
                    "Bulk action skipped missing product",
                    product_id=product_id,
                    request_id=self.request_id,
                )
                continue
            product.disabled = disabled
            await self._write_product(product)
            changed.append(product_id)

        logger.info(
            "Bulk disabled flag set",
            disabled=disabled,
            product_ids=changed,
            request_id=self.request_id,
        )
        return changed

    async def _write_product(self, product: Product) -> Product:
        product = await self.repository.save_product(product)
        await self._on_after_write(product)
        return product

    async def _on_after_write(self, product: Product) -> None:
        # The second write sees a stock ID and stops here.
        if not product.stock_id and self.settings.auto_stock_id:
            product.stock_id = generate_stock_id(product, self.settings.stock_id_separator)
            logger.info(
                "Generated stock ID",
                product_id=product.id,
                stock_id=product.stock_id,
                request_id=self.request_id,
            )
            await self._write_product(product)

    def _validate_product(self, title: str, stock_id: str | None) -> None:
        if not title or not title.strip():
            raise RequiredFieldError("Product", "title")
        if not self.settings.auto_stock_id and not stock_id:
            raise RequiredFieldError("Product", "stock_id")

    async def _check_new_tags(self, titles: list[str], member: Member | None) -> None:
        existing = await self.repository.existing_tag_titles(titles)
        new_titles = [title for title in titles if title not in existing]
        if new_titles and not self.permissions.can_create_tags(member):
            raise PermissionDeniedError(
                "create",
                "tag",
                member.id if member is not None else None,
            )

    async def _apply_product_data(
        self,
        product: Product,
        data: ProductData,
        member: Member | None,
    ) -> None:
        # Lookups and checks run before the product is touched; stored
        # products are left as they were when any of them fails.
        title = data.title if data.title is not None else product.title
        stock_id = (data.stock_id or None) if data.stock_id is not None else product.stock_id
        self._validate_product(title, stock_id)

        price = product.price
        if data.price_cents is not None or data.currency is not None:
            price = Money(
                amount_cents=data.price_cents if data.price_cents is not None else price.amount_cents,
                currency=data.currency or price.currency,
            )

        categories = None
        if data.category_ids is not None:
            categories = [await self.get_category(cid) for cid in data.category_ids]

        tag_titles = None
        if data.tags is not None:
            tag_titles = list(dict.fromkeys(data.tags))
            await self._check_new_tags(tag_titles, member)

        related = None
        if data.related is not None:
            related = [
                RelatedProduct(product=await self.get_product(row.product_id), sort_order=row.sort_order)
                for row in data.related
            ]

        product.title = title
        product.stock_id = stock_id
        product.price = price
        if data.content is not None:
            product.content = data.content
        if data.content_summary is not None:
            product.content_summary = data.content_summary
        if data.weight is not None:
            product.weight = data.weight
        if data.disabled is not None:
            product.disabled = data.disabled
        if categories is not None:
            product.categories = categories
        if tag_titles is not None:
            product.tags = [Tag(id=None, title=tag_title) for tag_title in tag_titles]
        if data.images is not None:
            product.images = [
                ProductImage(
                    image=ImageRef(name=image.name, url=image.url, id=image.id),
                    sort_order=image.sort_order,
                )
                for image in data.images
            ]
        if related is not None:
            product.related_products = related

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def get_category(self, category_id: int) -> Category:
        """Get a category by ID.

        Raises:
            CategoryNotFoundError: If no such category exists.
        """
        category = await self.repository.get_category(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    async def list_categories(self) -> list[Category]:
        return await self.repository.list_categories()

    async def create_category(self, data: CategoryData, member: Member | None = None) -> Category:
        """Create a category.

        Raises:
            PermissionDeniedError: If the member may not create categories.
            CategoryNotFoundError: If the parent does not exist.
            RequiredFieldError: If the title is missing.
        """
        self._require(Action.CREATE, member, EntityKind.CATEGORY)

        category = Category(id=None)
        await self._apply_category_data(category, data)

        category = await self.repository.save_category(category)
        logger.info(
            "Category created",
            category_id=category.id,
            parent_id=category.parent_id,
            request_id=self.request_id,
        )
        return category

    async def update_category(
        self,
        category_id: int,
        data: CategoryData,
        member: Member | None = None,
    ) -> Category:
        """Update a category.

        Only direct self-parenting is rejected; deeper cycles are left to
        the traversal guard.

        Raises:
            PermissionDeniedError: If the member may not edit categories.
            CategoryNotFoundError: If the category or new parent does not exist.
            InvalidCategoryHierarchyError: If the category would be its own parent.
        """
        self._require(Action.EDIT, member, EntityKind.CATEGORY)

        category = await self.get_category(category_id)
        await self._apply_category_data(category, data)

        category = await self.repository.save_category(category)
        logger.info(
            "Category updated",
            category_id=category.id,
            parent_id=category.parent_id,
            request_id=self.request_id,
        )
        return category

    async def delete_category(self, category_id: int, member: Member | None = None) -> None:
        """Delete a category. Its children become roots.

        Raises:
            PermissionDeniedError: If the member may not delete categories.
            CategoryNotFoundError: If no such category exists.
        """
        self._require(Action.DELETE, member, EntityKind.CATEGORY)

        if not await self.repository.delete_category(category_id):
            raise CategoryNotFoundError(category_id)
        logger.info("Category deleted", category_id=category_id, request_id=self.request_id)

    async def _apply_category_data(self, category: Category, data: CategoryData) -> None:
        title = data.title if data.title is not None else category.title
        if not title or not title.strip():
            raise RequiredFieldError("Category", "title")

        url_segment = slugify(data.url_segment) if data.url_segment is not None else category.url_segment
        if not url_segment:
            url_segment = slugify(title)

        parent = category.parent
        if data.parent_id == 0:
            parent = None
        elif data.parent_id is not None:
            if category.id is not None and data.parent_id == category.id:
                raise InvalidCategoryHierarchyError(
                    category.id,
                    data.parent_id,
                    "Category cannot be its own parent",
                )
            parent = await self.get_category(data.parent_id)

        category.title = title
        category.url_segment = url_segment
        category.parent = parent
        if data.disabled is not None:
            category.disabled = data.disabled

    async def import_taxonomy(
        self,
        lines: list[str] | None = None,
        member: Member | None = None,
    ) -> list[Category]:
        """Create categories from taxonomy lines.

        IDs in the taxonomy only wire up parents; stored categories get
        fresh IDs. Parents are written before their children.

        Args:
            lines: Taxonomy lines, the embedded taxonomy when None.
            member: Caller identity.

        Returns:
            Created categories, parents first.
        """
        self._require(Action.CREATE, member, EntityKind.CATEGORY)

        parser = TaxonomyParser()
        categories = parser.parse_lines(lines) if lines is not None else parser.parse_embedded()
        categories.sort(key=lambda c: len(self.resolver.level_stack(c)))

        for category in categories:
            category.id = None
            category.children = []
        for category in categories:
            await self.repository.save_category(category)

        logger.info(
            "Taxonomy imported",
            category_count=len(categories),
            request_id=self.request_id,
        )
        return categories

    # ------------------------------------------------------------------
    # Hierarchy
    # ------------------------------------------------------------------

    def _max_depth(self, max_depth: int | None) -> int:
        return self.settings.breadcrumb_max_depth if max_depth is None else max_depth

    async def product_breadcrumbs(
        self,
        product_id: int,
        max_depth: int | None = None,
    ) -> list[BreadcrumbEntry]:
        product = await self.get_product(product_id)
        return self.resolver.build_breadcrumbs(product, self._max_depth(max_depth))

    async def category_breadcrumbs(
        self,
        category_id: int,
        max_depth: int | None = None,
    ) -> list[BreadcrumbEntry]:
        category = await self.get_category(category_id)
        return self.resolver.build_breadcrumbs(category, self._max_depth(max_depth))

    async def product_level(self, product_id: int, level: int) -> CatalogueEntity | None:
        """Get the entity at a level of a product's stack, None if out of range."""
        return self.resolver.level(await self.get_product(product_id), level)

    async def category_level(self, category_id: int, level: int) -> CatalogueEntity | None:
        """Get the entity at a level of a category's stack, None if out of range."""
        return self.resolver.level(await self.get_category(category_id), level)

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def product_details(self, product: Product, max_depth: int | None = None) -> ProductDetails:
        """Collect every derived display value of a product."""
        return ProductDetails(
            product=product,
            link=self.resolver.link(product),
            absolute_link=self.resolver.absolute_link(product),
            primary_image=primary_display_image(product, self.site_config, self.placeholder),
            images=sorted_images(product, self.site_config, self.placeholder),
            categories_list=categories_list(product, self.resolver),
            tags_list=tags_list(product),
            images_list=images_list(product),
            related_products_list=related_products_list(product),
            breadcrumbs=self.resolver.build_breadcrumbs(product, self._max_depth(max_depth)),
        )

    def category_details(self, category: Category, max_depth: int | None = None) -> CategoryDetails:
        """Collect the derived display values of a category."""
        return CategoryDetails(
            category=category,
            link=self.resolver.link(category),
            full_hierarchy=self.resolver.full_hierarchy(category),
            breadcrumbs=self.resolver.build_breadcrumbs(category, self._max_depth(max_depth)),
        )

    async def product_grid(
        self,
        query: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResult[dict[str, Any]]:
        """Get one page of the admin product grid."""
        products = await self.repository.list_products()
        return self.grid.page(products, query, PaginationParams(page=page, page_size=page_size))

    async def export_products_csv(self) -> str:
        """Export every product as CSV."""
        products = await self.repository.list_products()
        logger.info("Products exported", product_count=len(products), request_id=self.request_id)
        return self.grid.export_csv(products)


def get_catalogue_service(
    repository: CatalogueRepository | None = None,
    request_id: str | None = None,
) -> CatalogueService:
    """Get catalogue service instance.

    Args:
        repository: Storage to use, the in-memory singleton when None.
        request_id: Request ID for correlation.

    Returns:
        CatalogueService instance.
    """
    return CatalogueService(repository=repository, request_id=request_id)
