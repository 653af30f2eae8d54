"""Tests for the catalogue application service."""

from unittest.mock import AsyncMock

import pytest

from catalogue_admin.application.catalogue_service import (
    CatalogueService,
    CategoryData,
    ProductData,
    RelatedData,
)
from catalogue_admin.catalogue.repository import InMemoryCatalogueRepository
from catalogue_admin.domain.exceptions import (
    CategoryNotFoundError,
    InvalidCategoryHierarchyError,
    MoneyError,
    PermissionDeniedError,
    ProductNotFoundError,
    RequiredFieldError,
)
from catalogue_admin.domain.permissions import (
    ADMIN,
    CataloguePermissions,
    InMemoryPermissionChecker,
)
from catalogue_admin.domain.value_objects import Member
from catalogue_admin.infrastructure.config import Settings

ADMIN_MEMBER = Member(id=1)


@pytest.fixture
def repository() -> InMemoryCatalogueRepository:
    return InMemoryCatalogueRepository()


@pytest.fixture
def checker() -> InMemoryPermissionChecker:
    return InMemoryPermissionChecker({1: {ADMIN}})


def make_service(
    repository: InMemoryCatalogueRepository,
    checker: InMemoryPermissionChecker,
    **overrides,
) -> CatalogueService:
    config = Settings(
        base_url="/",
        absolute_base_url="http://shop.test",
        breadcrumb_max_depth=20,
        **overrides,
    )
    return CatalogueService(
        repository=repository,
        permissions=CataloguePermissions(checker),
        config=config,
    )


@pytest.fixture
def service(
    repository: InMemoryCatalogueRepository,
    checker: InMemoryPermissionChecker,
) -> CatalogueService:
    return make_service(repository, checker)


async def build_tree(service: CatalogueService) -> dict[str, int]:
    """Create Apparel > Clothing > Shoes and return IDs by title."""
    apparel = await service.create_category(CategoryData(title="Apparel"), ADMIN_MEMBER)
    clothing = await service.create_category(
        CategoryData(title="Clothing", parent_id=apparel.id), ADMIN_MEMBER
    )
    shoes = await service.create_category(
        CategoryData(title="Shoes", parent_id=clothing.id), ADMIN_MEMBER
    )
    return {"Apparel": apparel.id, "Clothing": clothing.id, "Shoes": shoes.id}


class TestCreateProduct:
    """Tests for product creation and stock ID generation."""

    @pytest.mark.asyncio
    async def test_generates_stock_id(self, service: CatalogueService) -> None:
        product = await service.create_product(
            ProductData(title="Blue Suede Shoes"), ADMIN_MEMBER
        )
        assert product.id == 1
        assert product.stock_id == "BSS-1"

    @pytest.mark.asyncio
    async def test_generation_writes_exactly_twice(
        self,
        service: CatalogueService,
        repository: InMemoryCatalogueRepository,
    ) -> None:
        """Generated stock ID causes one extra write and no more."""
        repository.save_product = AsyncMock(wraps=repository.save_product)

        await service.create_product(ProductData(title="Blue Suede Shoes"), ADMIN_MEMBER)

        assert repository.save_product.call_count == 2

    @pytest.mark.asyncio
    async def test_supplied_stock_id_writes_once(
        self,
        service: CatalogueService,
        repository: InMemoryCatalogueRepository,
    ) -> None:
        repository.save_product = AsyncMock(wraps=repository.save_product)

        product = await service.create_product(
            ProductData(title="Blue Suede Shoes", stock_id="ELVIS-1"), ADMIN_MEMBER
        )

        assert product.stock_id == "ELVIS-1"
        assert repository.save_product.call_count == 1

    @pytest.mark.asyncio
    async def test_generation_disabled_requires_stock_id(
        self,
        repository: InMemoryCatalogueRepository,
        checker: InMemoryPermissionChecker,
    ) -> None:
        service = make_service(repository, checker, auto_stock_id=False)

        with pytest.raises(RequiredFieldError):
            await service.create_product(ProductData(title="Boot"), ADMIN_MEMBER)
        assert await repository.list_products() == []

    @pytest.mark.asyncio
    async def test_custom_separator(
        self,
        repository: InMemoryCatalogueRepository,
        checker: InMemoryPermissionChecker,
    ) -> None:
        service = make_service(repository, checker, stock_id_separator="_")
        product = await service.create_product(ProductData(title="Wool Hat"), ADMIN_MEMBER)
        assert product.stock_id == "WH_1"

    @pytest.mark.asyncio
    async def test_title_required(self, service: CatalogueService) -> None:
        with pytest.raises(RequiredFieldError):
            await service.create_product(ProductData(title="  "), ADMIN_MEMBER)

    @pytest.mark.asyncio
    async def test_unknown_category(self, service: CatalogueService) -> None:
        with pytest.raises(CategoryNotFoundError):
            await service.create_product(
                ProductData(title="Boot", category_ids=[99]), ADMIN_MEMBER
            )

    @pytest.mark.asyncio
    async def test_related_products(self, service: CatalogueService) -> None:
        laces = await service.create_product(ProductData(title="Laces"), ADMIN_MEMBER)
        boot = await service.create_product(
            ProductData(title="Boot", related=[RelatedData(product_id=laces.id)]),
            ADMIN_MEMBER,
        )
        assert service.product_details(boot).related_products_list == "L-1"

    @pytest.mark.asyncio
    async def test_permission_denied(self, service: CatalogueService) -> None:
        with pytest.raises(PermissionDeniedError):
            await service.create_product(ProductData(title="Boot"), Member(id=2))
        with pytest.raises(PermissionDeniedError):
            await service.create_product(ProductData(title="Boot"), None)

    @pytest.mark.asyncio
    async def test_specific_permission_code(
        self,
        service: CatalogueService,
        checker: InMemoryPermissionChecker,
    ) -> None:
        checker.grant(2, "CATALOGUE_ADD_PRODUCTS")
        product = await service.create_product(ProductData(title="Boot"), Member(id=2))

        with pytest.raises(PermissionDeniedError):
            await service.delete_product(product.id, Member(id=2))

    @pytest.mark.asyncio
    async def test_new_tags_need_tag_permission(
        self,
        service: CatalogueService,
        checker: InMemoryPermissionChecker,
    ) -> None:
        checker.grant(5, "CATALOGUE_ADD_PRODUCTS")
        await service.create_product(ProductData(title="Hat", tags=["sale"]), ADMIN_MEMBER)

        with pytest.raises(PermissionDeniedError) as exc_info:
            await service.create_product(
                ProductData(title="Boot", tags=["sale", "brand-new"]), Member(id=5)
            )
        assert exc_info.value.details["entity_type"] == "tag"
        assert len(await service.list_products()) == 1

        boot = await service.create_product(ProductData(title="Boot", tags=["sale"]), Member(id=5))
        assert [tag.title for tag in boot.tags] == ["sale"]

    @pytest.mark.asyncio
    async def test_tag_permission_allows_new_tags(
        self,
        service: CatalogueService,
        checker: InMemoryPermissionChecker,
    ) -> None:
        checker.grant(5, "CATALOGUE_ADD_PRODUCTS")
        checker.grant(5, "CATALOGUE_ADD_TAGS")

        boot = await service.create_product(
            ProductData(title="Boot", tags=["brand-new"]), Member(id=5)
        )

        assert [tag.title for tag in boot.tags] == ["brand-new"]


class TestUpdateProduct:
    """Tests for product updates."""

    @pytest.mark.asyncio
    async def test_stock_id_kept_on_update(self, service: CatalogueService) -> None:
        """Renaming does not regenerate an existing stock ID."""
        product = await service.create_product(ProductData(title="Blue Suede Shoes"), ADMIN_MEMBER)
        updated = await service.update_product(
            product.id, ProductData(title="Red Suede Shoes"), ADMIN_MEMBER
        )
        assert updated.title == "Red Suede Shoes"
        assert updated.stock_id == "BSS-1"

    @pytest.mark.asyncio
    async def test_cleared_stock_id_regenerated(self, service: CatalogueService) -> None:
        product = await service.create_product(ProductData(title="Blue Suede Shoes"), ADMIN_MEMBER)
        updated = await service.update_product(
            product.id, ProductData(title="Red Shoes", stock_id=""), ADMIN_MEMBER
        )
        assert updated.stock_id == "RS-1"

    @pytest.mark.asyncio
    async def test_failed_update_leaves_product_unchanged(
        self, service: CatalogueService
    ) -> None:
        """A rejected update writes none of its fields."""
        product = await service.create_product(ProductData(title="Boot"), ADMIN_MEMBER)

        with pytest.raises(CategoryNotFoundError):
            await service.update_product(
                product.id, ProductData(title="Renamed", category_ids=[999]), ADMIN_MEMBER
            )
        with pytest.raises(RequiredFieldError):
            await service.update_product(product.id, ProductData(title=""), ADMIN_MEMBER)
        with pytest.raises(ProductNotFoundError):
            await service.update_product(
                product.id,
                ProductData(title="Renamed", related=[RelatedData(product_id=999)]),
                ADMIN_MEMBER,
            )

        stored = await service.get_product(product.id)
        assert stored.title == "Boot"
        assert stored.related_products == []

    @pytest.mark.asyncio
    async def test_negative_price_leaves_product_unchanged(
        self, service: CatalogueService
    ) -> None:
        product = await service.create_product(ProductData(title="Boot"), ADMIN_MEMBER)

        with pytest.raises(MoneyError):
            await service.update_product(
                product.id, ProductData(title="Renamed", price_cents=-1), ADMIN_MEMBER
            )

        assert (await service.get_product(product.id)).title == "Boot"

    @pytest.mark.asyncio
    async def test_update_missing(self, service: CatalogueService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.update_product(99, ProductData(title="X"), ADMIN_MEMBER)

    @pytest.mark.asyncio
    async def test_bulk_set_disabled_skips_missing(self, service: CatalogueService) -> None:
        product = await service.create_product(ProductData(title="Boot"), ADMIN_MEMBER)

        changed = await service.bulk_set_disabled([product.id, 99], True, ADMIN_MEMBER)

        assert changed == [product.id]
        assert (await service.get_product(product.id)).disabled

    @pytest.mark.asyncio
    async def test_delete(self, service: CatalogueService) -> None:
        product = await service.create_product(ProductData(title="Boot"), ADMIN_MEMBER)
        await service.delete_product(product.id, ADMIN_MEMBER)

        with pytest.raises(ProductNotFoundError):
            await service.get_product(product.id)
        with pytest.raises(ProductNotFoundError):
            await service.delete_product(product.id, ADMIN_MEMBER)


class TestCategories:
    """Tests for category management."""

    @pytest.mark.asyncio
    async def test_url_segment_from_title(self, service: CatalogueService) -> None:
        category = await service.create_category(CategoryData(title="Blue Shoes"), ADMIN_MEMBER)
        assert category.url_segment == "blue-shoes"

    @pytest.mark.asyncio
    async def test_parent_assigned(self, service: CatalogueService) -> None:
        ids = await build_tree(service)
        shoes = await service.get_category(ids["Shoes"])
        assert service.resolver.full_hierarchy(shoes) == "Apparel > Clothing > Shoes"

    @pytest.mark.asyncio
    async def test_self_parent_rejected(self, service: CatalogueService) -> None:
        ids = await build_tree(service)
        with pytest.raises(InvalidCategoryHierarchyError):
            await service.update_category(
                ids["Shoes"], CategoryData(parent_id=ids["Shoes"]), ADMIN_MEMBER
            )

    @pytest.mark.asyncio
    async def test_parent_zero_detaches(self, service: CatalogueService) -> None:
        ids = await build_tree(service)
        shoes = await service.update_category(ids["Shoes"], CategoryData(parent_id=0), ADMIN_MEMBER)
        assert shoes.parent is None
        assert (await service.get_category(ids["Clothing"])).children == []

    @pytest.mark.asyncio
    async def test_indirect_cycle_still_resolves(self, service: CatalogueService) -> None:
        """Deeper cycles are stored; traversal stays finite."""
        ids = await build_tree(service)
        await service.update_category(
            ids["Apparel"], CategoryData(parent_id=ids["Shoes"]), ADMIN_MEMBER
        )
        trail = await service.category_breadcrumbs(ids["Shoes"])
        assert [entry.title for entry in trail] == ["Apparel", "Clothing", "Shoes"]

    @pytest.mark.asyncio
    async def test_failed_update_leaves_category_unchanged(
        self, service: CatalogueService
    ) -> None:
        ids = await build_tree(service)

        with pytest.raises(InvalidCategoryHierarchyError):
            await service.update_category(
                ids["Shoes"], CategoryData(title="Hats", parent_id=ids["Shoes"]), ADMIN_MEMBER
            )
        with pytest.raises(CategoryNotFoundError):
            await service.update_category(
                ids["Shoes"], CategoryData(title="Hats", parent_id=99), ADMIN_MEMBER
            )

        shoes = await service.get_category(ids["Shoes"])
        assert shoes.title == "Shoes"
        assert shoes.url_segment == "shoes"
        assert shoes.parent_id == ids["Clothing"]

    @pytest.mark.asyncio
    async def test_unknown_parent(self, service: CatalogueService) -> None:
        with pytest.raises(CategoryNotFoundError):
            await service.create_category(CategoryData(title="X", parent_id=99), ADMIN_MEMBER)

    @pytest.mark.asyncio
    async def test_category_permission_denied(
        self,
        service: CatalogueService,
        checker: InMemoryPermissionChecker,
    ) -> None:
        checker.grant(2, "CATALOGUE_ADD_PRODUCTS")
        with pytest.raises(PermissionDeniedError):
            await service.create_category(CategoryData(title="X"), Member(id=2))

    @pytest.mark.asyncio
    async def test_import_taxonomy(self, service: CatalogueService) -> None:
        categories = await service.import_taxonomy(member=ADMIN_MEMBER)

        assert len(categories) == 15
        laptops = next(c for c in categories if c.title == "Laptops")
        stored = await service.get_category(laptops.id)
        assert service.resolver.full_hierarchy(stored) == "Electronics > Computers > Laptops"

    @pytest.mark.asyncio
    async def test_import_taxonomy_lines(self, service: CatalogueService) -> None:
        categories = await service.import_taxonomy(
            ["7 - Toys > Puzzles", "3 - Toys"], member=ADMIN_MEMBER
        )
        assert [c.title for c in categories] == ["Toys", "Puzzles"]
        assert [c.id for c in categories] == [1, 2]


class TestHierarchyViews:
    """Tests for breadcrumbs, levels and presentation values."""

    @pytest.mark.asyncio
    async def test_product_breadcrumbs(self, service: CatalogueService) -> None:
        ids = await build_tree(service)
        product = await service.create_product(
            ProductData(title="Blue Suede Shoes", category_ids=[ids["Shoes"]]), ADMIN_MEMBER
        )

        trail = await service.product_breadcrumbs(product.id)

        assert [entry.title for entry in trail] == [
            "Apparel",
            "Clothing",
            "Shoes",
            "Blue Suede Shoes",
        ]
        assert trail[-1].link == "/1"

    @pytest.mark.asyncio
    async def test_breadcrumb_depth_setting(
        self,
        repository: InMemoryCatalogueRepository,
        checker: InMemoryPermissionChecker,
    ) -> None:
        service = make_service(repository, checker)
        service.settings.breadcrumb_max_depth = 2
        ids = await build_tree(service)

        trail = await service.category_breadcrumbs(ids["Shoes"])

        assert [entry.title for entry in trail] == ["Apparel", "Shoes"]

    @pytest.mark.asyncio
    async def test_levels(self, service: CatalogueService) -> None:
        ids = await build_tree(service)
        product = await service.create_product(
            ProductData(title="Boot", category_ids=[ids["Shoes"]]), ADMIN_MEMBER
        )

        assert (await service.product_level(product.id, 1)).title == "Apparel"
        assert (await service.product_level(product.id, 4)).title == "Boot"
        assert await service.product_level(product.id, 5) is None
        assert (await service.category_level(ids["Shoes"], 2)).title == "Clothing"

    @pytest.mark.asyncio
    async def test_product_details(self, service: CatalogueService) -> None:
        ids = await build_tree(service)
        product = await service.create_product(
            ProductData(
                title="Blue Suede Shoes",
                category_ids=[ids["Shoes"]],
                tags=["sale", "suede", "sale"],
            ),
            ADMIN_MEMBER,
        )

        details = service.product_details(product)

        assert details.link == "/1"
        assert details.absolute_link == "http://shop.test/1"
        assert details.primary_image.name == "no-image.png"
        assert details.categories_list == "Apparel > Clothing > Shoes"
        assert details.tags_list == "sale, suede"

    @pytest.mark.asyncio
    async def test_site_default_image(
        self,
        repository: InMemoryCatalogueRepository,
        checker: InMemoryPermissionChecker,
    ) -> None:
        service = make_service(
            repository,
            checker,
            default_product_image_url="/img/default.png",
        )
        product = await service.create_product(ProductData(title="Boot"), ADMIN_MEMBER)

        image = service.product_details(product).primary_image

        assert image.name == "default.png"
        assert image.url == "/img/default.png"

    @pytest.mark.asyncio
    async def test_grid_and_export(self, service: CatalogueService) -> None:
        for title in ["Wool Hat", "Blue Suede Shoes", "Canvas Shoes"]:
            await service.create_product(ProductData(title=title), ADMIN_MEMBER)

        page = await service.product_grid(query="shoes", page=1, page_size=1)
        assert page.total == 2
        assert page.items[0]["title"] == "Blue Suede Shoes"
        assert page.has_next

        export = await service.export_products_csv()
        assert export.splitlines()[0].startswith("ID,Stock ID,Title")
        assert len(export.splitlines()) == 4

    @pytest.mark.asyncio
    async def test_can_view(
        self,
        repository: InMemoryCatalogueRepository,
        checker: InMemoryPermissionChecker,
    ) -> None:
        service = make_service(repository, checker, site_can_view_type="LoggedInUsers")
        assert service.can_view(Member(id=7))
        assert not service.can_view(None)
