"""Shared fixtures for catalogue tests."""

import pytest

from catalogue_admin.catalogue.hierarchy import HierarchyResolver
from catalogue_admin.domain.entities import Category, Product


def make_category(category_id: int, title: str, parent: Category | None = None) -> Category:
    """Create a category linked under ``parent``."""
    category = Category(
        id=category_id,
        title=title,
        url_segment=title.lower().replace(" ", "-"),
        parent=parent,
    )
    if parent is not None:
        parent.children.append(category)
    return category


@pytest.fixture
def resolver() -> HierarchyResolver:
    return HierarchyResolver(base_url="/", absolute_base_url="http://shop.test")


@pytest.fixture
def apparel() -> Category:
    return make_category(1, "Apparel")


@pytest.fixture
def clothing(apparel: Category) -> Category:
    return make_category(2, "Clothing", apparel)


@pytest.fixture
def shoes(clothing: Category) -> Category:
    return make_category(3, "Shoes", clothing)


@pytest.fixture
def hats(apparel: Category) -> Category:
    return make_category(4, "Hats", apparel)


@pytest.fixture
def product(shoes: Category) -> Product:
    """Product filed under Apparel > Clothing > Shoes."""
    return Product(id=42, title="Blue Suede Shoes", categories=[shoes])
