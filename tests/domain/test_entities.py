"""Tests for catalogue entities."""

from catalogue_admin.domain.entities import Category, Product, RelatedProduct, Tag


class TestEntityIdentity:
    """Tests for identity based equality."""

    def test_same_id_equal(self) -> None:
        assert Category(id=1, title="A") == Category(id=1, title="Renamed")

    def test_different_types_not_equal(self) -> None:
        assert Category(id=1, title="A") != Product(id=1, title="A")

    def test_unsaved_only_equal_to_itself(self) -> None:
        a = Tag(id=None, title="sale")
        b = Tag(id=None, title="sale")
        assert a == a
        assert a != b
        assert len({a, b}) == 2

    def test_cyclic_graph_is_comparable(self) -> None:
        """Equality does not recurse into parent references."""
        a = Category(id=1, title="A")
        b = Category(id=2, title="B", parent=a)
        a.parent = b
        assert a != b
        assert a in {a, b}


class TestCategory:
    """Tests for Category entity."""

    def test_parent_id(self) -> None:
        root = Category(id=1, title="Root")
        child = Category(id=2, title="Child", parent=root)
        assert child.parent_id == 1
        assert root.parent_id is None

    def test_enabled_flags(self) -> None:
        category = Category(id=1, title="Sale", disabled=True)
        assert category.is_disabled()
        assert not category.is_enabled()
        assert category.menu_title == "Sale"


class TestProduct:
    """Tests for Product entity."""

    def test_parent_is_first_category(self) -> None:
        shoes = Category(id=1, title="Shoes")
        hats = Category(id=2, title="Hats")
        product = Product(id=1, title="Boot", categories=[shoes, hats])
        assert product.parent is shoes

    def test_no_parent_without_categories(self) -> None:
        assert Product(id=1, title="Boot").parent is None

    def test_defaults(self) -> None:
        product = Product(id=None)
        assert product.price.amount_cents == 0
        assert product.stock_id is None
        assert product.is_enabled()

    def test_sorted_related_products(self) -> None:
        """Related products sort by position, then title."""
        product = Product(
            id=1,
            title="Boot",
            related_products=[
                RelatedProduct(Product(id=2, title="Polish"), sort_order=1),
                RelatedProduct(Product(id=3, title="Laces"), sort_order=1),
                RelatedProduct(Product(id=4, title="Socks"), sort_order=0),
            ],
        )
        assert [p.title for p in product.sorted_related_products()] == [
            "Socks",
            "Laces",
            "Polish",
        ]
