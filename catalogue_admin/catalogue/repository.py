"""Catalogue repositories.

The service talks to storage through ``CatalogueRepository``. Reads
return detached domain snapshots: categories come back as a fully
linked graph so hierarchy traversal never goes back to storage.

Two implementations are provided:
- ``InMemoryCatalogueRepository`` keeps entities in process memory.
- ``SqlCatalogueRepository`` maps to the SQLAlchemy models.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from catalogue_admin.catalogue.models import (
    CategoryRecord,
    ImageRecord,
    ProductCategoryRecord,
    ProductImageRecord,
    ProductRecord,
    ProductTagRecord,
    RelatedProductRecord,
    TagRecord,
)
from catalogue_admin.domain.entities import (
    Category,
    Product,
    ProductImage,
    RelatedProduct,
    Tag,
)
from catalogue_admin.domain.exceptions import CategoryNotFoundError, ProductNotFoundError
from catalogue_admin.domain.value_objects import ImageRef, Money


class CatalogueRepository(ABC):
    """Persistence collaborator for products and categories."""

    @abstractmethod
    async def get_product(self, product_id: int) -> Product | None:
        """Get product by ID, None if not found."""

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """Get all products."""

    @abstractmethod
    async def save_product(self, product: Product) -> Product:
        """Write a product, assigning an ID on first write.

        Args:
            product: Product to write.

        Returns:
            The same product with its ID set.
        """

    @abstractmethod
    async def delete_product(self, product_id: int) -> bool:
        """Delete a product. Returns False if it did not exist."""

    @abstractmethod
    async def existing_tag_titles(self, titles: Sequence[str]) -> set[str]:
        """Get which of the given tag titles are already stored."""

    @abstractmethod
    async def get_category(self, category_id: int) -> Category | None:
        """Get category by ID, None if not found."""

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """Get all categories."""

    @abstractmethod
    async def save_category(self, category: Category) -> Category:
        """Write a category, assigning an ID on first write."""

    @abstractmethod
    async def delete_category(self, category_id: int) -> bool:
        """Delete a category. Children become roots."""


# ============================================================================
# In-Memory Repository
# ============================================================================


class InMemoryCatalogueRepository(CatalogueRepository):
    """In-memory catalogue storage.

    IDs are assigned from per-table counters, starting at 1.
    """

    def __init__(self) -> None:
        self._products: dict[int, Product] = {}
        self._categories: dict[int, Category] = {}
        self._tags: dict[str, Tag] = {}
        self._next_product_id = 1
        self._next_category_id = 1
        self._next_tag_id = 1

    async def get_product(self, product_id: int) -> Product | None:
        return self._products.get(product_id)

    async def list_products(self) -> list[Product]:
        return list(self._products.values())

    async def save_product(self, product: Product) -> Product:
        if product.id is None:
            product.id = self._next_product_id
            self._next_product_id += 1
        elif product.id >= self._next_product_id:
            self._next_product_id = product.id + 1

        product.tags = [self._resolve_tag(tag) for tag in product.tags]
        self._products[product.id] = product

        for category in self._categories.values():
            member = product in category.products
            wanted = category in product.categories
            if member and not wanted:
                category.products.remove(product)
            elif wanted and not member:
                category.products.append(product)

        return product

    async def existing_tag_titles(self, titles: Sequence[str]) -> set[str]:
        return {title for title in titles if title in self._tags}

    def _resolve_tag(self, tag: Tag) -> Tag:
        existing = self._tags.get(tag.title)
        if existing is not None:
            return existing
        if tag.id is None:
            tag.id = self._next_tag_id
            self._next_tag_id += 1
        self._tags[tag.title] = tag
        return tag

    async def delete_product(self, product_id: int) -> bool:
        product = self._products.pop(product_id, None)
        if product is None:
            return False
        for category in self._categories.values():
            if product in category.products:
                category.products.remove(product)
        for other in self._products.values():
            other.related_products = [
                row for row in other.related_products if row.product != product
            ]
        return True

    async def get_category(self, category_id: int) -> Category | None:
        return self._categories.get(category_id)

    async def list_categories(self) -> list[Category]:
        return list(self._categories.values())

    async def save_category(self, category: Category) -> Category:
        if category.id is None:
            category.id = self._next_category_id
            self._next_category_id += 1
        elif category.id >= self._next_category_id:
            self._next_category_id = category.id + 1

        self._categories[category.id] = category

        for other in self._categories.values():
            if category in other.children and category.parent is not other:
                other.children.remove(category)
        if category.parent is not None and category not in category.parent.children:
            category.parent.children.append(category)

        return category

    async def delete_category(self, category_id: int) -> bool:
        category = self._categories.pop(category_id, None)
        if category is None:
            return False
        for child in category.children:
            child.parent = None
        if category.parent is not None and category in category.parent.children:
            category.parent.children.remove(category)
        for product in self._products.values():
            product.categories = [c for c in product.categories if c != category]
        return True


# ============================================================================
# SQLAlchemy Repository
# ============================================================================


class SqlCatalogueRepository(CatalogueRepository):
    """Repository for catalogue database operations.

    Example usage:
        async with get_session_factory()() as session:
            repo = SqlCatalogueRepository(session)
            product = await repo.get_product(42)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    async def _category_graph(self) -> dict[int, Category]:
        result = await self.session.execute(select(CategoryRecord))
        return build_category_graph(result.scalars().all())

    @staticmethod
    def _product_query():
        # Rows already in the session are refreshed along with their relations.
        return (
            select(ProductRecord)
            .options(
                selectinload(ProductRecord.categories),
                selectinload(ProductRecord.tags),
                selectinload(ProductRecord.images),
                selectinload(ProductRecord.related_products),
            )
            .execution_options(populate_existing=True)
        )

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    async def get_product(self, product_id: int) -> Product | None:
        result = await self.session.execute(
            self._product_query().where(ProductRecord.id == product_id)
        )
        record = result.scalar_one_or_none()
        if record is None:
            return None
        return product_to_domain(record, await self._category_graph())

    async def list_products(self) -> list[Product]:
        result = await self.session.execute(
            self._product_query().order_by(ProductRecord.title)
        )
        graph = await self._category_graph()
        return [product_to_domain(record, graph) for record in result.scalars().all()]

    async def save_product(self, product: Product) -> Product:
        if product.id is None:
            record = ProductRecord(categories=[], tags=[], images=[], related_products=[])
            self.session.add(record)
        else:
            result = await self.session.execute(
                self._product_query().where(ProductRecord.id == product.id)
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise ProductNotFoundError(product.id)

        # Tag and image lookups must not flush the half-mapped record.
        with self.session.no_autoflush:
            await self._map_product(record, product)

        await self.session.flush()
        product.id = record.id
        for tag, row in zip(product.tags, record.tags):
            tag.id = row.tag.id
        product.images = [
            replace(image, image=replace(image.image, id=row.image_id))
            for image, row in zip(product.images, record.images)
        ]
        return product

    async def _map_product(self, record: ProductRecord, product: Product) -> None:
        record.title = product.title
        record.stock_id = product.stock_id
        record.content = product.content
        record.content_summary = product.content_summary
        record.price_amount = product.price.amount_cents
        record.price_currency = product.price.currency
        record.weight = product.weight
        record.disabled = product.disabled

        existing_categories = {row.category_id: row for row in record.categories}
        record.categories = [
            _reuse(existing_categories, c.id, ProductCategoryRecord(category_id=c.id), position=i)
            for i, c in enumerate(product.categories)
            if c.id is not None
        ]

        existing_tags = {row.tag_id: row for row in record.tags}
        tag_rows = []
        for i, tag_record in enumerate(await self._resolve_tags(product.tags)):
            tag_rows.append(
                _reuse(existing_tags, tag_record.id, ProductTagRecord(tag=tag_record), position=i)
            )
        record.tags = tag_rows

        existing_images = {row.image_id: row for row in record.images}
        image_rows = []
        for i, row in enumerate(product.images):
            image = await self._resolve_image(row.image)
            image_rows.append(
                _reuse(
                    existing_images,
                    image.id,
                    ProductImageRecord(image=image),
                    sort_order=row.sort_order,
                    position=i,
                )
            )
        record.images = image_rows

        existing_related = {row.related_id: row for row in record.related_products}
        record.related_products = [
            _reuse(
                existing_related,
                row.product.id,
                RelatedProductRecord(related_id=row.product.id),
                sort_order=row.sort_order,
                position=i,
            )
            for i, row in enumerate(product.related_products)
            if row.product.id is not None
        ]

    async def _resolve_tags(self, tags: Sequence[Tag]) -> list[TagRecord]:
        titles = [tag.title for tag in tags]
        if not titles:
            return []
        result = await self.session.execute(select(TagRecord).where(TagRecord.title.in_(titles)))
        by_title = {record.title: record for record in result.scalars().all()}
        records = []
        for title in titles:
            if title not in by_title:
                by_title[title] = TagRecord(title=title)
                self.session.add(by_title[title])
            records.append(by_title[title])
        return records

    async def existing_tag_titles(self, titles: Sequence[str]) -> set[str]:
        if not titles:
            return set()
        result = await self.session.execute(
            select(TagRecord.title).where(TagRecord.title.in_(list(titles)))
        )
        return set(result.scalars().all())

    async def _resolve_image(self, image: ImageRef) -> ImageRecord:
        if image.id is not None:
            record = await self.session.get(ImageRecord, image.id)
            if record is not None:
                return record
        record = ImageRecord(name=image.name, url=image.url)
        self.session.add(record)
        await self.session.flush()
        return record

    async def delete_product(self, product_id: int) -> bool:
        result = await self.session.execute(
            self._product_query().where(ProductRecord.id == product_id)
        )
        record = result.scalar_one_or_none()
        if record is None:
            return False
        await self.session.delete(record)
        await self.session.flush()
        return True

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def get_category(self, category_id: int) -> Category | None:
        graph = await self._category_graph()
        category = graph.get(category_id)
        if category is None:
            return None

        result = await self.session.execute(
            self._product_query()
            .join(ProductCategoryRecord, ProductCategoryRecord.product_id == ProductRecord.id)
            .where(ProductCategoryRecord.category_id == category_id)
            .order_by(ProductRecord.title)
        )
        category.products = [product_to_domain(r, graph) for r in result.scalars().all()]
        return category

    async def list_categories(self) -> list[Category]:
        return list((await self._category_graph()).values())

    async def save_category(self, category: Category) -> Category:
        if category.id is None:
            record = CategoryRecord()
            self.session.add(record)
        else:
            record = await self.session.get(CategoryRecord, category.id)
            if record is None:
                raise CategoryNotFoundError(category.id)

        record.title = category.title
        record.url_segment = category.url_segment
        record.disabled = category.disabled
        record.parent_id = category.parent_id

        await self.session.flush()
        category.id = record.id
        return category

    async def delete_category(self, category_id: int) -> bool:
        record = await self.session.get(CategoryRecord, category_id)
        if record is None:
            return False
        await self.session.delete(record)
        await self.session.flush()
        return True


def _reuse(existing: dict, key, fresh, **values):
    row = existing.get(key, fresh)
    for name, value in values.items():
        setattr(row, name, value)
    return row


def build_category_graph(records: Sequence[CategoryRecord]) -> dict[int, Category]:
    """Link category rows into a graph of Category entities.

    A ``parent_id`` pointing at a missing row leaves the category as a root.

    Args:
        records: Category rows.

    Returns:
        Categories by ID, in row order.
    """
    graph = {
        r.id: Category(id=r.id, title=r.title, url_segment=r.url_segment, disabled=r.disabled)
        for r in records
    }
    for r in records:
        parent = graph.get(r.parent_id) if r.parent_id is not None else None
        if parent is not None:
            graph[r.id].parent = parent
            parent.children.append(graph[r.id])
    return graph


def product_to_domain(record: ProductRecord, graph: dict[int, Category]) -> Product:
    """Map a product row and its loaded relations to a Product.

    Related products are mapped shallowly: only ID, title and stock ID.

    Args:
        record: Product row with relations loaded.
        graph: Category graph from ``build_category_graph``.

    Returns:
        Detached Product.
    """
    return Product(
        id=record.id,
        title=record.title,
        stock_id=record.stock_id,
        content=record.content or "",
        content_summary=record.content_summary or "",
        price=Money(amount_cents=record.price_amount, currency=record.price_currency),
        weight=record.weight,
        disabled=record.disabled,
        images=[
            ProductImage(
                image=ImageRef(name=row.image.name, url=row.image.url, id=row.image.id),
                sort_order=row.sort_order,
            )
            for row in record.images
        ],
        tags=[Tag(id=row.tag.id, title=row.tag.title) for row in record.tags],
        related_products=[
            RelatedProduct(
                product=Product(
                    id=row.related.id,
                    title=row.related.title,
                    stock_id=row.related.stock_id,
                ),
                sort_order=row.sort_order,
            )
            for row in record.related_products
        ],
        categories=[graph[row.category_id] for row in record.categories if row.category_id in graph],
    )
