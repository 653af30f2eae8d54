"""SQLAlchemy models for the product catalogue.

Defines category, product, tag and image tables plus the join tables
that keep the stored order of categories, tags, images and related
products. ``sort_order`` on images and related products is the
admin-chosen display order, separate from ``position``.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalogue_admin.infrastructure.database import Base


class CategoryRecord(Base):
    """Category row.

    ``parent_id`` is a plain back reference. Nothing at the database
    level prevents cycles.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    url_segment: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    disabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<CategoryRecord(id={self.id}, title={self.title})>"


class ProductCategoryRecord(Base):
    """Category membership of a product.

    ``position`` keeps the order categories were assigned in; the first
    one is the product's parent.
    """

    __tablename__ = "category_products"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class TagRecord(Base):
    """Product tag row."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)


class ProductTagRecord(Base):
    """Tag attached to a product at a stored position."""

    __tablename__ = "product_tags"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[int] = mapped_column(ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tag: Mapped[TagRecord] = relationship(TagRecord, lazy="joined")


class ImageRecord(Base):
    """Stored image file reference."""

    __tablename__ = "images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)


class ProductImageRecord(Base):
    """Image attached to a product with its display sort order."""

    __tablename__ = "product_images"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    image_id: Mapped[int] = mapped_column(
        ForeignKey("images.id", ondelete="CASCADE"), primary_key=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    image: Mapped[ImageRecord] = relationship(ImageRecord, lazy="joined")


class RelatedProductRecord(Base):
    """Related product row with its display sort order."""

    __tablename__ = "product_related"

    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    related_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), primary_key=True
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    related: Mapped["ProductRecord"] = relationship(
        "ProductRecord",
        foreign_keys=[related_id],
        lazy="joined",
    )


class ProductRecord(Base):
    """Product row.

    Attributes:
        id: Product ID, assigned on insert.
        title: Product title.
        stock_id: Stock identifier, filled in after the first insert when empty.
        price_amount: Price in cents, excluding tax.
        price_currency: Currency code.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    stock_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    weight: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    disabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    categories: Mapped[list[ProductCategoryRecord]] = relationship(
        ProductCategoryRecord,
        order_by=ProductCategoryRecord.position,
        cascade="all, delete-orphan",
    )
    tags: Mapped[list[ProductTagRecord]] = relationship(
        ProductTagRecord,
        order_by=ProductTagRecord.position,
        cascade="all, delete-orphan",
    )
    images: Mapped[list[ProductImageRecord]] = relationship(
        ProductImageRecord,
        order_by=ProductImageRecord.position,
        cascade="all, delete-orphan",
    )
    related_products: Mapped[list[RelatedProductRecord]] = relationship(
        RelatedProductRecord,
        foreign_keys=[RelatedProductRecord.product_id],
        order_by=RelatedProductRecord.position,
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductRecord(id={self.id}, stock_id={self.stock_id}, title={self.title[:30]})>"
