"""API schemas for the catalogue admin API.

Pydantic models for request/response validation and serialization.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class PriceSchema(BaseModel):
    """Price representation."""

    amount: int = Field(..., ge=0, description="Amount in smallest currency unit (cents)")
    currency: str = Field(default="USD", min_length=3, max_length=3, description="Currency code")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class ImageSchema(BaseModel):
    """Image reference."""

    id: int | None = Field(default=None, description="Stored image ID")
    name: str = Field(..., description="File name")
    url: str = Field(..., description="Public URL")


class BreadcrumbSchema(BaseModel):
    """Breadcrumb trail entry."""

    title: str
    link: str


class BreadcrumbsResponse(BaseModel):
    """Breadcrumb trail, root first."""

    items: list[BreadcrumbSchema]


# ============================================================================
# Product Schemas
# ============================================================================


class ProductImageInput(BaseModel):
    """Image attached to a product."""

    id: int | None = None
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    sort_order: int = 0


class RelatedProductInput(BaseModel):
    """Related product with sort position."""

    product_id: int
    sort_order: int = 0


class ProductCreateRequest(BaseModel):
    """Request to create a product."""

    title: str = Field(..., min_length=1, max_length=255)
    stock_id: str | None = Field(default=None, max_length=100)
    content: str = ""
    content_summary: str = ""
    price: PriceSchema = Field(default_factory=lambda: PriceSchema(amount=0))
    weight: Decimal = Field(default=Decimal("0"), ge=0)
    disabled: bool = False
    category_ids: list[int] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    images: list[ProductImageInput] = Field(default_factory=list)
    related: list[RelatedProductInput] = Field(default_factory=list)


class ProductUpdateRequest(BaseModel):
    """Request to update a product. Omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    stock_id: str | None = Field(default=None, max_length=100)
    content: str | None = None
    content_summary: str | None = None
    price: PriceSchema | None = None
    weight: Decimal | None = Field(default=None, ge=0)
    disabled: bool | None = None
    category_ids: list[int] | None = None
    tags: list[str] | None = None
    images: list[ProductImageInput] | None = None
    related: list[RelatedProductInput] | None = None


class ProductResponse(BaseModel):
    """Product with derived display values."""

    id: int
    title: str
    stock_id: str | None
    content: str
    content_summary: str
    price: PriceSchema
    weight: Decimal
    disabled: bool
    link: str
    absolute_link: str
    primary_image: ImageSchema
    images: list[ImageSchema]
    category_ids: list[int]
    categories_list: str
    tags_list: str
    images_list: str
    related_products_list: str
    breadcrumbs: list[BreadcrumbSchema]


class ProductGridResponse(BaseModel):
    """One page of the admin product grid."""

    items: list[dict]
    total: int
    page: int
    page_size: int
    has_more: bool


class BulkActionRequest(BaseModel):
    """Products to enable or disable."""

    product_ids: list[int] = Field(..., min_length=1)


class BulkActionResponse(BaseModel):
    """Result of a bulk action."""

    action: str
    changed: list[int]


# ============================================================================
# Category Schemas
# ============================================================================


class CategoryCreateRequest(BaseModel):
    """Request to create a category."""

    title: str = Field(..., min_length=1, max_length=255)
    url_segment: str | None = None
    parent_id: int | None = None
    disabled: bool = False


class CategoryUpdateRequest(BaseModel):
    """Request to update a category. ``parent_id=0`` makes it a root."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    url_segment: str | None = None
    parent_id: int | None = Field(default=None, ge=0)
    disabled: bool | None = None


class CategoryResponse(BaseModel):
    """Category with derived display values."""

    id: int
    title: str
    url_segment: str
    disabled: bool
    parent_id: int | None
    child_ids: list[int]
    link: str
    full_hierarchy: str
    breadcrumbs: list[BreadcrumbSchema]


class CategoryListResponse(BaseModel):
    """All categories."""

    items: list[CategoryResponse]
    total: int


class LevelResponse(BaseModel):
    """Entity found at a hierarchy level."""

    level: int
    kind: str
    id: int | None
    title: str
