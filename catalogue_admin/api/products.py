"""Product API endpoints.

Provides the admin product grid, CSV export, bulk actions and
product create/read/update/delete with derived display values.
"""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status

from catalogue_admin.api.dependencies import MemberDep, ServiceDep
from catalogue_admin.api.schemas import (
    BreadcrumbSchema,
    BreadcrumbsResponse,
    BulkActionRequest,
    BulkActionResponse,
    ErrorResponse,
    ImageSchema,
    LevelResponse,
    PriceSchema,
    ProductCreateRequest,
    ProductGridResponse,
    ProductImageInput,
    ProductResponse,
    ProductUpdateRequest,
    RelatedProductInput,
)
from catalogue_admin.application.catalogue_service import (
    CatalogueService,
    ImageData,
    ProductData,
    ProductDetails,
    RelatedData,
)
from catalogue_admin.catalogue.grid import BULK_ACTIONS
from catalogue_admin.catalogue.hierarchy import CatalogueEntity
from catalogue_admin.domain.entities import Product
from catalogue_admin.domain.value_objects import ImageRef, Member

router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Converters
# ============================================================================


def image_to_schema(image: ImageRef) -> ImageSchema:
    return ImageSchema(id=image.id, name=image.name, url=image.url)


def details_to_response(details: ProductDetails) -> ProductResponse:
    """Convert product details to response schema."""
    product = details.product
    return ProductResponse(
        id=product.id,
        title=product.title,
        stock_id=product.stock_id,
        content=product.content,
        content_summary=product.content_summary,
        price=PriceSchema(amount=product.price.amount_cents, currency=product.price.currency),
        weight=product.weight,
        disabled=product.disabled,
        link=details.link,
        absolute_link=details.absolute_link,
        primary_image=image_to_schema(details.primary_image),
        images=[image_to_schema(image) for image in details.images],
        category_ids=[c.id for c in product.categories if c.id is not None],
        categories_list=details.categories_list,
        tags_list=details.tags_list,
        images_list=details.images_list,
        related_products_list=details.related_products_list,
        breadcrumbs=[BreadcrumbSchema(title=b.title, link=b.link) for b in details.breadcrumbs],
    )


def level_to_response(level: int, entity: CatalogueEntity) -> LevelResponse:
    return LevelResponse(
        level=level,
        kind="product" if isinstance(entity, Product) else "category",
        id=entity.id,
        title=entity.title,
    )


def _images(rows: list[ProductImageInput] | None) -> list[ImageData] | None:
    if rows is None:
        return None
    return [ImageData(name=r.name, url=r.url, sort_order=r.sort_order, id=r.id) for r in rows]


def _related(rows: list[RelatedProductInput] | None) -> list[RelatedData] | None:
    if rows is None:
        return None
    return [RelatedData(product_id=r.product_id, sort_order=r.sort_order) for r in rows]


def _require_view(service: CatalogueService, member: Member | None) -> None:
    if not service.can_view(member):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error_code": "VIEW_FORBIDDEN",
                "message": "Catalogue is not visible to this member",
            },
        )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductGridResponse,
    summary="Product grid",
    description="Search, sort and paginate products as admin grid rows.",
)
async def list_products(
    service: ServiceDep,
    q: Annotated[str | None, Query(description="Search title, content and stock ID")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ProductGridResponse:
    """List products for the admin grid."""
    result = await service.product_grid(query=q, page=page, page_size=page_size)
    return ProductGridResponse(
        items=result.items,
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        has_more=result.has_next,
    )


@router.get(
    "/export",
    summary="Export products",
    description="Export all products as CSV.",
)
async def export_products(service: ServiceDep) -> Response:
    """Export products as CSV."""
    body = await service.export_products_csv()
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="products.csv"'},
    )


@router.post(
    "/bulk/{action}",
    response_model=BulkActionResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Bulk enable or disable",
)
async def bulk_action(
    action: str,
    body: BulkActionRequest,
    service: ServiceDep,
    member: MemberDep,
) -> BulkActionResponse:
    """Enable or disable several products."""
    if action not in BULK_ACTIONS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": "UNKNOWN_BULK_ACTION",
                "message": f"Unknown bulk action: {action}",
            },
        )
    changed = await service.bulk_set_disabled(
        body.product_ids,
        disabled=(action == "disable"),
        member=member,
    )
    return BulkActionResponse(action=action, changed=changed)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Create product",
)
async def create_product(
    body: ProductCreateRequest,
    service: ServiceDep,
    member: MemberDep,
) -> ProductResponse:
    """Create a product. A stock ID is generated when none is given."""
    product = await service.create_product(
        ProductData(
            title=body.title,
            stock_id=body.stock_id,
            content=body.content,
            content_summary=body.content_summary,
            price_cents=body.price.amount,
            currency=body.price.currency,
            weight=body.weight,
            disabled=body.disabled,
            category_ids=body.category_ids,
            tags=body.tags,
            images=_images(body.images),
            related=_related(body.related),
        ),
        member=member,
    )
    return details_to_response(service.product_details(product))


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(
    product_id: int,
    service: ServiceDep,
    member: MemberDep,
    max_depth: Annotated[int | None, Query(ge=0)] = None,
) -> ProductResponse:
    """Get a product with breadcrumbs, images and summary lists."""
    _require_view(service, member)
    product = await service.get_product(product_id)
    return details_to_response(service.product_details(product, max_depth))


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update product",
)
async def update_product(
    product_id: int,
    body: ProductUpdateRequest,
    service: ServiceDep,
    member: MemberDep,
) -> ProductResponse:
    """Update a product. Omitted fields keep their values."""
    product = await service.update_product(
        product_id,
        ProductData(
            title=body.title,
            stock_id=body.stock_id,
            content=body.content,
            content_summary=body.content_summary,
            price_cents=body.price.amount if body.price else None,
            currency=body.price.currency if body.price else None,
            weight=body.weight,
            disabled=body.disabled,
            category_ids=body.category_ids,
            tags=body.tags,
            images=_images(body.images),
            related=_related(body.related),
        ),
        member=member,
    )
    return details_to_response(service.product_details(product))


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(
    product_id: int,
    service: ServiceDep,
    member: MemberDep,
) -> Response:
    """Delete a product."""
    await service.delete_product(product_id, member=member)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{product_id}/breadcrumbs",
    response_model=BreadcrumbsResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Product breadcrumbs",
)
async def product_breadcrumbs(
    product_id: int,
    service: ServiceDep,
    max_depth: Annotated[int | None, Query(ge=0)] = None,
) -> BreadcrumbsResponse:
    """Get the breadcrumb trail of a product, root first."""
    trail = await service.product_breadcrumbs(product_id, max_depth)
    return BreadcrumbsResponse(items=[BreadcrumbSchema(title=b.title, link=b.link) for b in trail])


@router.get(
    "/{product_id}/levels/{level}",
    response_model=LevelResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Product hierarchy level",
)
async def product_level(
    product_id: int,
    level: int,
    service: ServiceDep,
) -> LevelResponse:
    """Get the entity at a 1-based level of the product's hierarchy."""
    entity = await service.product_level(product_id, level)
    if entity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": "LEVEL_NOT_FOUND",
                "message": f"Product {product_id} has no level {level}",
            },
        )
    return level_to_response(level, entity)
