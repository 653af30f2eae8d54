"""Category API endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status

from catalogue_admin.api.dependencies import MemberDep, ServiceDep
from catalogue_admin.api.products import level_to_response
from catalogue_admin.api.schemas import (
    BreadcrumbSchema,
    BreadcrumbsResponse,
    CategoryCreateRequest,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdateRequest,
    ErrorResponse,
    LevelResponse,
)
from catalogue_admin.application.catalogue_service import CategoryData, CategoryDetails

router = APIRouter(prefix="/categories", tags=["Categories"])


def details_to_response(details: CategoryDetails) -> CategoryResponse:
    category = details.category
    return CategoryResponse(
        id=category.id,
        title=category.title,
        url_segment=category.url_segment,
        disabled=category.disabled,
        parent_id=category.parent_id,
        child_ids=[child.id for child in category.children if child.id is not None],
        link=details.link,
        full_hierarchy=details.full_hierarchy,
        breadcrumbs=[BreadcrumbSchema(title=b.title, link=b.link) for b in details.breadcrumbs],
    )


@router.get(
    "",
    response_model=CategoryListResponse,
    summary="List categories",
)
async def list_categories(service: ServiceDep) -> CategoryListResponse:
    """List every category with its full hierarchy path."""
    categories = await service.list_categories()
    items = [details_to_response(service.category_details(c)) for c in categories]
    return CategoryListResponse(items=items, total=len(items))


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Create category",
)
async def create_category(
    body: CategoryCreateRequest,
    service: ServiceDep,
    member: MemberDep,
) -> CategoryResponse:
    """Create a category, optionally under a parent."""
    category = await service.create_category(
        CategoryData(
            title=body.title,
            url_segment=body.url_segment,
            parent_id=body.parent_id,
            disabled=body.disabled,
        ),
        member=member,
    )
    return details_to_response(service.category_details(category))


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get category",
)
async def get_category(
    category_id: int,
    service: ServiceDep,
    max_depth: Annotated[int | None, Query(ge=0)] = None,
) -> CategoryResponse:
    category = await service.get_category(category_id)
    return details_to_response(service.category_details(category, max_depth))


@router.patch(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Update category",
)
async def update_category(
    category_id: int,
    body: CategoryUpdateRequest,
    service: ServiceDep,
    member: MemberDep,
) -> CategoryResponse:
    """Update a category. ``parent_id=0`` moves it to the root."""
    category = await service.update_category(
        category_id,
        CategoryData(
            title=body.title,
            url_segment=body.url_segment,
            parent_id=body.parent_id,
            disabled=body.disabled,
        ),
        member=member,
    )
    return details_to_response(service.category_details(category))


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete category",
)
async def delete_category(
    category_id: int,
    service: ServiceDep,
    member: MemberDep,
) -> Response:
    await service.delete_category(category_id, member=member)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{category_id}/breadcrumbs",
    response_model=BreadcrumbsResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Category breadcrumbs",
)
async def category_breadcrumbs(
    category_id: int,
    service: ServiceDep,
    max_depth: Annotated[int | None, Query(ge=0)] = None,
) -> BreadcrumbsResponse:
    trail = await service.category_breadcrumbs(category_id, max_depth)
    return BreadcrumbsResponse(items=[BreadcrumbSchema(title=b.title, link=b.link) for b in trail])


@router.get(
    "/{category_id}/levels/{level}",
    response_model=LevelResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Category hierarchy level",
)
async def category_level(
    category_id: int,
    level: int,
    service: ServiceDep,
) -> LevelResponse:
    """Get the category at a 1-based level of the hierarchy, root first."""
    entity = await service.category_level(category_id, level)
    if entity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error_code": "LEVEL_NOT_FOUND",
                "message": f"Category {category_id} has no level {level}",
            },
        )
    return level_to_response(level, entity)
