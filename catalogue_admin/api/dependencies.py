"""Shared FastAPI dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from catalogue_admin.application.catalogue_service import (
    CatalogueService,
    get_catalogue_repository,
    get_catalogue_service,
)
from catalogue_admin.catalogue.repository import CatalogueRepository, SqlCatalogueRepository
from catalogue_admin.domain.value_objects import Member
from catalogue_admin.infrastructure.config import settings
from catalogue_admin.infrastructure.database import get_session_factory


async def get_repository() -> AsyncGenerator[CatalogueRepository, None]:
    """Yield the repository for the configured storage backend.

    Database sessions are committed when the request succeeds and
    rolled back otherwise.
    """
    if settings.storage_backend != "database":
        yield get_catalogue_repository()
        return

    async with get_session_factory()() as session:
        try:
            yield SqlCatalogueRepository(session)
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_service(
    request: Request,
    repository: Annotated[CatalogueRepository, Depends(get_repository)],
) -> CatalogueService:
    """Get catalogue service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_catalogue_service(repository=repository, request_id=request_id)


def get_member(
    x_member_id: Annotated[str | None, Header()] = None,
    x_member_groups: Annotated[str | None, Header()] = None,
) -> Member | None:
    """Get the caller identity from the ``X-Member-ID`` header.

    Groups are read from ``X-Member-Groups`` as a comma separated list.

    Raises:
        HTTPException: If the member ID is not an integer.
    """
    if not x_member_id:
        return None
    try:
        member_id = int(x_member_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error_code": "INVALID_MEMBER_ID",
                "message": f"Invalid X-Member-ID header: {x_member_id}",
            },
        )
    groups = frozenset(
        group.strip() for group in (x_member_groups or "").split(",") if group.strip()
    )
    return Member(id=member_id, groups=groups)


ServiceDep = Annotated[CatalogueService, Depends(get_service)]
MemberDep = Annotated[Member | None, Depends(get_member)]
