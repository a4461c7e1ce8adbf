"""
backend/shoreline/tag/routes.py

Tag Routes
- Public tag suggestions (`?q=`) and the full name list (`?list=names`)
- Admin tag editor: list with project counts, rename, delete
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.core.dependencies import AdminUser, CurrentUserOptional, ensure_admin
from shoreline.core.limiter import limiter
from shoreline.core.schemas import SuccessResponse
from shoreline.database.session import get_db
from shoreline.tag import schemas
from shoreline.tag.services import TagService

router = APIRouter(prefix="/api/tags", tags=["Tags"])

DBDep = Annotated[AsyncSession, Depends(get_db)]


@router.get(
    "",
    response_model=list[str] | list[schemas.TagRead],
    summary="List Tags",
    description=(
        "`q` returns up to 20 matching names and `list=names` returns every name; "
        "both are public. Without either, admins get every tag with its project count."
    ),
)
@limiter.limit("60/minute")
async def list_tags(
    request: Request,
    db: DBDep,
    user: CurrentUserOptional,
    q: str | None = Query(default=None, description="Case-insensitive substring"),
    list_: str | None = Query(default=None, alias="list", description="`names` for all names"),
) -> list[str] | list[schemas.TagRead]:
    service = TagService(db)
    if q is not None and q.strip():
        return await service.search_names(q.strip())
    if list_ == "names":
        return await service.list_names()

    ensure_admin(user)
    return await service.list_with_counts()


@router.patch(
    "/{tag_id}",
    response_model=schemas.TagRead,
    summary="Rename Tag",
    description="Rename a tag (admin only). Fails with 409 when another tag has the name.",
)
async def rename_tag(
    request: Request,
    tag_id: UUID,
    data: schemas.TagRename,
    db: DBDep,
    admin: AdminUser,
) -> schemas.TagRead:
    return await TagService(db).rename_tag(tag_id, data.name)


@router.delete(
    "/{tag_id}",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete Tag",
    description="Delete a tag and detach it from every project (admin only).",
)
async def delete_tag(
    request: Request,
    tag_id: UUID,
    db: DBDep,
    admin: AdminUser,
) -> SuccessResponse:
    await TagService(db).delete_tag(tag_id)
    return SuccessResponse()
