"""
backend/shoreline/project/routes.py

Project Routes
Defines API routes for the project gallery:
- Public listing, years and detail
- Admin create (JSON or multipart), update (multipart), delete and reorder
"""

import json
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from shoreline.core.dependencies import AdminUser
from shoreline.core.exceptions import APIError
from shoreline.core.limiter import limiter
from shoreline.core.schemas import SuccessResponse
from shoreline.database.session import get_db
from shoreline.project import schemas
from shoreline.project.services import PROJECT_NOT_FOUND, ProjectService

router = APIRouter(prefix="/api/projects", tags=["Projects"])

DBDep = Annotated[AsyncSession, Depends(get_db)]


def _text(value: object) -> str | None:
    return value if isinstance(value, str) else None


def parse_project_id(raw: str) -> UUID:
    """Project id from the path; anything that is not a UUID is an unknown project."""
    try:
        return UUID(raw)
    except ValueError:
        raise APIError(status.HTTP_404_NOT_FOUND, PROJECT_NOT_FOUND)


async def read_project_form(request: Request) -> schemas.ProjectForm:
    """Collects the multipart project form fields."""
    form = await request.form()
    return schemas.ProjectForm(
        title=_text(form.get("title")),
        description=_text(form.get("description")),
        tags=_text(form.get("tags")),
        featured=_text(form.get("featured")),
        thumbnail_index=_text(form.get("thumbnailIndex")),
        images=[entry for entry in form.getlist("image") if isinstance(entry, UploadFile)],
        remove_image=_text(form.get("removeImage")),
        keep_public_ids=[entry for entry in form.getlist("keepPublicIds") if isinstance(entry, str)],
        project_date_year=_text(form.get("projectDateYear")),
        project_date_month=_text(form.get("projectDateMonth")),
        project_date_day=_text(form.get("projectDateDay")),
    )


# ----------------------------------------------------
# Public Project Endpoints
# ----------------------------------------------------
@router.get(
    "",
    response_model=list[schemas.ProjectListItem] | schemas.ProjectPage,
    summary="List Projects",
    description=(
        "Projects newest first, filtered by `tag` (`none` for untagged), `featured` and `year`. "
        "With `limit` (max 100) and `offset` the response is `{projects, hasMore}`."
    ),
)
@limiter.limit("60/minute")
async def list_projects(
    request: Request,
    db: DBDep,
    tag: str | None = Query(default=None, description="Tag name, or `none` for untagged projects"),
    featured: str | None = Query(default=None, description="`true` or `false`"),
    year: str | None = Query(default=None, description="Four-digit year"),
    limit: str | None = Query(default=None, description="Page size (max 100)"),
    offset: str | None = Query(default=None, description="Number of projects to skip"),
) -> list[schemas.ProjectListItem] | schemas.ProjectPage:
    return await ProjectService(db).list_projects(
        tag=tag, featured=featured, year=year, limit=limit, offset=offset
    )


@router.get(
    "/years",
    response_model=list[int],
    summary="List Project Years",
    description="Distinct years that have projects, newest first.",
)
@limiter.limit("60/minute")
async def list_project_years(request: Request, db: DBDep) -> list[int]:
    return await ProjectService(db).list_years()


# ----------------------------------------------------
# Admin Project Endpoints
# ----------------------------------------------------
@router.post(
    "",
    response_model=schemas.ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description=(
        "Create a project (admin only). A JSON body references images already uploaded "
        "with signed parameters; multipart form data uploads the `image` files server-side."
    ),
)
@limiter.limit("20/minute")
async def create_project(
    request: Request,
    db: DBDep,
    admin: AdminUser,
) -> schemas.ProjectRead:
    service = ProjectService(db)
    if "application/json" in request.headers.get("content-type", ""):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise APIError(status.HTTP_400_BAD_REQUEST, "Invalid JSON body")
        try:
            data = schemas.ProjectCreate.model_validate(body if isinstance(body, dict) else {})
        except ValidationError as e:
            raise APIError(status.HTTP_400_BAD_REQUEST, e.errors()[0].get("msg", "Invalid request"))
        return await service.create_from_json(data)

    return await service.create_from_form(await read_project_form(request))


@router.patch(
    "/order",
    response_model=SuccessResponse,
    summary="Reorder Projects",
    description="Save a manual order (admin only). Body: `{orderedIds}`; only timestamps within each day change.",
)
async def reorder_projects(
    request: Request,
    data: schemas.ProjectOrder,
    db: DBDep,
    admin: AdminUser,
) -> SuccessResponse:
    await ProjectService(db).reorder_projects(data.ordered_ids)
    return SuccessResponse()


@router.get(
    "/{project_id}",
    response_model=schemas.ProjectRead,
    summary="Get Project",
    description="A single project with its ordered images and tag names.",
)
@limiter.limit("60/minute")
async def get_project(request: Request, project_id: str, db: DBDep) -> schemas.ProjectRead:
    return await ProjectService(db).get_project(parse_project_id(project_id))


@router.patch(
    "/{project_id}",
    response_model=schemas.ProjectRead,
    summary="Update Project",
    description=(
        "Update a project from multipart form data (admin only): text, tags, featured flag, "
        "images (`image`, `keepPublicIds`, `removeImage`), thumbnail and project date."
    ),
)
@limiter.limit("20/minute")
async def update_project(
    request: Request,
    project_id: str,
    db: DBDep,
    admin: AdminUser,
) -> schemas.ProjectRead:
    form = await read_project_form(request)
    return await ProjectService(db).update_project(parse_project_id(project_id), form)


@router.delete(
    "/{project_id}",
    response_model=SuccessResponse,
    summary="Delete Project",
    description="Delete a project and its Cloudinary images (admin only).",
)
async def delete_project(
    request: Request,
    project_id: str,
    db: DBDep,
    admin: AdminUser,
) -> SuccessResponse:
    await ProjectService(db).delete_project(parse_project_id(project_id))
    return SuccessResponse()
