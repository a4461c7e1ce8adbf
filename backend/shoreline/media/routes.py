"""
backend/shoreline/media/routes.py

Media Routes
- Signed Cloudinary upload parameters (admin)
- Orphaned folder cleanup (admin or cron)
- Single asset deletion (admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.core.dependencies import AdminUser, require_admin_or_cron
from shoreline.core.exceptions import APIError
from shoreline.core.schemas import OkResponse
from shoreline.database.models import User
from shoreline.database.session import get_db
from shoreline.media import schemas
from shoreline.media.services import MediaService

router = APIRouter(prefix="/api", tags=["Media"])

DBDep = Annotated[AsyncSession, Depends(get_db)]


@router.get(
    "/cloudinary-config",
    response_model=schemas.SignedUploadParams,
    summary="Get Signed Upload Parameters",
    description=(
        "Signed parameters for browser uploads (admin only). The target folder comes from "
        "`folder`, `purpose=landing`, `projectId` or `year`/`month`/`day`, else a fresh folder."
    ),
)
async def cloudinary_config(
    request: Request,
    db: DBDep,
    admin: AdminUser,
    folder: str | None = Query(default=None, description="Reuse a folder from an earlier response"),
    purpose: str | None = Query(default=None, description="`landing` for the landing hero image"),
    project_id: str | None = Query(default=None, alias="projectId", description="Existing project id"),
    year: str | None = Query(default=None, description="Project year (min 1970)"),
    month: str | None = Query(default=None, description="Project month (1-12)"),
    day: str | None = Query(default=None, description="Project day (1-31)"),
) -> dict:
    return await MediaService(db).signed_params(
        folder=folder, purpose=purpose, project_id=project_id, year=year, month=month, day=day
    )


@router.get(
    "/cloudinary-cleanup",
    response_model=schemas.CleanupResult,
    summary="Clean Up Orphaned Folders",
    description=(
        "Delete project folders no project references and whose assets are over an hour old. "
        "Accepts an admin session or `Authorization: Bearer <CRON_SECRET>`."
    ),
)
async def cloudinary_cleanup(
    request: Request,
    db: DBDep,
    caller: Annotated[User | None, Depends(require_admin_or_cron)],
) -> schemas.CleanupResult:
    try:
        deleted = await MediaService(db).cleanup_orphaned_folders()
    except Exception as e:
        raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e) or "Cleanup failed")

    message = (
        f"Deleted {len(deleted)} orphaned folder(s)."
        if deleted
        else "No orphaned folders to delete."
    )
    return schemas.CleanupResult(deleted=deleted, message=message)


@router.post(
    "/cloudinary-delete",
    response_model=OkResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete Asset",
    description="Delete one Cloudinary image by public id (admin only).",
)
async def cloudinary_delete(
    request: Request,
    data: schemas.DeleteAssetRequest,
    db: DBDep,
    admin: AdminUser,
) -> OkResponse:
    await MediaService(db).delete_asset(data.public_id)
    return OkResponse()
