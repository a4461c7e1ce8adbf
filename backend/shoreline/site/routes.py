"""
backend/shoreline/site/routes.py

Site Setting Routes
- Public read of page copy by key
- Admin upsert of a single key
"""

import json
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.core.dependencies import AdminUser
from shoreline.core.exceptions import APIError
from shoreline.core.limiter import limiter
from shoreline.core.schemas import OkResponse
from shoreline.database.session import get_db
from shoreline.site.schemas import SiteSettingUpdate
from shoreline.site.services import SiteSettingService, parse_keys

router = APIRouter(prefix="/api/site-settings", tags=["Site Settings"])

DBDep = Annotated[AsyncSession, Depends(get_db)]


@router.get(
    "",
    response_model=dict[str, str | None],
    summary="Get Site Settings",
    description="Values for the comma-separated `keys` (about-page keys by default); unset keys map to null.",
)
@limiter.limit("60/minute")
async def get_site_settings(
    request: Request,
    db: DBDep,
    keys: str | None = Query(default=None, description="Comma-separated setting keys"),
) -> dict[str, str | None]:
    return await SiteSettingService(db).get_settings(parse_keys(keys))


@router.patch(
    "",
    response_model=OkResponse,
    status_code=status.HTTP_200_OK,
    summary="Update Site Setting",
    description="Create or overwrite one setting (admin only). Body: `{key, value}`.",
)
async def update_site_setting(
    request: Request,
    db: DBDep,
    admin: AdminUser,
) -> OkResponse:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise APIError(status.HTTP_400_BAD_REQUEST, "Invalid JSON body")
    if not isinstance(body, dict):
        raise APIError(status.HTTP_400_BAD_REQUEST, "Missing or invalid key")

    try:
        data = SiteSettingUpdate.model_validate(body)
    except ValidationError:
        raise APIError(status.HTTP_400_BAD_REQUEST, "Missing or invalid key")

    await SiteSettingService(db).upsert_setting(data.key, data.value)
    return OkResponse()
