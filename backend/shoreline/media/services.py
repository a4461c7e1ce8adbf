"""
backend/shoreline/media/services.py

Media Service Layer
- Chooses the Cloudinary folder for a batch of signed browser uploads
- Removes orphaned project folders left behind by abandoned uploads
- Deletes single assets discarded in the admin
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.core import upload
from shoreline.core.exceptions import APIError
from shoreline.project import folders
from shoreline.project.services import ProjectService

logger = logging.getLogger(__name__)

LANDING_FOLDER = "landing"
ORPHANED_FOLDER_AGE = timedelta(hours=1)
INVALID_DATE = "Invalid date: year (min 1970), month (1-12), optional day (1-31)"


class MediaService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.projects = ProjectService(db)

    async def resolve_upload_folder(
        self,
        folder: str | None = None,
        purpose: str | None = None,
        project_id: str | None = None,
        year: str | None = None,
        month: str | None = None,
        day: str | None = None,
    ) -> str:
        """
        Folder for the next signed upload, in priority order: a reusable folder
        passed back by the client, the landing folder, an existing project's
        folder, the next free folder of a chosen date, or a fresh timestamp folder.
        """
        if folder and folders.is_reusable_folder(folder):
            return folder.strip()

        if purpose == "landing":
            return LANDING_FOLDER

        if project_id:
            try:
                parsed_id = UUID(project_id)
            except ValueError:
                logger.warning(f"[MEDIA] Ignoring malformed projectId '{project_id}'")
                parsed_id = None
            existing = await self.projects.folder_for_existing(parsed_id) if parsed_id else None
            return existing or await self.projects.unique_fresh_folder()

        if folders.has_date_parts(year, month):
            project_date = folders.parse_project_date(year, month, day)
            if project_date is None:
                raise APIError(status.HTTP_400_BAD_REQUEST, INVALID_DATE)
            if folders.is_future_day(project_date.to_folder().created_at):
                raise APIError(status.HTTP_400_BAD_REQUEST, "Project date cannot be in the future")
            chosen, _ = await self.projects.next_folder_for_date(project_date)
            return chosen

        return await self.projects.unique_fresh_folder()

    async def signed_params(self, **folder_options: str | None) -> dict:
        """
        Signed upload parameters for the resolved folder.

        Raises:
            APIError: 503 when Cloudinary is not configured.
        """
        target = await self.resolve_upload_folder(**folder_options)
        try:
            return upload.signed_upload_params(target)
        except upload.CloudinaryNotConfigured as e:
            logger.error(f"[MEDIA] Cannot sign upload: {e}")
            raise APIError(status.HTTP_503_SERVICE_UNAVAILABLE, str(e))

    async def cleanup_orphaned_folders(self, now: datetime | None = None) -> list[str]:
        """
        Delete project folders no project references once their oldest asset
        is over an hour old. Empty orphan folders are deleted straight away.
        """
        known = await self.projects.known_folders()
        cutoff = (now or datetime.now(timezone.utc)) - ORPHANED_FOLDER_AGE
        deleted: list[str] = []

        for path in await upload.list_project_subfolders():
            if path in known:
                continue
            oldest = await upload.oldest_asset_time(path)
            if oldest is not None and oldest > cutoff:
                logger.debug(f"[MEDIA] Skipping recent orphan folder {path}")
                continue
            if oldest is not None:
                await upload.delete_resources_by_prefix(f"{path}/")
            await upload.delete_folder(path)
            deleted.append(path)
            logger.info(f"[MEDIA] Deleted orphaned folder {path}")

        return deleted

    async def delete_asset(self, public_id: str | None) -> None:
        if not public_id or not public_id.strip():
            raise APIError(status.HTTP_400_BAD_REQUEST, "publicId is required")
        try:
            await upload.delete_image(public_id.strip())
        except Exception as e:
            logger.error(f"[MEDIA] Failed to delete asset {public_id}: {e}")
            raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete image")
