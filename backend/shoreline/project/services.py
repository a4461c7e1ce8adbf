"""
backend/shoreline/project/services.py

Project Service Layer
Manages the project gallery:
- Public listing with tag/featured/year filters and pagination
- Creation from browser-uploaded images (JSON) or server-side uploads (multipart)
- Editing text, tags, images and the project date
- Deletion together with the project's Cloudinary assets
- Manual reordering within a day

Projects are ordered newest first by `created_at`, then by `display_order`
within the same UTC day. The project's Cloudinary folder name mirrors its
date (see `shoreline.project.folders`).
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from fastapi import status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from shoreline.core import upload
from shoreline.core.exceptions import APIError
from shoreline.project import folders, schemas
from shoreline.project.models import Project, ProjectImage, ProjectTag
from shoreline.tag.models import Tag
from shoreline.tag.services import TagService

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
MAX_FOLDER_ATTEMPTS = 20
YEAR_PATTERN = re.compile(r"^\d{4}$")
DIGITS = re.compile(r"^\d+$")
EXTENSION = re.compile(r"\.[a-zA-Z0-9]+$")

PROJECT_NOT_FOUND = "Project not found"
TITLE_REQUIRED = "Title is required"
IMAGE_REQUIRED = "At least one image is required"
FUTURE_DATE = "Project date cannot be in the future"
CREATE_MOVE_FAILED = "Failed to create project. Could not move images to the selected date folder."
UPDATE_MOVE_FAILED = "Failed to update project. Could not move images to the selected date folder."


def _clean_title(raw: str | None) -> str:
    title = (raw or "").strip() if isinstance(raw, str) else ""
    if not title:
        raise APIError(status.HTTP_400_BAD_REQUEST, TITLE_REQUIRED)
    return title


def _clean_description(raw: str | None) -> str | None:
    if not isinstance(raw, str):
        return None
    return raw.strip() or None


def moved_public_id(public_id: str, old_folder: str, target_folder: str) -> str:
    """Public id of an image after moving it from `old_folder` to `target_folder`."""
    if public_id.startswith(f"{old_folder}/"):
        name = public_id[len(old_folder) + 1 :]
    else:
        name = public_id.rsplit("/", 1)[-1]
    return f"{target_folder}/{EXTENSION.sub('', name)}"


def project_read(project: Project) -> schemas.ProjectRead:
    """Detail response for a project loaded with images and tags."""
    return schemas.ProjectRead(
        id=project.id,
        title=project.title,
        description=project.description,
        featured=project.featured,
        image_url=project.image_url,
        image_public_id=project.image_public_id,
        cloudinary_folder=project.cloudinary_folder,
        display_order=project.display_order,
        date_is_month_only=project.date_is_month_only,
        created_at=project.created_at,
        updated_at=project.updated_at,
        tags=project.tag_names,
        images=[
            schemas.ProjectImageRead(
                id=image.id,
                project_id=image.project_id,
                image_url=image.image_url,
                image_public_id=image.image_public_id,
                sort_order=image.sort_order,
                created_at=image.created_at,
            )
            for image in project.images
        ],
    )


def project_list_item(project: Project) -> schemas.ProjectListItem:
    """Gallery response for a project, with display-optimized image URLs."""
    return schemas.ProjectListItem(
        id=project.id,
        title=project.title,
        description=project.description,
        featured=project.featured,
        image_url=upload.to_display_url(project.image_url),
        image_public_id=project.image_public_id,
        cloudinary_folder=project.cloudinary_folder,
        display_order=project.display_order,
        date_is_month_only=project.date_is_month_only,
        created_at=project.created_at,
        updated_at=project.updated_at,
        tags=project.tag_names,
        images=[
            schemas.ProjectListImage(
                image_url=upload.to_display_url(image.image_url),
                image_public_id=image.image_public_id,
            )
            for image in project.images
        ],
    )


class ProjectService:
    """Handles project listing, creation, editing, deletion and ordering."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------------------------------------------------
    # Queries
    # ---------------------------------------------------

    def _with_relations(self) -> Any:
        return select(Project).options(
            selectinload(Project.images),
            selectinload(Project.project_tags).selectinload(ProjectTag.tag),
        )

    async def _load_project(self, project_id: UUID) -> Project | None:
        result = await self.db.execute(
            self._with_relations()
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _get_project_or_404(self, project_id: UUID) -> Project:
        project = await self._load_project(project_id)
        if project is None:
            raise APIError(status.HTTP_404_NOT_FOUND, PROJECT_NOT_FOUND)
        return project

    async def _folders_with_prefix(self, prefix: str, exclude_id: UUID | None = None) -> list[str]:
        stmt = select(Project.cloudinary_folder).where(Project.cloudinary_folder.startswith(prefix))
        if exclude_id is not None:
            stmt = stmt.where(Project.id != exclude_id)
        result = await self.db.execute(stmt)
        return [folder for folder in result.scalars().all() if folder]

    async def _folder_in_use(self, folder: str) -> bool:
        result = await self.db.execute(
            select(Project.id).where(Project.cloudinary_folder == folder).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def _next_display_order(self, created_at: datetime) -> int:
        start, end = folders.day_bounds(created_at)
        result = await self.db.execute(
            select(func.max(Project.display_order)).where(
                Project.created_at >= start, Project.created_at < end
            )
        )
        highest = result.scalar_one_or_none()
        return 0 if highest is None else highest + 1

    async def _same_day_dates(self, created_at: datetime, exclude_id: UUID) -> list[datetime]:
        start, end = folders.day_bounds(created_at)
        result = await self.db.execute(
            select(Project.created_at).where(
                Project.id != exclude_id,
                Project.created_at >= start,
                Project.created_at < end,
            )
        )
        return list(result.scalars().all())

    async def _shift_display_orders(self, created_at: datetime, from_index: int, exclude_id: UUID) -> None:
        start, end = folders.day_bounds(created_at)
        await self.db.execute(
            update(Project)
            .where(
                Project.id != exclude_id,
                Project.created_at >= start,
                Project.created_at < end,
                Project.display_order >= from_index,
            )
            .values(display_order=Project.display_order + 1)
        )

    # ---------------------------------------------------
    # Folder resolution
    # ---------------------------------------------------

    async def unique_fresh_folder(self) -> str:
        """Timestamp folder for a new project, suffixed `-2`, `-3`, ... while taken."""
        base = folders.generate_project_folder()
        candidate = base
        suffix = 2
        while await self._folder_in_use(candidate):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    async def next_folder_for_date(
        self, project_date: folders.ProjectDate, exclude_id: UUID | None = None
    ) -> tuple[str, datetime]:
        """
        Next unused folder of a project date and the matching timestamp.
        Re-queries while another project already holds the candidate.
        """
        date_folder = project_date.to_folder()
        for _ in range(MAX_FOLDER_ATTEMPTS):
            existing = await self._folders_with_prefix(date_folder.prefix, exclude_id)
            folder, created_at = folders.next_slot_for_date(date_folder, existing)
            if exclude_id is not None or not await self._folder_in_use(folder):
                return folder, created_at
            logger.warning(f"[PROJECT] Folder {folder} was taken concurrently, retrying")
        raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Could not allocate a project folder")

    async def folder_for_existing(self, project_id: UUID) -> str | None:
        """Folder of an existing project (derived for legacy rows), or None when unknown."""
        result = await self.db.execute(
            select(Project.cloudinary_folder, Project.created_at).where(Project.id == project_id)
        )
        row = result.one_or_none()
        if row is None:
            return None
        return folders.folder_for_project(row.cloudinary_folder, row.created_at)

    async def known_folders(self) -> set[str]:
        """Every folder referenced by a project."""
        result = await self.db.execute(
            select(Project.cloudinary_folder).where(Project.cloudinary_folder.is_not(None))
        )
        return {folder.strip() for folder in result.scalars().all() if folder and folder.strip()}

    # ---------------------------------------------------
    # Read operations
    # ---------------------------------------------------

    async def list_projects(
        self,
        tag: str | None = None,
        featured: str | None = None,
        year: str | None = None,
        limit: str | None = None,
        offset: str | None = None,
    ) -> list[schemas.ProjectListItem] | schemas.ProjectPage:
        """
        Gallery listing. Returns a plain list, or a page with `hasMore` when
        `limit` is given.
        """
        stmt = self._with_relations()

        if tag and tag.strip():
            if tag.strip().lower() == "none":
                stmt = stmt.where(~Project.project_tags.any())
            else:
                stmt = stmt.where(
                    Project.project_tags.any(
                        ProjectTag.tag.has(func.lower(Tag.name) == tag.strip().lower())
                    )
                )

        if featured is not None and featured != "":
            stmt = stmt.where(Project.featured == (featured == "true"))

        if year and YEAR_PATTERN.match(year.strip()):
            start, end = folders.year_bounds(int(year.strip()))
            stmt = stmt.where(Project.created_at >= start, Project.created_at < end)

        page_size = min(int(limit), MAX_PAGE_SIZE) if limit and DIGITS.match(limit) else None
        skip = int(offset) if offset and DIGITS.match(offset) else 0

        stmt = stmt.order_by(Project.created_at.desc(), Project.display_order.asc())
        if page_size is not None:
            stmt = stmt.offset(skip).limit(page_size + 1)

        result = await self.db.execute(stmt)
        items = [project_list_item(project) for project in result.scalars().all()]

        if page_size is None:
            return items
        return schemas.ProjectPage(projects=items[:page_size], has_more=len(items) > page_size)

    async def list_years(self) -> list[int]:
        """Distinct project years, newest first."""
        result = await self.db.execute(select(Project.created_at))
        years = {created_at.astimezone(timezone.utc).year for created_at in result.scalars().all()}
        return sorted(years, reverse=True)

    async def get_project(self, project_id: UUID) -> schemas.ProjectRead:
        return project_read(await self._get_project_or_404(project_id))

    # ---------------------------------------------------
    # Create
    # ---------------------------------------------------

    async def _insert_project(
        self,
        *,
        title: str,
        description: str | None,
        featured: bool,
        images: list[tuple[str, str]],
        thumbnail_index: int,
        tag_names: list[str],
        folder: str | None,
        created_at: datetime | None,
        date_is_month_only: bool | None,
    ) -> Project:
        """Adds a project with its images and tags to the session and commits."""
        tag_ids = await TagService(self.db).resolve_tag_names_to_ids(tag_names)
        display_order = await self._next_display_order(created_at or datetime.now(timezone.utc))

        thumbnail = images[thumbnail_index] if images else None
        project = Project(
            title=title,
            description=description,
            featured=featured,
            display_order=display_order,
            image_url=thumbnail[0] if thumbnail else None,
            image_public_id=thumbnail[1] if thumbnail else None,
            cloudinary_folder=folder,
            images=[
                ProjectImage(image_url=url, image_public_id=public_id, sort_order=index)
                for index, (url, public_id) in enumerate(images)
            ],
            project_tags=[ProjectTag(tag_id=tag_id) for tag_id in tag_ids],
        )
        if created_at is not None:
            project.created_at = created_at
        if date_is_month_only is not None:
            project.date_is_month_only = date_is_month_only

        self.db.add(project)
        await self.db.commit()
        return project

    async def create_from_json(self, data: schemas.ProjectCreate) -> schemas.ProjectRead:
        """
        Create a project from images the browser already uploaded.

        An explicit project date moves the images into the next free folder of
        that day; otherwise the date is read from the upload folder name.
        """
        title = _clean_title(data.title)
        images = data.uploaded_images
        if not images:
            raise APIError(status.HTTP_400_BAD_REQUEST, IMAGE_REQUIRED)
        thumbnail_index = schemas.clamp_thumbnail_index(data.thumbnail_index, len(images))
        source_folder = data.cloudinary_folder

        project_date = folders.parse_project_date(
            data.project_date_year, data.project_date_month, data.project_date_day
        )
        created_at: datetime | None = None
        date_is_month_only: bool | None = None
        target_folder = source_folder

        if project_date is not None:
            if folders.is_future_day(project_date.to_folder().created_at):
                raise APIError(status.HTTP_400_BAD_REQUEST, FUTURE_DATE)
            target_folder, created_at = await self.next_folder_for_date(project_date)
            date_is_month_only = data.date_is_month_only
            if source_folder is None:
                target_folder = None
        elif source_folder is not None:
            created_at = folders.parse_folder(source_folder)
            date_is_month_only = data.date_is_month_only

        final_images = [(image.secure_url, image.public_id) for image in images]
        old_folder_to_delete: str | None = None

        if source_folder is not None and target_folder is not None and target_folder != source_folder:
            final_images = await self._move_images(final_images, source_folder, target_folder)
            old_folder_to_delete = source_folder

        try:
            project = await self._insert_project(
                title=title,
                description=_clean_description(data.description),
                featured=data.featured,
                images=final_images,
                thumbnail_index=thumbnail_index,
                tag_names=data.tags,
                folder=target_folder,
                created_at=created_at,
                date_is_month_only=date_is_month_only,
            )
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[PROJECT ERROR] Failed to create project: {e}", exc_info=True)
            raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create project")

        logger.info(f"[PROJECT] Created project {project.id} in folder {target_folder}")

        if old_folder_to_delete:
            await self._delete_old_folder(old_folder_to_delete)

        return await self.get_project(project.id)

    async def _move_images(
        self,
        images: list[tuple[str, str]],
        old_folder: str,
        target_folder: str,
        error: str = CREATE_MOVE_FAILED,
        renamed: dict[str, str] | None = None,
    ) -> list[tuple[str, str]]:
        """
        Rename every image into `target_folder`; returns the new (url, public id) pairs.
        Each completed rename is recorded in `renamed` (old id to new id).
        """
        moved: list[tuple[str, str]] = []
        try:
            for _, public_id in images:
                new_public_id = moved_public_id(public_id, old_folder, target_folder)
                await upload.rename_image(public_id, new_public_id)
                if renamed is not None:
                    renamed[public_id] = new_public_id
                await upload.set_asset_folder(new_public_id, target_folder)
                moved.append((upload.image_url(new_public_id), new_public_id))
        except Exception as e:
            logger.error(
                f"[PROJECT ERROR] Moving images from {old_folder} to {target_folder} failed: {e}"
            )
            raise APIError(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                error,
                details=str(e) or "Failed to move images to project date folder",
            )
        return moved

    async def _move_back(self, moved_ids: dict[str, str], old_folder: str) -> None:
        """Best-effort undo of `_move_images` after a failed update."""
        for old_public_id, new_public_id in moved_ids.items():
            try:
                await upload.rename_image(new_public_id, old_public_id)
                await upload.set_asset_folder(old_public_id, old_folder)
            except Exception as e:
                logger.error(f"[PROJECT] Failed to move {new_public_id} back to {old_public_id}: {e}")

    async def _delete_old_folder(self, folder: str) -> None:
        try:
            await upload.delete_resources_by_prefix(f"{folder}/")
            await upload.delete_folder(folder)
        except Exception as e:
            logger.error(f"[PROJECT] Failed to delete old folder {folder} after move: {e}")

    async def create_from_form(self, form: schemas.ProjectForm) -> schemas.ProjectRead:
        """
        Create a project from multipart image files. Every file is validated
        before anything is uploaded; uploads are removed again if the insert fails.
        """
        title = _clean_title(form.title)
        files = await upload.read_image_files(form.images)
        if not files:
            raise APIError(status.HTTP_400_BAD_REQUEST, IMAGE_REQUIRED)

        folder = await self.unique_fresh_folder()
        uploaded: list[str] = []
        try:
            results = await upload.upload_images(files, folder, uploaded)
            project = await self._insert_project(
                title=title,
                description=_clean_description(form.description),
                featured=form.featured == "true",
                images=[(result.secure_url, result.public_id) for result in results],
                thumbnail_index=schemas.clamp_thumbnail_index(form.thumbnail_index, len(results)),
                tag_names=form.tag_names,
                folder=folder,
                created_at=datetime.now(timezone.utc),
                date_is_month_only=None,
            )
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[PROJECT ERROR] Failed to create project: {e}", exc_info=True)
            await upload.delete_images_quietly(uploaded)
            raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create project")

        logger.info(f"[PROJECT] Created project {project.id} with {len(uploaded)} image(s)")
        return await self.get_project(project.id)

    # ---------------------------------------------------
    # Update
    # ---------------------------------------------------

    async def update_project(self, project_id: UUID, form: schemas.ProjectForm) -> schemas.ProjectRead:
        """
        Apply an edit from the multipart project form.

        A valid new date moves the project to the next free slot of that day
        and into the matching place of the day's display order. Kept images are
        moved into the new date folder and the old folder is removed. Existing
        images not listed in `keepPublicIds` are deleted; `removeImage=true`
        replaces all of them.
        """
        project = await self._get_project_or_404(project_id)
        stored_folder = project.cloudinary_folder
        current_folder = folders.folder_for_project(stored_folder, project.created_at)

        new_folder: str | None = None
        new_created_at: datetime | None = None
        month_only: bool | None = None
        if folders.has_date_parts(form.project_date_year, form.project_date_month):
            project_date = folders.parse_project_date(
                form.project_date_year, form.project_date_month, form.project_date_day
            )
            if project_date is not None:
                new_folder, new_created_at = await self.next_folder_for_date(
                    project_date, exclude_id=project_id
                )
                month_only = project_date.is_month_only

        folder_to_use = new_folder or current_folder
        if new_created_at is not None and folders.is_future_day(new_created_at):
            raise APIError(status.HTTP_400_BAD_REQUEST, FUTURE_DATE)

        title = _clean_title(form.title)
        files = await upload.read_image_files(form.images)

        existing_images = sorted(project.images, key=lambda image: image.sort_order)
        keep = set(form.keep_public_ids)
        replace_all = form.remove_image == "true"
        partial_change = not replace_all and (
            len(keep) < len(existing_images) or len(files) > 0
        )

        to_delete: list[ProjectImage] = []
        kept: list[ProjectImage] = existing_images
        public_ids_to_delete: list[str] = []
        delete_error = "Failed to delete project image"

        if replace_all:
            if not files:
                raise APIError(
                    status.HTTP_400_BAD_REQUEST,
                    "At least one image is required. Add new images before removing all.",
                )
            to_delete, kept = existing_images, []
            public_ids_to_delete = [image.image_public_id for image in existing_images]
            if project.image_public_id and project.image_public_id not in public_ids_to_delete:
                public_ids_to_delete.append(project.image_public_id)
            delete_error = "Failed to delete existing image"
        elif partial_change:
            to_delete = [image for image in existing_images if image.image_public_id not in keep]
            kept = [image for image in existing_images if image.image_public_id in keep]
            if not kept and not files:
                raise APIError(status.HTTP_400_BAD_REQUEST, IMAGE_REQUIRED)
            public_ids_to_delete = [image.image_public_id for image in to_delete]

        for public_id in public_ids_to_delete:
            try:
                await upload.delete_image(public_id)
            except Exception as e:
                logger.error(f"[PROJECT ERROR] Failed to delete image {public_id}: {e}")
                raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, delete_error)

        changes_folder = new_folder is not None and new_folder != current_folder
        moved_ids: dict[str, str] = {}
        if changes_folder and kept:
            try:
                moved = await self._move_images(
                    [(image.image_url, image.image_public_id) for image in kept],
                    current_folder,
                    folder_to_use,
                    error=UPDATE_MOVE_FAILED,
                    renamed=moved_ids,
                )
            except APIError:
                await self._move_back(moved_ids, current_folder)
                raise
            for image, (url, public_id) in zip(kept, moved):
                image.image_url = url
                image.image_public_id = public_id
            if project.image_public_id in moved_ids:
                project.image_public_id = moved_ids[project.image_public_id]
                project.image_url = upload.image_url(project.image_public_id)

        uploaded: list[str] = []
        try:
            results = await upload.upload_images(files, folder_to_use, uploaded)

            if new_created_at is not None:
                insert_index = folders.display_order_insert_index(
                    new_created_at, await self._same_day_dates(new_created_at, project_id)
                )
                await self._shift_display_orders(new_created_at, insert_index, project_id)
                project.cloudinary_folder = folder_to_use
                project.created_at = new_created_at
                project.display_order = insert_index
                project.date_is_month_only = month_only
            elif results:
                project.cloudinary_folder = folder_to_use

            project.title = title
            if form.description is not None:
                project.description = _clean_description(form.description)
            if form.featured is not None:
                project.featured = form.featured == "true"

            await self._replace_tags(project, form.tag_names)

            for image in to_delete:
                project.images.remove(image)
            new_images = [
                ProjectImage(
                    image_url=result.secure_url,
                    image_public_id=result.public_id,
                    sort_order=len(kept) + index,
                )
                for index, result in enumerate(results)
            ]
            project.images.extend(new_images)

            final_images = kept + new_images
            if replace_all or partial_change:
                first = final_images[0] if final_images else None
                project.image_url = first.image_url if first else None
                project.image_public_id = first.image_public_id if first else None
            if final_images and form.thumbnail_index is not None and DIGITS.match(form.thumbnail_index):
                chosen = final_images[schemas.clamp_thumbnail_index(form.thumbnail_index, len(final_images))]
                project.image_url = chosen.image_url
                project.image_public_id = chosen.image_public_id

            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[PROJECT ERROR] Failed to update project {project_id}: {e}", exc_info=True)
            await upload.delete_images_quietly(uploaded)
            await self._move_back(moved_ids, current_folder)
            raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update project")

        logger.info(f"[PROJECT] Updated project {project_id}")
        if changes_folder and stored_folder:
            await self._delete_old_folder(stored_folder)
        return await self.get_project(project_id)

    async def _replace_tags(self, project: Project, tag_names: list[str]) -> None:
        tag_ids = await TagService(self.db).resolve_tag_names_to_ids(tag_names)
        wanted = set(tag_ids)
        for link in list(project.project_tags):
            if link.tag_id not in wanted:
                project.project_tags.remove(link)
        present = {link.tag_id for link in project.project_tags}
        for tag_id in tag_ids:
            if tag_id not in present:
                project.project_tags.append(ProjectTag(tag_id=tag_id))

    # ---------------------------------------------------
    # Delete
    # ---------------------------------------------------

    async def delete_project(self, project_id: UUID) -> None:
        """
        Delete a project's images, its folder (best effort) and then the row.
        The row is kept when an image cannot be deleted.
        """
        project = await self._get_project_or_404(project_id)

        public_ids = [image.image_public_id for image in project.images]
        if project.image_public_id and project.image_public_id not in public_ids:
            public_ids.append(project.image_public_id)

        for public_id in public_ids:
            try:
                await upload.delete_image(public_id)
            except Exception as e:
                logger.error(f"[PROJECT ERROR] Failed to delete image {public_id}: {e}")
                raise APIError(
                    status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete project image"
                )

        if project.cloudinary_folder:
            try:
                await upload.delete_folder(project.cloudinary_folder)
            except Exception as e:
                logger.error(
                    f"[PROJECT] Failed to delete Cloudinary folder {project.cloudinary_folder}: {e}"
                )

        try:
            await self.db.delete(project)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[PROJECT ERROR] Failed to delete project {project_id}: {e}", exc_info=True)
            raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete project")
        logger.info(f"[PROJECT] Deleted project {project_id}")

    # ---------------------------------------------------
    # Reorder
    # ---------------------------------------------------

    async def reorder_projects(self, ordered_ids: Any) -> None:
        """
        Persist a manual order. Within each UTC day the listed projects get
        timestamps one second apart so the first listed sorts newest.
        Folders are left untouched.
        """
        if not isinstance(ordered_ids, list) or not ordered_ids:
            raise APIError(
                status.HTTP_400_BAD_REQUEST, "orderedIds must be a non-empty array of project IDs"
            )

        ids: list[UUID] = []
        for raw in ordered_ids:
            if not isinstance(raw, str) or not raw.strip():
                continue
            try:
                ids.append(UUID(raw.strip()))
            except ValueError:
                continue
        if not ids:
            raise APIError(
                status.HTTP_400_BAD_REQUEST,
                "orderedIds must contain at least one valid project ID",
            )

        try:
            result = await self.db.execute(
                select(Project.id, Project.created_at).where(Project.id.in_(ids))
            )
            dates = {row.id: row.created_at for row in result.all()}
            ordered = [(project_id, dates[project_id]) for project_id in ids if project_id in dates]

            for project_id, created_at in folders.reorder_timestamps(ordered):
                await self.db.execute(
                    update(Project).where(Project.id == project_id).values(created_at=created_at)
                )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[PROJECT ERROR] Failed to reorder projects: {e}", exc_info=True)
            raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update project order")
        logger.info(f"[PROJECT] Reordered {len(ordered)} project(s)")
