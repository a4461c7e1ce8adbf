"""
backend/shoreline/tag/services.py

Tag Service Layer
Handles tag lookup for suggestions and filters, name-to-id resolution when
projects are saved, and admin rename/delete.
Tag names are matched case-insensitively everywhere.
"""

import logging
from uuid import UUID

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.core.exceptions import APIError
from shoreline.project.models import ProjectTag
from shoreline.tag import schemas
from shoreline.tag.models import Tag

logger = logging.getLogger(__name__)

SUGGESTION_LIMIT = 20


def normalize_tag_names(names: list[str]) -> list[str]:
    """
    Trim names, drop blanks and case-insensitive duplicates (first spelling wins).
    """
    seen: set[str] = set()
    unique: list[str] = []
    for name in names:
        if not isinstance(name, str):
            continue
        trimmed = name.strip()
        if not trimmed or trimmed.lower() in seen:
            continue
        seen.add(trimmed.lower())
        unique.append(trimmed)
    return unique


class TagService:
    """Tag queries and admin edits."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def resolve_tag_names_to_ids(self, names: list[str]) -> list[UUID]:
        """
        Ids for the given tag names in input order, creating missing tags.
        Existing tags are reused regardless of case. The caller commits.
        """
        wanted = normalize_tag_names(names)
        if not wanted:
            return []

        result = await self.db.execute(
            select(Tag).where(func.lower(Tag.name).in_([name.lower() for name in wanted]))
        )
        by_lower: dict[str, UUID] = {tag.name.lower(): tag.id for tag in result.scalars().all()}

        for name in wanted:
            if name.lower() in by_lower:
                continue
            tag = Tag(name=name)
            self.db.add(tag)
            await self.db.flush()
            logger.info(f"[TAG] Created tag '{name}'")
            by_lower[name.lower()] = tag.id

        return [by_lower[name.lower()] for name in wanted]

    async def search_names(self, query: str) -> list[str]:
        """Up to 20 tag names containing `query`, alphabetical."""
        result = await self.db.execute(
            select(Tag.name)
            .where(Tag.name.icontains(query, autoescape=True))
            .order_by(Tag.name.asc())
            .limit(SUGGESTION_LIMIT)
        )
        return list(result.scalars().all())

    async def list_names(self) -> list[str]:
        result = await self.db.execute(select(Tag.name).order_by(Tag.name.asc()))
        return list(result.scalars().all())

    async def list_with_counts(self) -> list[schemas.TagRead]:
        """Every tag with the number of projects using it."""
        result = await self.db.execute(
            select(Tag.id, Tag.name, func.count(ProjectTag.project_id))
            .outerjoin(ProjectTag, ProjectTag.tag_id == Tag.id)
            .group_by(Tag.id, Tag.name)
            .order_by(Tag.name.asc())
        )
        return [
            schemas.TagRead(id=tag_id, name=name, project_count=count)
            for tag_id, name, count in result.all()
        ]

    async def _get_tag(self, tag_id: UUID) -> Tag:
        tag = await self.db.get(Tag, tag_id)
        if tag is None:
            raise APIError(status.HTTP_404_NOT_FOUND, "Tag not found")
        return tag

    async def rename_tag(self, tag_id: UUID, name: str) -> schemas.TagRead:
        """
        Rename a tag.

        Raises:
            APIError: 400 blank name, 404 unknown tag, 409 name held by another tag.
        """
        new_name = (name or "").strip()
        if not new_name:
            raise APIError(status.HTTP_400_BAD_REQUEST, "Tag name is required")

        tag = await self._get_tag(tag_id)
        clash = await self.db.execute(
            select(Tag.id).where(func.lower(Tag.name) == new_name.lower(), Tag.id != tag_id)
        )
        if clash.scalar_one_or_none() is not None:
            raise APIError(status.HTTP_409_CONFLICT, "Tag name already exists")

        tag.name = new_name
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise APIError(status.HTTP_409_CONFLICT, "Tag name already exists")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[TAG ERROR] Failed to rename tag {tag_id}: {e}", exc_info=True)
            raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update tag")

        count = await self.db.execute(
            select(func.count()).select_from(ProjectTag).where(ProjectTag.tag_id == tag_id)
        )
        logger.info(f"[TAG] Renamed tag {tag_id} to '{new_name}'")
        return schemas.TagRead(id=tag_id, name=new_name, project_count=count.scalar_one())

    async def delete_tag(self, tag_id: UUID) -> None:
        """Delete a tag; its project links go with it."""
        tag = await self._get_tag(tag_id)
        try:
            await self.db.delete(tag)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[TAG ERROR] Failed to delete tag {tag_id}: {e}", exc_info=True)
            raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete tag")
        logger.info(f"[TAG] Deleted tag {tag_id}")
