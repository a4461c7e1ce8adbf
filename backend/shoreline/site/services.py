"""
backend/shoreline/site/services.py

Site Setting Service Layer
Reads and upserts the editable page copy stored as key/value rows.
"""

import logging

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shoreline.core.exceptions import APIError
from shoreline.site.models import SiteSetting
from shoreline.site.schemas import ABOUT_KEYS

logger = logging.getLogger(__name__)


def parse_keys(raw: str | None) -> list[str]:
    """Comma-separated keys; the about-page keys when nothing was asked for."""
    if raw is None or raw == "":
        return list(ABOUT_KEYS)
    return [key.strip() for key in raw.split(",") if key.strip()]


class SiteSettingService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_settings(self, keys: list[str]) -> dict[str, str | None]:
        """Map of every requested key to its value, or None when unset."""
        if not keys:
            return {}
        result = await self.db.execute(select(SiteSetting).where(SiteSetting.key.in_(keys)))
        stored = {row.key: row.value for row in result.scalars().all()}
        return {key: stored.get(key) for key in keys}

    async def upsert_setting(self, key: str | None, value: str | None) -> None:
        """
        Create or overwrite one setting. A missing value is stored as "".

        Raises:
            APIError: 400 when the key is missing or blank.
        """
        clean_key = (key or "").strip()
        if not clean_key:
            raise APIError(status.HTTP_400_BAD_REQUEST, "Missing or invalid key")

        result = await self.db.execute(select(SiteSetting).where(SiteSetting.key == clean_key))
        setting = result.scalar_one_or_none()
        if setting is None:
            self.db.add(SiteSetting(key=clean_key, value=value or ""))
        else:
            setting.value = value or ""

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[SITE ERROR] Failed to save setting '{clean_key}': {e}", exc_info=True)
            raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save setting")
        logger.info(f"[SITE] Setting '{clean_key}' saved")
