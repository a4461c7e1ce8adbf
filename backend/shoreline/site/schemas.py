"""
backend/shoreline/site/schemas.py

Site Setting Schemas
"""

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator

ABOUT_KEYS: tuple[str, ...] = (
    "about.ourStoryHeading",
    "about.ourStoryBody",
    "about.whatWeDo",
)

LANDING_HERO_TITLE = "landing.heroTitle"
LANDING_HERO_TAGLINE = "landing.heroTagline"
LANDING_HERO_IMAGE_PUBLIC_ID = "landing.heroImagePublicId"
LANDING_HERO_IMAGE_POSITION = "landing.heroImagePosition"

LANDING_KEYS: tuple[str, ...] = (
    LANDING_HERO_TITLE,
    LANDING_HERO_TAGLINE,
    LANDING_HERO_IMAGE_PUBLIC_ID,
    LANDING_HERO_IMAGE_POSITION,
)


class SiteSettingUpdate(BaseModel):
    """Body of PATCH /api/site-settings. Non-string values are treated as missing."""

    key: str | None = Field(None, description="Setting key")
    value: str | None = Field(None, description="Setting value")

    @field_validator("key", "value", mode="before")
    @classmethod
    def _strings_only(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None


class HeroPosition(BaseModel):
    """Focal point of the landing hero image, in percent."""

    x: float = 50
    y: float = 50

    @classmethod
    def from_setting(cls, raw: str | None) -> "HeroPosition":
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except ValueError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValueError:
            return cls()
