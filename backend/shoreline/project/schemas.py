"""
backend/shoreline/project/schemas.py

Project Schemas
Defines Pydantic schemas for:
- Creating a project from images already uploaded by the browser (JSON body)
- The multipart form used for server-side uploads and edits
- Reading projects (detail, list item, paginated page)
- Reordering projects
"""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import UploadFile
from pydantic import Field, field_validator

from shoreline.core.schemas import CamelModel

DIGITS = re.compile(r"^\d+$")


def _truthy(v: Any) -> bool:
    return v is True or v == "true"


def clamp_thumbnail_index(raw: Any, count: int) -> int:
    """Index of the thumbnail image, clamped to the images available; 0 when unusable."""
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        index = raw
    elif isinstance(raw, str) and DIGITS.match(raw):
        index = int(raw)
    else:
        return 0
    return min(max(0, index), max(0, count - 1))


def parse_tag_list(raw: str | None) -> list[str]:
    """Tag names from a JSON array string. Invalid JSON yields no tags."""
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(parsed, list):
        return []
    return [t.strip() for t in parsed if isinstance(t, str) and t.strip()]


# ---------------------------------------------------
# Create (JSON) Schema
# ---------------------------------------------------


class UploadedImageRef(CamelModel):
    """An image the browser already uploaded to Cloudinary."""

    secure_url: str = Field(..., description="HTTPS delivery URL returned by Cloudinary")
    public_id: str = Field(..., description="Cloudinary public id")


class ProjectCreate(CamelModel):
    """
    JSON body for POST /api/projects. Loosely typed fields are normalized
    rather than rejected.
    """

    title: str | None = Field(None, description="Project title (required)")
    description: str | None = Field(None, description="Optional description")
    tags: list[str] = Field(default_factory=list, description="Tag names")
    featured: bool = Field(False, description="Show on the home page")
    thumbnail_index: Any = Field(None, description="Index of the thumbnail image")
    uploaded_images: list[UploadedImageRef] = Field(
        default_factory=list, description="Images already uploaded to Cloudinary"
    )
    cloudinary_folder: str | None = Field(None, description="Folder the images were uploaded to")
    project_date_year: Any = Field(None, description="Explicit project year")
    project_date_month: Any = Field(None, description="Explicit project month (1-12)")
    project_date_day: Any = Field(None, description="Explicit project day (1-31)")
    date_is_month_only: bool = Field(False, description="Only month and year are meaningful")

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strings_only(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_names(cls, v: Any) -> list[str]:
        if not isinstance(v, list):
            return []
        return [t.strip() for t in v if isinstance(t, str) and t.strip()]

    @field_validator("featured", "date_is_month_only", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        return _truthy(v)

    @field_validator("uploaded_images", mode="before")
    @classmethod
    def _valid_images(cls, v: Any) -> list[dict[str, str]]:
        if not isinstance(v, list):
            return []
        return [
            {"secureUrl": item["secureUrl"], "publicId": item["publicId"]}
            for item in v
            if isinstance(item, dict)
            and isinstance(item.get("secureUrl"), str)
            and isinstance(item.get("publicId"), str)
        ]

    @field_validator("cloudinary_folder", mode="before")
    @classmethod
    def _folder(cls, v: Any) -> str | None:
        if isinstance(v, str) and v.strip():
            return v.strip()
        return None


# ---------------------------------------------------
# Multipart Form
# ---------------------------------------------------


@dataclass
class ProjectForm:
    """
    Fields of the multipart project form. `None` means the field was not sent.
    """

    title: str | None = None
    description: str | None = None
    tags: str | None = None
    featured: str | None = None
    thumbnail_index: str | None = None
    images: list[UploadFile] = field(default_factory=list)
    remove_image: str | None = None
    keep_public_ids: list[str] = field(default_factory=list)
    project_date_year: str | None = None
    project_date_month: str | None = None
    project_date_day: str | None = None

    @property
    def tag_names(self) -> list[str]:
        return parse_tag_list(self.tags)


# ---------------------------------------------------
# Read (Response) Schemas
# ---------------------------------------------------


class ProjectImageRead(CamelModel):
    id: UUID
    project_id: UUID
    image_url: str
    image_public_id: str
    sort_order: int
    created_at: datetime | None = None


class ProjectBase(CamelModel):
    id: UUID = Field(..., description="Unique identifier for the project")
    title: str
    description: str | None = None
    featured: bool = False
    image_url: str | None = Field(None, description="Thumbnail delivery URL")
    image_public_id: str | None = None
    cloudinary_folder: str | None = None
    display_order: int = 0
    date_is_month_only: bool | None = None
    created_at: datetime = Field(..., description="Project date")
    updated_at: datetime | None = None
    tags: list[str] = Field(default_factory=list, description="Tag names")


class ProjectRead(ProjectBase):
    """A project with its full ordered image records."""

    images: list[ProjectImageRead] = Field(default_factory=list)


class ProjectListImage(CamelModel):
    image_url: str
    image_public_id: str | None = None


class ProjectListItem(ProjectBase):
    """A project as listed in the gallery, with display-optimized URLs."""

    images: list[ProjectListImage] = Field(default_factory=list)


class ProjectPage(CamelModel):
    projects: list[ProjectListItem]
    has_more: bool


# ---------------------------------------------------
# Reorder Schema
# ---------------------------------------------------


class ProjectOrder(CamelModel):
    ordered_ids: Any = Field(None, description="Project ids in the desired display order")
