"""
backend/shoreline/tag/schemas.py

Tag Schemas
"""

from uuid import UUID

from pydantic import Field

from shoreline.core.schemas import CamelModel


class TagRead(CamelModel):
    """Tag as shown in the admin tag editor."""

    id: UUID
    name: str
    project_count: int = Field(0, description="Number of projects carrying the tag")


class TagRename(CamelModel):
    name: str = Field(..., description="New tag name")
