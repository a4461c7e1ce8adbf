"""
backend/shoreline/media/schemas.py

Media Schemas
"""

from pydantic import BaseModel, Field

from shoreline.core.schemas import CamelModel


class SignedUploadParams(CamelModel):
    """Parameters the browser posts to Cloudinary alongside each file."""

    cloud_name: str
    api_key: str
    timestamp: int
    signature: str
    folder: str


class CleanupResult(BaseModel):
    ok: bool = True
    deleted: list[str] = Field(default_factory=list, description="Deleted folder paths")
    message: str


class DeleteAssetRequest(CamelModel):
    public_id: str | None = Field(None, description="Cloudinary public id to delete")
