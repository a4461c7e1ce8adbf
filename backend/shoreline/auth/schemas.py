"""
backend/shoreline/auth/schemas.py

Auth Schemas
"""

from uuid import UUID

from pydantic import Field

from shoreline.core.schemas import CamelModel


class SessionUser(CamelModel):
    """The signed-in user as exposed to pages and scripts."""

    id: UUID
    name: str | None = None
    email: str
    image: str | None = None
    is_admin: bool = Field(False, description="Whether the user may use the admin dashboard")


class GoogleProfile(CamelModel):
    """The subset of Google's OpenID userinfo the site uses."""

    email: str | None = None
    name: str | None = None
    picture: str | None = None
    email_verified: bool = False
