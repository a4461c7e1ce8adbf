"""
backend/shoreline/database/models.py

Core SQLAlchemy ORM Models

Defines:
- User: accounts created through Google sign-in; `is_admin` gates the dashboard

Also imports every feature model so the shared metadata (and Alembic)
sees the whole schema:
- Project, ProjectImage, ProjectTag
- Tag
- SiteSetting
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from shoreline.database.base import Base
from shoreline.project.models import Project, ProjectImage, ProjectTag  # noqa: F401
from shoreline.site.models import SiteSetting  # noqa: F401
from shoreline.tag.models import Tag  # noqa: F401

# ---------------------------------------------------
# User Model: Authenticated Site User
# ---------------------------------------------------


class User(Base):
    __tablename__ = "users"

    # -------------------------------------
    # Fields
    # -------------------------------------
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the user",
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, comment="User's email address"
    )
    name: Mapped[str | None] = mapped_column(
        String(255), nullable=True, comment="Display name from the identity provider"
    )
    image: Mapped[str | None] = mapped_column(
        String, nullable=True, comment="Avatar URL from the identity provider"
    )
    email_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, comment="Whether the provider verified the email"
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean, default=False, comment="Whether the user may use the admin dashboard"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        comment="Timestamp when the user was created",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        comment="Timestamp when the user was last updated",
    )
