"""
backend/shoreline/tag/models.py

Tag Database Model
Defines the SQLAlchemy model for project categories ("tags").
Tag names are unique; matching elsewhere is case-insensitive.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shoreline.database.base import Base

if TYPE_CHECKING:
    from shoreline.project.models import ProjectTag


# ---------------------------------------------------
# Tag Model
# ---------------------------------------------------


class Tag(Base):
    """A category label attached to projects."""

    __tablename__ = "tags"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the tag",
    )

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Display name of the tag",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        comment="Timestamp when the tag was created",
    )

    # ---------------------------------------------------
    # Relationships
    # ---------------------------------------------------

    project_tags: Mapped[list["ProjectTag"]] = relationship(
        "ProjectTag",
        back_populates="tag",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
