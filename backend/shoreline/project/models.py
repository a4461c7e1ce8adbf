"""
backend/shoreline/project/models.py

Project Database Models
Defines:
- Project: a portfolio entry; created_at doubles as the project date
- ProjectImage: ordered images belonging to a project
- ProjectTag: association between projects and tags
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shoreline.database.base import Base
from shoreline.tag.models import Tag


# ---------------------------------------------------
# Project Model
# ---------------------------------------------------


class Project(Base):
    """A woodworking project shown in the gallery."""

    __tablename__ = "projects"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the project",
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False, comment="Project title")
    description: Mapped[str | None] = mapped_column(
        Text, nullable=True, comment="Optional project description"
    )
    featured: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, comment="Shown on the home page"
    )
    image_url: Mapped[str | None] = mapped_column(
        String, nullable=True, comment="Delivery URL of the thumbnail image"
    )
    image_public_id: Mapped[str | None] = mapped_column(
        String, nullable=True, comment="Cloudinary public id of the thumbnail image"
    )
    cloudinary_folder: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        comment="Cloudinary folder holding the project's images (projects/YYYYMMDD-HHmmss)",
    )
    display_order: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False, comment="Position among projects of the same day"
    )
    date_is_month_only: Mapped[bool | None] = mapped_column(
        Boolean, nullable=True, comment="Project date was chosen as month and year only"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
        comment="Project date; drives gallery ordering",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        comment="Timestamp when the project was last updated",
    )

    # -------------------------------------
    # Relationships
    # -------------------------------------

    # One-to-Many: ordered gallery images
    images: Mapped[list["ProjectImage"]] = relationship(
        "ProjectImage",
        back_populates="project",
        order_by="ProjectImage.sort_order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # Many-to-Many (through ProjectTag): categories
    project_tags: Mapped[list["ProjectTag"]] = relationship(
        "ProjectTag",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def tag_names(self) -> list[str]:
        return [pt.tag.name for pt in self.project_tags if pt.tag is not None]


# ---------------------------------------------------
# ProjectImage Model
# ---------------------------------------------------


class ProjectImage(Base):
    """One uploaded image of a project."""

    __tablename__ = "project_images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the image",
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning project",
    )
    image_url: Mapped[str] = mapped_column(String, nullable=False, comment="Delivery URL")
    image_public_id: Mapped[str] = mapped_column(
        String, nullable=False, comment="Cloudinary public id"
    )
    sort_order: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False, comment="Position within the project gallery"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        comment="Timestamp when the image was attached",
    )

    project: Mapped["Project"] = relationship("Project", back_populates="images")


# ---------------------------------------------------
# ProjectTag Association Model
# ---------------------------------------------------


class ProjectTag(Base):
    """Links a project to a tag."""

    __tablename__ = "project_tags"

    project_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    )

    project: Mapped["Project"] = relationship("Project", back_populates="project_tags")
    tag: Mapped["Tag"] = relationship("Tag", back_populates="project_tags", lazy="joined")
