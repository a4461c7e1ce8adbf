"""
backend/shoreline/site/models.py

Site Setting Database Model
Key/value rows holding editable page copy (about page, landing hero).
"""

import uuid

from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from shoreline.database.base import Base


class SiteSetting(Base):
    """A single editable site setting."""

    __tablename__ = "site_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the setting",
    )
    key: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, comment="Setting key, e.g. about.ourStoryBody"
    )
    value: Mapped[str] = mapped_column(Text, nullable=False, default="", comment="Setting value")
