from __future__ import annotations
"""Media ORM models — images and videos attached to sketches and props."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from troupe.database import Base


class MediaFields:
    """Columns shared by every media attachment table."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: uuid.uuid4().hex,
    )
    file_id: Mapped[str] = mapped_column(String(36), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[str] = mapped_column(String(100), nullable=False)
    width: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    height: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        nullable=True, server_default=func.now()
    )


class SketchMedia(MediaFields, Base):
    __tablename__ = "sketch_media"
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    sketch_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sketches.id"), nullable=False, index=True
    )


class PropMedia(MediaFields, Base):
    __tablename__ = "prop_media"
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    prop_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("props.id"), nullable=False, index=True
    )
