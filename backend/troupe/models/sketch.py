from __future__ import annotations
"""Sketch ORM model — one numbered item of the running order."""

import uuid
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from troupe.database import Base
from troupe.models.mixins import OrderedMixin, TimestampMixin


class Sketch(OrderedMixin, TimestampMixin, Base):
    """A sketch with its description and optional cover image."""

    __tablename__ = "sketches"
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: uuid.uuid4().hex,
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    duration: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
