from __future__ import annotations
"""Script ORM model — an uploaded script file, versioned per sketch."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from troupe.database import Base


class Script(Base):
    """One version of a sketch's script; the highest version is current."""

    __tablename__ = "scripts"
    __table_args__ = (
        Index("ix_scripts_sketch_version", "sketch_id", "version"),
        {
            "mysql_charset": "utf8mb4",
            "mysql_collate": "utf8mb4_unicode_ci",
        },
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: uuid.uuid4().hex,
    )
    sketch_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sketches.id"), nullable=False, index=True
    )
    file_id: Mapped[str] = mapped_column(String(36), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        nullable=True, server_default=func.now()
    )
