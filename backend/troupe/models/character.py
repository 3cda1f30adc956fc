from __future__ import annotations
"""Character ORM model — a role in a sketch, optionally cast to a team member."""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from troupe.database import Base
from troupe.models.mixins import TimestampMixin


class Character(TimestampMixin, Base):
    """A character of a sketch and the team member playing it."""

    __tablename__ = "characters"
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: uuid.uuid4().hex,
    )
    sketch_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("sketches.id"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    assigned_to: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("team_members.id"),
        nullable=True,
        index=True,
    )
