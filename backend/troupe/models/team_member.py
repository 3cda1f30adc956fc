from __future__ import annotations
"""TeamMember ORM model — a person who can be cast or made responsible for props."""

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from troupe.database import Base
from troupe.models.mixins import OrderedMixin, TimestampMixin


class TeamMember(OrderedMixin, TimestampMixin, Base):
    __tablename__ = "team_members"
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: uuid.uuid4().hex,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
