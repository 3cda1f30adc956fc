from __future__ import annotations
"""Prop ORM models — the shared prop catalogue and its sketch associations."""

import enum
import uuid
from typing import Optional

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from troupe.database import Base
from troupe.models.mixins import TimestampMixin


class PropStatus(str, enum.Enum):
    """How far along a prop is."""

    IDEA = "idea"
    PLANNED = "planned"
    READY = "ready"


class Prop(TimestampMixin, Base):
    """A prop that one or more sketches need."""

    __tablename__ = "props"
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
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PropStatus.IDEA.value
    )
    responsible_person_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("team_members.id"),
        nullable=True,
        index=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class SketchProp(Base):
    """Association row: sketch uses prop."""

    __tablename__ = "sketch_props"
    __table_args__ = (
        UniqueConstraint("sketch_id", "prop_id", name="uq_sketch_props_pair"),
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
    prop_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("props.id"), nullable=False, index=True
    )
