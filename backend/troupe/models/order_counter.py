from __future__ import annotations
"""Per-collection high-water mark of handed-out ``order`` values."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from troupe.database import Base


class OrderCounter(Base):
    """Highest ``order`` ever assigned in one ordered table.

    Survives deletes, so an order slot is never handed out twice.
    """

    __tablename__ = "order_counters"
    __table_args__ = {
        "mysql_charset": "utf8mb4",
        "mysql_collate": "utf8mb4_unicode_ci",
    }

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    high_water: Mapped[int] = mapped_column(Integer, nullable=False, default=-1)
