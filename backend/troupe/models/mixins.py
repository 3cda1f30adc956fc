from __future__ import annotations
"""Column mixins shared by ORM models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Integer, func
from sqlalchemy.orm import Mapped, mapped_column


class OrderedMixin:
    """Manual display position for members of a sibling set.

    Lower values sort first. Values are unique after an append or reorder
    completes but may have gaps after deletions.
    """

    order: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, index=True
    )


class TimestampMixin:
    created_at: Mapped[Optional[datetime]] = mapped_column(
        nullable=True, server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        nullable=True, server_default=func.now(), onupdate=func.now()
    )
