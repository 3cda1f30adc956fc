from __future__ import annotations
"""Pydantic v2 schemas for Prop model."""

from pydantic import BaseModel, Field

from troupe.models.prop import PropStatus


class PropCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    status: PropStatus = PropStatus.IDEA
    notes: str | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class PropUpdate(BaseModel):
    """Partial update. ``responsible_person_id: null`` clears the responsible person."""

    name: str | None = Field(None, min_length=1, max_length=100)
    status: PropStatus | None = None
    responsible_person_id: str | None = None
    notes: str | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class PropRead(BaseModel):
    id: str
    name: str
    status: PropStatus
    responsible_person_id: str | None = None
    notes: str | None = None

    model_config = {"from_attributes": True}
