from __future__ import annotations
"""Pydantic v2 schemas for sketch and prop media attachments."""

from datetime import datetime

from pydantic import BaseModel, Field


class MediaCreate(BaseModel):
    """Attach an uploaded file to a sketch or prop."""

    file_id: str = Field(..., min_length=1, max_length=36)
    file_name: str = Field(..., min_length=1, max_length=255)
    file_type: str = Field(..., min_length=1, max_length=100)
    width: int | None = Field(None, ge=0)
    height: int | None = Field(None, ge=0)

    model_config = {"extra": "forbid"}


class MediaRead(BaseModel):
    id: str
    file_id: str
    file_name: str
    file_type: str
    width: int | None = None
    height: int | None = None
    url: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
