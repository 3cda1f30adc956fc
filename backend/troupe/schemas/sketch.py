from __future__ import annotations
"""Pydantic v2 schemas for Sketch model."""

from datetime import datetime

from pydantic import BaseModel, Field


class SketchCreate(BaseModel):
    """Schema for creating a sketch (appended after the last one)."""

    title: str = Field(..., min_length=1, max_length=100)
    duration: str | None = Field(None, max_length=50)

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class SketchUpdate(BaseModel):
    """Partial update; only fields present in the request change."""

    title: str | None = Field(None, min_length=1, max_length=100)
    duration: str | None = Field(None, max_length=50)
    description: str | None = None
    image_id: str | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class SketchReorder(BaseModel):
    """Every sketch id exactly once, in the desired order."""

    sketch_ids: list[str]

    model_config = {"extra": "forbid"}


class SketchRead(BaseModel):
    id: str
    title: str
    duration: str | None = None
    description: str | None = None
    image_id: str | None = None
    image_url: str | None = None
    order: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
