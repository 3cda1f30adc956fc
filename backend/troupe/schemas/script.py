from __future__ import annotations
"""Pydantic v2 schemas for Script model."""

from datetime import datetime

from pydantic import BaseModel, Field


class ScriptCreate(BaseModel):
    """Register an uploaded file as the next script version of a sketch."""

    file_id: str = Field(..., min_length=1, max_length=36)
    file_name: str = Field(..., min_length=1, max_length=255)

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class ScriptRead(BaseModel):
    id: str
    sketch_id: str
    file_id: str
    file_name: str
    version: int
    file_url: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
