from __future__ import annotations
"""Pydantic v2 schemas for Character model."""

from pydantic import BaseModel, Field


class CharacterCreate(BaseModel):
    """Schema for creating a character; new characters start uncast."""

    name: str = Field(..., min_length=1, max_length=100)

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class CharacterUpdate(BaseModel):
    """Schema for updating a character. ``assigned_to: null`` uncasts it."""

    name: str | None = Field(None, min_length=1, max_length=100)
    assigned_to: str | None = None

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class CharacterRead(BaseModel):
    id: str
    sketch_id: str
    name: str
    assigned_to: str | None = None

    model_config = {"from_attributes": True}
