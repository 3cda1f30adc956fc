from __future__ import annotations
"""Pydantic v2 schemas for TeamMember model."""

from datetime import datetime

from pydantic import BaseModel, Field


class TeamMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class TeamMemberUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)

    model_config = {"extra": "forbid", "str_strip_whitespace": True}


class TeamMemberReorder(BaseModel):
    member_ids: list[str]

    model_config = {"extra": "forbid"}


class TeamMemberRead(BaseModel):
    id: str
    name: str
    order: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
