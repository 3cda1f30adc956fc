from __future__ import annotations
"""Pydantic v2 schemas for the blob store endpoints."""

from pydantic import BaseModel


class UploadUrlRead(BaseModel):
    upload_url: str


class StoredFileRead(BaseModel):
    storage_id: str
    size_bytes: int
    content_type: str | None = None
    checksum: str | None = None


class FileUrlRead(BaseModel):
    url: str | None = None
