from __future__ import annotations
"""Blob store endpoints — upload URLs, raw uploads, file URLs and deletion.

Uploading is two steps: ask for a single-use upload URL, then POST the raw
file bytes to it with the file's Content-Type. The returned ``storage_id`` is
what sketches, scripts and media rows reference.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.api.deps import http_error
from troupe.database import get_db
from troupe.errors import TroupeError
from troupe.schemas.storage import FileUrlRead, StoredFileRead, UploadUrlRead
from troupe.services.blob_store import LocalBlobStore, get_blob_store

router = APIRouter()


@router.post("/upload-url", response_model=UploadUrlRead)
async def generate_upload_url(
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Issue a single-use upload URL."""
    return {"upload_url": await blobs.generate_upload_url(db)}


@router.post("/upload/{token}", response_model=StoredFileRead, status_code=201)
async def upload_file(
    token: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Store the raw request body through an upload URL."""
    data = await request.body()
    try:
        stored = await blobs.store(db, token, data, request.headers.get("content-type"))
    except TroupeError as exc:
        raise http_error(exc)
    return {
        "storage_id": stored.id,
        "size_bytes": stored.size_bytes,
        "content_type": stored.content_type,
        "checksum": stored.checksum,
    }


@router.get("/{file_id}/url", response_model=FileUrlRead)
async def get_file_url(
    file_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Stable URL of a stored file; ``url`` is null for unknown ids."""
    return {"url": await blobs.get_url(db, file_id)}


@router.delete("/{file_id}", status_code=204)
async def delete_file(
    file_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Delete a stored file."""
    if not await blobs.delete(db, file_id):
        raise HTTPException(status_code=404, detail="File not found")
