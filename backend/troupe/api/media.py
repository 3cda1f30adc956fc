from __future__ import annotations
"""Media attachment endpoints for sketches and props.

Both owners share the same handlers; ``_MediaOwner`` says which table and
parent column to use.
"""

import logging
from dataclasses import dataclass

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.database import get_db
from troupe.models.media import PropMedia, SketchMedia
from troupe.models.prop import Prop
from troupe.models.sketch import Sketch
from troupe.schemas.media import MediaCreate, MediaRead
from troupe.services import pubsub
from troupe.services.blob_store import LocalBlobStore, get_blob_store

logger = logging.getLogger(__name__)

sketch_router = APIRouter()
prop_router = APIRouter()


@dataclass(frozen=True)
class _MediaOwner:
    parent_model: type
    media_model: type
    parent_column: str
    label: str

    def scope(self, parent_id: str) -> str:
        if self.parent_model is Sketch:
            return pubsub.sketch_scope(parent_id)
        return pubsub.PROPS

    def column(self):
        return getattr(self.media_model, self.parent_column)


SKETCH_MEDIA = _MediaOwner(Sketch, SketchMedia, "sketch_id", "Sketch")
PROP_MEDIA = _MediaOwner(Prop, PropMedia, "prop_id", "Prop")


async def _media_to_read(media, db: AsyncSession, blobs: LocalBlobStore) -> dict:
    return {
        "id": media.id,
        "file_id": media.file_id,
        "file_name": media.file_name,
        "file_type": media.file_type,
        "width": media.width,
        "height": media.height,
        "url": await blobs.get_url(db, media.file_id),
        "created_at": media.created_at,
    }


async def _list(owner: _MediaOwner, parent_id: str, db: AsyncSession, blobs: LocalBlobStore):
    result = await db.execute(
        select(owner.media_model)
        .where(owner.column() == parent_id)
        .order_by(owner.media_model.created_at, owner.media_model.id)
    )
    return [await _media_to_read(m, db, blobs) for m in result.scalars().all()]


async def _add(
    owner: _MediaOwner,
    parent_id: str,
    data: MediaCreate,
    db: AsyncSession,
    blobs: LocalBlobStore,
):
    if not await db.get(owner.parent_model, parent_id):
        raise HTTPException(status_code=404, detail=f"{owner.label} not found")
    media = owner.media_model(**{owner.parent_column: parent_id}, **data.model_dump())
    db.add(media)
    await db.flush()
    await db.refresh(media)
    await pubsub.commit_and_publish(db, owner.scope(parent_id), "media_changed", owner_id=parent_id)
    return await _media_to_read(media, db, blobs)


async def _remove(
    owner: _MediaOwner,
    parent_id: str,
    media_id: str,
    db: AsyncSession,
    blobs: LocalBlobStore,
) -> None:
    media = await db.get(owner.media_model, media_id)
    if not media or getattr(media, owner.parent_column) != parent_id:
        raise HTTPException(status_code=404, detail="Media not found")
    await blobs.delete(db, media.file_id)
    await db.delete(media)
    await pubsub.commit_and_publish(db, owner.scope(parent_id), "media_changed", owner_id=parent_id)


async def _clear(owner: _MediaOwner, parent_id: str, db: AsyncSession, blobs: LocalBlobStore) -> None:
    if not await db.get(owner.parent_model, parent_id):
        raise HTTPException(status_code=404, detail=f"{owner.label} not found")
    result = await db.execute(select(owner.media_model).where(owner.column() == parent_id))
    rows = result.scalars().all()
    for media in rows:
        await blobs.delete(db, media.file_id)
        await db.delete(media)
    logger.info("Cleared %d media file(s) from %s %s", len(rows), owner.label.lower(), parent_id)
    await pubsub.commit_and_publish(db, owner.scope(parent_id), "media_changed", owner_id=parent_id)


# ──────── /sketches/{sketch_id}/media ────────


@sketch_router.get("/", response_model=list[MediaRead])
async def list_sketch_media(
    sketch_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """List media attached to a sketch."""
    return await _list(SKETCH_MEDIA, sketch_id, db, blobs)


@sketch_router.post("/", response_model=MediaRead, status_code=201)
async def add_sketch_media(
    sketch_id: str,
    data: MediaCreate,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Attach an uploaded file to a sketch."""
    return await _add(SKETCH_MEDIA, sketch_id, data, db, blobs)


@sketch_router.delete("/{media_id}", status_code=204)
async def remove_sketch_media(
    sketch_id: str,
    media_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Remove one media file from a sketch and delete the file."""
    await _remove(SKETCH_MEDIA, sketch_id, media_id, db, blobs)


@sketch_router.delete("/", status_code=204)
async def clear_sketch_media(
    sketch_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Remove every media file from a sketch."""
    await _clear(SKETCH_MEDIA, sketch_id, db, blobs)


# ──────── /props/{prop_id}/media ────────


@prop_router.get("/", response_model=list[MediaRead])
async def list_prop_media(
    prop_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """List media attached to a prop."""
    return await _list(PROP_MEDIA, prop_id, db, blobs)


@prop_router.post("/", response_model=MediaRead, status_code=201)
async def add_prop_media(
    prop_id: str,
    data: MediaCreate,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Attach an uploaded file to a prop."""
    return await _add(PROP_MEDIA, prop_id, data, db, blobs)


@prop_router.delete("/{media_id}", status_code=204)
async def remove_prop_media(
    prop_id: str,
    media_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    await _remove(PROP_MEDIA, prop_id, media_id, db, blobs)


@prop_router.delete("/", status_code=204)
async def clear_prop_media(
    prop_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    await _clear(PROP_MEDIA, prop_id, db, blobs)
