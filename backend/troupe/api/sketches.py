from __future__ import annotations
"""Sketch API endpoints — the ordered running order of the show."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.api.deps import apply_patch
from troupe.database import get_db
from troupe.errors import ReorderMismatchError
from troupe.models.sketch import Sketch
from troupe.schemas.sketch import SketchCreate, SketchRead, SketchReorder, SketchUpdate
from troupe.services import cascade, ordering, pubsub
from troupe.services.blob_store import LocalBlobStore, get_blob_store

logger = logging.getLogger(__name__)

router = APIRouter()


async def _sketch_to_read(
    sketch: Sketch, db: AsyncSession, blobs: LocalBlobStore
) -> dict:
    """Convert Sketch ORM object to a SketchRead-compatible dict with its image URL."""
    return {
        "id": sketch.id,
        "title": sketch.title,
        "duration": sketch.duration,
        "description": sketch.description,
        "image_id": sketch.image_id,
        "image_url": await blobs.get_url(db, sketch.image_id),
        "order": sketch.order,
        "created_at": sketch.created_at,
        "updated_at": sketch.updated_at,
    }


@router.get("/", response_model=list[SketchRead])
async def list_sketches(
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """List all sketches in display order."""
    sketches = await ordering.list_ordered(db, Sketch)
    return [await _sketch_to_read(s, db, blobs) for s in sketches]


@router.post("/", response_model=SketchRead, status_code=201)
async def create_sketch(
    data: SketchCreate,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Create a sketch at the end of the running order."""
    sketch = await ordering.append(db, Sketch, title=data.title, duration=data.duration)
    await pubsub.commit_and_publish(db, pubsub.SKETCHES, "sketches_changed", sketch_id=sketch.id)
    return await _sketch_to_read(sketch, db, blobs)


@router.post("/reorder", response_model=list[SketchRead])
async def reorder_sketches(
    data: SketchReorder,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Reorder sketches by providing every sketch ID in the desired order.

    Returns 409 when the list is not exactly the current set of sketches.
    """
    try:
        sketches = await ordering.reorder(db, Sketch, data.sketch_ids)
    except ReorderMismatchError as exc:
        logger.info("Rejected sketch reorder: %s", exc.message)
        raise HTTPException(
            status_code=exc.status_code,
            detail={
                "message": exc.message,
                "missing": exc.missing,
                "unknown": exc.unknown,
                "duplicates": exc.duplicates,
            },
        )
    await pubsub.commit_and_publish(db, pubsub.SKETCHES, "sketches_changed")
    return [await _sketch_to_read(s, db, blobs) for s in sketches]


@router.get("/{sketch_id}", response_model=SketchRead | None)
async def get_sketch(
    sketch_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Get a sketch by ID; null when it does not exist."""
    sketch = await db.get(Sketch, sketch_id)
    if not sketch:
        return None
    return await _sketch_to_read(sketch, db, blobs)


@router.patch("/{sketch_id}", response_model=SketchRead)
async def update_sketch(
    sketch_id: str,
    data: SketchUpdate,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Update a sketch's fields."""
    sketch = await db.get(Sketch, sketch_id)
    if not sketch:
        raise HTTPException(status_code=404, detail="Sketch not found")

    apply_patch(sketch, data, required=("title",))
    await db.flush()
    await db.refresh(sketch)
    await pubsub.commit_and_publish(db, pubsub.SKETCHES, "sketches_changed", sketch_id=sketch.id)
    return await _sketch_to_read(sketch, db, blobs)


@router.delete("/{sketch_id}", status_code=204)
async def delete_sketch(
    sketch_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Delete a sketch and everything attached to it.

    Safe to repeat: a second call removes any children left behind by an
    interrupted first one.
    """
    await cascade.delete_sketch(db, blobs, sketch_id)
    await pubsub.commit_and_publish(db, pubsub.SKETCHES, "sketches_changed", sketch_id=sketch_id)
    await pubsub.commit_and_publish(db, pubsub.sketch_scope(sketch_id), "sketch_deleted")
