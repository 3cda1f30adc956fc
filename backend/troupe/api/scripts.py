from __future__ import annotations
"""Script version API endpoints, nested under a sketch.

Each upload becomes a new version; the highest version is the current script.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.database import get_db
from troupe.models.script import Script
from troupe.models.sketch import Sketch
from troupe.schemas.script import ScriptCreate, ScriptRead
from troupe.services import pubsub
from troupe.services.blob_store import LocalBlobStore, get_blob_store

logger = logging.getLogger(__name__)

router = APIRouter()


async def _script_to_read(script: Script, db: AsyncSession, blobs: LocalBlobStore) -> dict:
    return {
        "id": script.id,
        "sketch_id": script.sketch_id,
        "file_id": script.file_id,
        "file_name": script.file_name,
        "version": script.version,
        "file_url": await blobs.get_url(db, script.file_id),
        "created_at": script.created_at,
    }


@router.get("/", response_model=list[ScriptRead])
async def list_script_versions(
    sketch_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """List every script version of a sketch, newest first."""
    result = await db.execute(
        select(Script)
        .where(Script.sketch_id == sketch_id)
        .order_by(Script.version.desc())
    )
    return [await _script_to_read(s, db, blobs) for s in result.scalars().all()]


@router.get("/latest", response_model=ScriptRead | None)
async def get_latest_script(
    sketch_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Current script of a sketch, or null if none was uploaded."""
    result = await db.execute(
        select(Script)
        .where(Script.sketch_id == sketch_id)
        .order_by(Script.version.desc())
        .limit(1)
    )
    script = result.scalar_one_or_none()
    if script is None:
        return None
    return await _script_to_read(script, db, blobs)


@router.post("/", response_model=ScriptRead, status_code=201)
async def create_script_version(
    sketch_id: str,
    data: ScriptCreate,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Register an uploaded file as the next script version."""
    if not await db.get(Sketch, sketch_id):
        raise HTTPException(status_code=404, detail="Sketch not found")

    result = await db.execute(
        select(func.max(Script.version)).where(Script.sketch_id == sketch_id)
    )
    next_version = (result.scalar() or 0) + 1

    script = Script(
        sketch_id=sketch_id,
        file_id=data.file_id,
        file_name=data.file_name,
        version=next_version,
    )
    db.add(script)
    await db.flush()
    await db.refresh(script)
    logger.info("Sketch %s script v%d (%s)", sketch_id, next_version, data.file_name)
    await pubsub.commit_and_publish(db, pubsub.sketch_scope(sketch_id), "scripts_changed")
    return await _script_to_read(script, db, blobs)


@router.delete("/{script_id}", status_code=204)
async def delete_script_version(
    sketch_id: str,
    script_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Delete one script version and its file."""
    script = await db.get(Script, script_id)
    if not script or script.sketch_id != sketch_id:
        raise HTTPException(status_code=404, detail="Script not found")
    await blobs.delete(db, script.file_id)
    await db.delete(script)
    await pubsub.commit_and_publish(db, pubsub.sketch_scope(sketch_id), "scripts_changed")
