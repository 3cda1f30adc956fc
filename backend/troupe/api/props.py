from __future__ import annotations
"""Prop API endpoints — the shared catalogue and its links to sketches."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.api.deps import apply_patch
from troupe.database import get_db
from troupe.models.prop import Prop, SketchProp
from troupe.models.sketch import Sketch
from troupe.models.team_member import TeamMember
from troupe.schemas.prop import PropCreate, PropRead, PropUpdate
from troupe.services import cascade, pubsub
from troupe.services.blob_store import LocalBlobStore, get_blob_store

router = APIRouter()
sketch_router = APIRouter()


@router.get("/", response_model=list[PropRead])
async def list_props(db: AsyncSession = Depends(get_db)):
    """List every prop, oldest first."""
    result = await db.execute(select(Prop).order_by(Prop.created_at, Prop.id))
    return result.scalars().all()


@router.post("/", response_model=PropRead, status_code=201)
async def create_prop(data: PropCreate, db: AsyncSession = Depends(get_db)):
    """Create a prop. Names are not required to be unique."""
    prop = Prop(name=data.name, status=data.status.value, notes=data.notes)
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    await pubsub.commit_and_publish(db, pubsub.PROPS, "props_changed", prop_id=prop.id)
    return prop


@router.get("/{prop_id}", response_model=PropRead | None)
async def get_prop(prop_id: str, db: AsyncSession = Depends(get_db)):
    """Get a prop by ID; null when it does not exist."""
    return await db.get(Prop, prop_id)


@router.patch("/{prop_id}", response_model=PropRead)
async def update_prop(prop_id: str, data: PropUpdate, db: AsyncSession = Depends(get_db)):
    """Update name, status, responsible person or notes."""
    prop = await db.get(Prop, prop_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Prop not found")

    update_data = data.model_dump(exclude_unset=True)
    person_id = update_data.get("responsible_person_id")
    if person_id is not None and not await db.get(TeamMember, person_id):
        raise HTTPException(status_code=404, detail="Team member not found")

    apply_patch(prop, data, required=("name", "status"))
    if data.status is not None:
        prop.status = data.status.value
    await db.flush()
    await db.refresh(prop)
    await pubsub.commit_and_publish(db, pubsub.PROPS, "props_changed", prop_id=prop.id)
    return prop


@router.delete("/{prop_id}", status_code=204)
async def delete_prop(
    prop_id: str,
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Delete a prop, its sketch links and its media."""
    if not await db.get(Prop, prop_id):
        raise HTTPException(status_code=404, detail="Prop not found")
    await cascade.delete_prop(db, blobs, prop_id)
    await pubsub.commit_and_publish(db, pubsub.PROPS, "props_changed", prop_id=prop_id)


# ──────── Sketch ↔ prop links (/sketches/{sketch_id}/props) ────────


@sketch_router.get("/", response_model=list[PropRead])
async def list_props_for_sketch(sketch_id: str, db: AsyncSession = Depends(get_db)):
    """List the props a sketch uses."""
    result = await db.execute(
        select(Prop)
        .join(SketchProp, SketchProp.prop_id == Prop.id)
        .where(SketchProp.sketch_id == sketch_id)
        .order_by(Prop.name, Prop.id)
    )
    return result.scalars().all()


@sketch_router.put("/{prop_id}", status_code=204)
async def add_prop_to_sketch(
    sketch_id: str, prop_id: str, db: AsyncSession = Depends(get_db)
):
    """Link a prop to a sketch. Linking twice is a no-op."""
    if not await db.get(Sketch, sketch_id):
        raise HTTPException(status_code=404, detail="Sketch not found")
    if not await db.get(Prop, prop_id):
        raise HTTPException(status_code=404, detail="Prop not found")

    existing = await db.execute(
        select(SketchProp.id).where(
            SketchProp.sketch_id == sketch_id, SketchProp.prop_id == prop_id
        )
    )
    if existing.first() is None:
        db.add(SketchProp(sketch_id=sketch_id, prop_id=prop_id))
        await db.flush()
        await pubsub.commit_and_publish(db, pubsub.sketch_scope(sketch_id), "props_changed")


@sketch_router.delete("/{prop_id}", status_code=204)
async def remove_prop_from_sketch(
    sketch_id: str, prop_id: str, db: AsyncSession = Depends(get_db)
):
    """Unlink a prop from a sketch; the prop itself is kept."""
    result = await db.execute(
        select(SketchProp).where(
            SketchProp.sketch_id == sketch_id, SketchProp.prop_id == prop_id
        )
    )
    link = result.scalar_one_or_none()
    if link is None:
        raise HTTPException(status_code=404, detail="Prop is not linked to this sketch")
    await db.delete(link)
    await pubsub.commit_and_publish(db, pubsub.sketch_scope(sketch_id), "props_changed")
