from __future__ import annotations
"""Character CRUD API endpoints, nested under a sketch."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.api.deps import apply_patch
from troupe.database import get_db
from troupe.models.character import Character
from troupe.models.sketch import Sketch
from troupe.models.team_member import TeamMember
from troupe.schemas.character import CharacterCreate, CharacterRead, CharacterUpdate
from troupe.services import pubsub

router = APIRouter()


async def _get_owned(db: AsyncSession, sketch_id: str, character_id: str) -> Character:
    character = await db.get(Character, character_id)
    if not character or character.sketch_id != sketch_id:
        raise HTTPException(status_code=404, detail="Character not found")
    return character


@router.get("/", response_model=list[CharacterRead])
async def list_characters(sketch_id: str, db: AsyncSession = Depends(get_db)):
    """List all characters of a sketch."""
    result = await db.execute(
        select(Character)
        .where(Character.sketch_id == sketch_id)
        .order_by(Character.created_at, Character.id)
    )
    return result.scalars().all()


@router.post("/", response_model=CharacterRead, status_code=201)
async def create_character(
    sketch_id: str,
    data: CharacterCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new, uncast character for a sketch."""
    if not await db.get(Sketch, sketch_id):
        raise HTTPException(status_code=404, detail="Sketch not found")

    character = Character(sketch_id=sketch_id, name=data.name, assigned_to=None)
    db.add(character)
    await db.flush()
    await db.refresh(character)
    await pubsub.commit_and_publish(db, pubsub.sketch_scope(sketch_id), "characters_changed")
    return character


@router.get("/{character_id}", response_model=CharacterRead | None)
async def get_character(
    sketch_id: str, character_id: str, db: AsyncSession = Depends(get_db)
):
    """Get a character by ID; null when it does not exist in this sketch."""
    character = await db.get(Character, character_id)
    if not character or character.sketch_id != sketch_id:
        return None
    return character


@router.patch("/{character_id}", response_model=CharacterRead)
async def update_character(
    sketch_id: str,
    character_id: str,
    data: CharacterUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Rename a character or change who plays it."""
    character = await _get_owned(db, sketch_id, character_id)

    assigned_to = data.model_dump(exclude_unset=True).get("assigned_to")
    if assigned_to is not None and not await db.get(TeamMember, assigned_to):
        raise HTTPException(status_code=404, detail="Team member not found")

    apply_patch(character, data, required=("name",))
    await db.flush()
    await db.refresh(character)
    await pubsub.commit_and_publish(db, pubsub.sketch_scope(sketch_id), "characters_changed")
    return character


@router.delete("/{character_id}", status_code=204)
async def delete_character(
    sketch_id: str, character_id: str, db: AsyncSession = Depends(get_db)
):
    """Delete a character."""
    character = await _get_owned(db, sketch_id, character_id)
    await db.delete(character)
    await pubsub.commit_and_publish(db, pubsub.sketch_scope(sketch_id), "characters_changed")
