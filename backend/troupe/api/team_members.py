from __future__ import annotations
"""Team member API endpoints — the ordered list of people in the group."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.api.deps import apply_patch, http_error
from troupe.database import get_db
from troupe.errors import ReorderMismatchError, TroupeError
from troupe.models.team_member import TeamMember
from troupe.schemas.team_member import (
    TeamMemberCreate,
    TeamMemberRead,
    TeamMemberReorder,
    TeamMemberUpdate,
)
from troupe.services import cascade, ordering, pubsub

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[TeamMemberRead])
async def list_team_members(db: AsyncSession = Depends(get_db)):
    """List team members in display order."""
    return await ordering.list_ordered(db, TeamMember)


@router.post("/", response_model=TeamMemberRead, status_code=201)
async def create_team_member(data: TeamMemberCreate, db: AsyncSession = Depends(get_db)):
    """Add a team member at the end of the list."""
    member = await ordering.append(db, TeamMember, name=data.name)
    await pubsub.commit_and_publish(db, pubsub.TEAM_MEMBERS, "team_members_changed", member_id=member.id)
    return member


@router.post("/reorder", response_model=list[TeamMemberRead])
async def reorder_team_members(data: TeamMemberReorder, db: AsyncSession = Depends(get_db)):
    """Reorder team members; every member ID exactly once."""
    try:
        members = await ordering.reorder(db, TeamMember, data.member_ids)
    except ReorderMismatchError as exc:
        logger.info("Rejected team member reorder: %s", exc.message)
        raise HTTPException(
            status_code=exc.status_code,
            detail={
                "message": exc.message,
                "missing": exc.missing,
                "unknown": exc.unknown,
                "duplicates": exc.duplicates,
            },
        )
    await pubsub.commit_and_publish(db, pubsub.TEAM_MEMBERS, "team_members_changed")
    return members


@router.get("/{member_id}", response_model=TeamMemberRead | None)
async def get_team_member(member_id: str, db: AsyncSession = Depends(get_db)):
    """Get a team member by ID; null when it does not exist."""
    return await db.get(TeamMember, member_id)


@router.patch("/{member_id}", response_model=TeamMemberRead)
async def update_team_member(
    member_id: str, data: TeamMemberUpdate, db: AsyncSession = Depends(get_db)
):
    """Rename a team member."""
    member = await db.get(TeamMember, member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Team member not found")

    apply_patch(member, data, required=("name",))
    await db.flush()
    await db.refresh(member)
    await pubsub.commit_and_publish(db, pubsub.TEAM_MEMBERS, "team_members_changed", member_id=member.id)
    return member


@router.delete("/{member_id}", status_code=204)
async def delete_team_member(member_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a team member and unassign them from characters and props.

    The remaining members keep their order values.
    """
    try:
        await cascade.delete_team_member(db, member_id)
    except TroupeError as exc:
        raise http_error(exc)
    await pubsub.commit_and_publish(db, pubsub.TEAM_MEMBERS, "team_members_changed", member_id=member_id)
