"""Cascade deletes and orphan repair.

Deleting a parent removes its children one statement at a time, children
first, then the parent. Every step is keyed by the parent id, so a cascade
that failed halfway can simply be run again: it removes whatever is left and
succeeds even when the parent row is already gone. ``repair_orphans`` does the
same for every parent at once by scanning child tables for dangling foreign
keys.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.models import (
    Character,
    Prop,
    PropMedia,
    Script,
    Sketch,
    SketchMedia,
    SketchProp,
    TeamMember,
)
from troupe.errors import NotFoundError
from troupe.services import ordering
from troupe.services.blob_store import LocalBlobStore

logger = logging.getLogger(__name__)


@dataclass
class CascadeReport:
    """Row and blob counts removed by a cascade or repair pass."""

    characters: int = 0
    sketch_props: int = 0
    scripts: int = 0
    sketch_media: int = 0
    prop_media: int = 0
    blobs: int = 0
    cleared_assignments: int = 0
    parents: int = 0

    def merge(self, other: "CascadeReport") -> "CascadeReport":
        for key, value in asdict(other).items():
            setattr(self, key, getattr(self, key) + value)
        return self

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


async def _delete_file_rows(
    db: AsyncSession, blobs: LocalBlobStore, model, where
) -> tuple[int, int]:
    """Delete rows of a blob-owning model one by one, blob first."""
    result = await db.execute(select(model).where(where))
    rows = result.scalars().all()
    blob_count = 0
    for row in rows:
        if await blobs.delete(db, row.file_id):
            blob_count += 1
        await db.delete(row)
    await db.flush()
    return len(rows), blob_count


async def delete_sketch(
    db: AsyncSession, blobs: LocalBlobStore, sketch_id: str
) -> CascadeReport:
    """Delete a sketch with its characters, prop links, scripts and media."""
    report = CascadeReport()

    result = await db.execute(delete(Character).where(Character.sketch_id == sketch_id))
    report.characters = result.rowcount or 0

    result = await db.execute(delete(SketchProp).where(SketchProp.sketch_id == sketch_id))
    report.sketch_props = result.rowcount or 0

    report.scripts, blob_count = await _delete_file_rows(
        db, blobs, Script, Script.sketch_id == sketch_id
    )
    report.blobs += blob_count

    report.sketch_media, blob_count = await _delete_file_rows(
        db, blobs, SketchMedia, SketchMedia.sketch_id == sketch_id
    )
    report.blobs += blob_count

    sketch = await db.get(Sketch, sketch_id)
    if sketch is not None:
        if await blobs.delete(db, sketch.image_id):
            report.blobs += 1
        await ordering.delete(db, sketch)
        report.parents = 1

    logger.info("Cascade delete of sketch %s: %s", sketch_id, report.to_dict())
    return report


async def delete_prop(
    db: AsyncSession, blobs: LocalBlobStore, prop_id: str
) -> CascadeReport:
    """Delete a prop with its sketch links and media."""
    report = CascadeReport()

    result = await db.execute(delete(SketchProp).where(SketchProp.prop_id == prop_id))
    report.sketch_props = result.rowcount or 0

    report.prop_media, report.blobs = await _delete_file_rows(
        db, blobs, PropMedia, PropMedia.prop_id == prop_id
    )

    prop = await db.get(Prop, prop_id)
    if prop is not None:
        await db.delete(prop)
        report.parents = 1
    await db.flush()

    logger.info("Cascade delete of prop %s: %s", prop_id, report.to_dict())
    return report


async def clear_member_references(db: AsyncSession, member_id: str) -> int:
    """Unassign a team member from characters and props; returns rows touched."""
    chars = await db.execute(
        update(Character)
        .where(Character.assigned_to == member_id)
        .values(assigned_to=None)
        .execution_options(synchronize_session=False)
    )
    props = await db.execute(
        update(Prop)
        .where(Prop.responsible_person_id == member_id)
        .values(responsible_person_id=None)
        .execution_options(synchronize_session=False)
    )
    return (chars.rowcount or 0) + (props.rowcount or 0)


async def delete_team_member(db: AsyncSession, member_id: str) -> CascadeReport:
    """Unassign a team member everywhere, then delete them.

    Raises:
        NotFoundError: no team member with this id.
    """
    member = await db.get(TeamMember, member_id)
    if member is None:
        raise NotFoundError(f"Team member {member_id} not found")
    report = CascadeReport(parents=1)
    report.cleared_assignments = await clear_member_references(db, member_id)
    await ordering.delete(db, member)
    logger.info("Deleted team member %s: %s", member_id, report.to_dict())
    return report


async def repair_orphans(db: AsyncSession, blobs: LocalBlobStore) -> CascadeReport:
    """Remove children whose parent no longer exists and clear dangling assignments."""
    report = CascadeReport()

    sketch_ids = select(Sketch.id)
    prop_ids = select(Prop.id)
    member_ids = select(TeamMember.id)

    orphan_sketches: set[str] = set()
    for model in (Character, SketchProp, Script, SketchMedia):
        result = await db.execute(
            select(model.sketch_id).where(model.sketch_id.not_in(sketch_ids)).distinct()
        )
        orphan_sketches.update(row[0] for row in result.all())

    orphan_props: set[str] = set()
    for model in (SketchProp, PropMedia):
        result = await db.execute(
            select(model.prop_id).where(model.prop_id.not_in(prop_ids)).distinct()
        )
        orphan_props.update(row[0] for row in result.all())

    for sketch_id in sorted(orphan_sketches):
        report.merge(await delete_sketch(db, blobs, sketch_id))
    for prop_id in sorted(orphan_props):
        report.merge(await delete_prop(db, blobs, prop_id))

    chars = await db.execute(
        update(Character)
        .where(Character.assigned_to.is_not(None), Character.assigned_to.not_in(member_ids))
        .values(assigned_to=None)
        .execution_options(synchronize_session=False)
    )
    props = await db.execute(
        update(Prop)
        .where(
            Prop.responsible_person_id.is_not(None),
            Prop.responsible_person_id.not_in(member_ids),
        )
        .values(responsible_person_id=None)
        .execution_options(synchronize_session=False)
    )
    report.cleared_assignments += (chars.rowcount or 0) + (props.rowcount or 0)

    logger.info(
        "Orphan repair: %d sketch(es), %d prop(s) cleaned: %s",
        len(orphan_sketches), len(orphan_props), report.to_dict(),
    )
    return report
