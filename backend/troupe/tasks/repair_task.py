from __future__ import annotations
"""Celery Beat task for orphan repair — runs daily.

Removes characters, prop links, scripts and media whose parent sketch or
prop is gone, together with their stored files, and clears assignments to
deleted team members.
"""

import logging

from celery import shared_task

from troupe.tasks import run_async

logger = logging.getLogger(__name__)


async def _repair() -> dict[str, int]:
    from troupe.database import async_session_factory
    from troupe.services.blob_store import LocalBlobStore
    from troupe.services.cascade import repair_orphans as repair

    async with async_session_factory() as session:
        try:
            report = await repair(session, LocalBlobStore())
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    return report.to_dict()


@shared_task
def repair_orphans():
    """Run one orphan repair pass and notify clients when anything changed."""
    from troupe.services.pubsub import PROPS, SKETCHES, publish_change_sync

    counts = run_async(_repair())
    if any(counts.values()):
        publish_change_sync(SKETCHES, {"type": "sketches_changed"})
        publish_change_sync(PROPS, {"type": "props_changed"})
    logger.info("Orphan repair complete: %s", counts)
    return counts
