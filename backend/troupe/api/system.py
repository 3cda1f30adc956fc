"""System endpoints — dependency status and orphan repair."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import redis
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.config import get_settings
from troupe.database import get_db
from troupe.services import cascade, pubsub
from troupe.services.blob_store import LocalBlobStore, get_blob_store

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


async def _check_database(db: AsyncSession) -> dict[str, Any]:
    t0 = time.time()
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "ok", "latency_ms": round((time.time() - t0) * 1000, 1)}
    except Exception as e:
        return {"status": "error", "error": str(e)}


def _check_redis() -> dict[str, Any]:
    """Check Redis connectivity and basic info."""
    t0 = time.time()
    try:
        r = redis.Redis.from_url(settings.REDIS_URL, socket_timeout=3)
        info = r.info("server")
        ping = r.ping()
        latency_ms = round((time.time() - t0) * 1000, 1)
        return {
            "status": "ok" if ping else "error",
            "latency_ms": latency_ms,
            "version": info.get("redis_version", "unknown"),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}


def _check_celery_workers() -> dict[str, Any]:
    """Check Celery workers via ping broadcast."""
    from troupe.tasks import celery_app

    try:
        ping_result = celery_app.control.inspect(timeout=2).ping()
        if not ping_result:
            return {"status": "offline", "workers": [], "count": 0}
        workers = [
            {"name": name, "status": "ok" if pong.get("ok") == "pong" else "error"}
            for name, pong in ping_result.items()
        ]
        return {"status": "ok", "workers": workers, "count": len(workers)}
    except Exception as e:
        return {"status": "error", "error": str(e), "workers": [], "count": 0}


@router.get("/status")
async def system_status(deep: bool = False, db: AsyncSession = Depends(get_db)):
    """Database, Redis and (with ``deep=true``) Celery worker status."""
    status: dict[str, Any] = {
        "database": await _check_database(db),
        "redis": await asyncio.to_thread(_check_redis),
        "realtime": settings.REALTIME_ENABLED,
    }
    if deep:
        status["celery"] = await asyncio.to_thread(_check_celery_workers)
    return status


@router.post("/repair")
async def repair_orphans(
    db: AsyncSession = Depends(get_db),
    blobs: LocalBlobStore = Depends(get_blob_store),
):
    """Delete records left behind by interrupted cascade deletes."""
    report = await cascade.repair_orphans(db, blobs)
    if any(report.to_dict().values()):
        await pubsub.commit_and_publish(db, pubsub.SKETCHES, "sketches_changed")
        await pubsub.commit_and_publish(db, pubsub.PROPS, "props_changed")
    return report.to_dict()
