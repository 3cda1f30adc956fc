"""Redis Pub/Sub bridge for change notifications.

API handlers and Celery workers publish a small message once a mutation is
committed, on a scope channel (``sketches``, ``team-members``, ``props`` or
``sketch:<id>``). The WebSocket handler subscribes and relays the messages so
connected clients know to re-fetch.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis
import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from troupe.config import get_settings

logger = logging.getLogger(__name__)

CHANNEL_PREFIX = "troupe:ws:"

SKETCHES = "sketches"
TEAM_MEMBERS = "team-members"
PROPS = "props"


def sketch_scope(sketch_id: str) -> str:
    return f"sketch:{sketch_id}"


def is_known_scope(scope: str) -> bool:
    """True for the collection scopes and for ``sketch:<id>``."""
    if scope in (SKETCHES, TEAM_MEMBERS, PROPS):
        return True
    prefix, _, sketch_id = scope.partition(":")
    return prefix == "sketch" and bool(sketch_id)


# ──────── Sync connection pool (used by Celery workers) ────────

_sync_pool: redis.ConnectionPool | None = None


def _get_sync_pool() -> redis.ConnectionPool:
    """Lazy-init a module-level sync Redis ConnectionPool."""
    global _sync_pool
    if _sync_pool is None:
        settings = get_settings()
        _sync_pool = redis.ConnectionPool.from_url(settings.REDIS_URL)
    return _sync_pool


def publish_change_sync(scope: str, message: dict[str, Any]) -> None:
    """Publish a change notification from a sync context (Celery)."""
    if not get_settings().REALTIME_ENABLED:
        return
    try:
        r = redis.Redis(connection_pool=_get_sync_pool())
        r.publish(f"{CHANNEL_PREFIX}{scope}", json.dumps(message))
    except Exception:
        logger.warning("Failed to publish change notification for %s", scope, exc_info=True)


# ──────── Async client (used by FastAPI) ────────

_async_client: aioredis.Redis | None = None


def _get_async_client() -> aioredis.Redis:
    """Lazy-init a module-level async Redis client (singleton)."""
    global _async_client
    if _async_client is None:
        settings = get_settings()
        _async_client = aioredis.from_url(settings.REDIS_URL)
    return _async_client


async def publish_change(scope: str, change_type: str, **fields: Any) -> None:
    """Publish ``{"type": change_type, **fields}`` on the scope channel.

    Best-effort: a Redis failure is logged and never fails the request.
    """
    if not get_settings().REALTIME_ENABLED:
        return
    message = {"type": change_type, **fields}
    try:
        await _get_async_client().publish(f"{CHANNEL_PREFIX}{scope}", json.dumps(message))
    except Exception:
        logger.warning("Failed to publish %s on %s", change_type, scope, exc_info=True)


async def commit_and_publish(
    db: AsyncSession, scope: str, change_type: str, **fields: Any
) -> None:
    """Commit the request's session, then publish.

    Clients re-fetch as soon as they hear a change, so the write must be
    visible by then. A failed commit raises and nothing is published.
    """
    await db.commit()
    await publish_change(scope, change_type, **fields)


async def subscribe(scope: str) -> aioredis.client.PubSub:
    """Create an async PubSub subscription for a scope channel.

    Caller should close the pubsub when done, but NOT the shared client.
    """
    pubsub = _get_async_client().pubsub()
    await pubsub.subscribe(f"{CHANNEL_PREFIX}{scope}")
    return pubsub


async def listen_pubsub(pubsub: aioredis.client.PubSub):
    """Async generator that yields parsed messages from a PubSub subscription."""
    async for raw_message in pubsub.listen():
        if raw_message["type"] == "message":
            try:
                yield json.loads(raw_message["data"])
            except (json.JSONDecodeError, TypeError):
                continue
