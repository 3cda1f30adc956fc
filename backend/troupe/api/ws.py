"""WebSocket endpoint for change notifications.

Clients connect to ``/ws/<scope>`` (``sketches``, ``team-members``, ``props`` or
``sketch:<id>``) and receive ``{"type": ...}`` messages whenever something in
that scope changes. Messages arrive over Redis Pub/Sub, so writes made by any
API process or Celery worker reach every connected client.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from troupe.config import get_settings
from troupe.services import pubsub as changes

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws/{scope}")
async def ws_scope(ws: WebSocket, scope: str):
    """Relay change notifications for one scope until the client goes away.

    Unknown scopes are refused. When realtime notifications are disabled the
    socket is accepted and told so, then closed.
    """
    if not changes.is_known_scope(scope):
        await ws.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await ws.accept()
    if not get_settings().REALTIME_ENABLED:
        await ws.send_json({"type": "realtime_disabled"})
        await ws.close()
        return

    logger.info("WS connected: scope=%s", scope)
    subscription = None
    relay = None
    try:
        subscription = await changes.subscribe(scope)
        relay = asyncio.create_task(_relay(subscription, ws, scope))
        await ws.send_json({"type": "subscribed", "scope": scope})

        while True:
            if await ws.receive_text() == "ping":
                await ws.send_json({"type": "pong"})
    except WebSocketDisconnect:
        logger.info("WS disconnected: scope=%s", scope)
    except Exception as exc:
        logger.warning("WS error for scope=%s: %s", scope, exc)
    finally:
        if relay:
            relay.cancel()
        if subscription:
            await subscription.unsubscribe()
            await subscription.aclose()


async def _relay(subscription, ws: WebSocket, scope: str):
    try:
        async for message in changes.listen_pubsub(subscription):
            try:
                await ws.send_json(message)
            except Exception:
                break  # client gone
    except asyncio.CancelledError:
        pass
    except Exception as exc:
        logger.warning("Pub/Sub relay error for scope=%s: %s", scope, exc)
