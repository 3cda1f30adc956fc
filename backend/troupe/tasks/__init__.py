"""Celery application configuration."""

import asyncio
import threading

from celery import Celery
from celery.schedules import crontab

from troupe.config import get_settings

settings = get_settings()

celery_app = Celery(
    "troupe",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=[
        "troupe.tasks.repair_task",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    enable_utc=True,
    task_time_limit=15 * 60,
    result_expires=7 * 24 * 3600,
)

# Celery Beat schedule: orphan repair once a day
celery_app.conf.beat_schedule = {
    "repair-orphans": {
        "task": "troupe.tasks.repair_task.repair_orphans",
        "schedule": crontab(hour=settings.REPAIR_SCHEDULE_HOUR, minute=0),
    },
}

_thread_local = threading.local()


def run_async(coro):
    """Run a coroutine from a sync task on this thread's event loop.

    Pooled asyncmy connections are bound to the loop that opened them, so the
    loop is kept per worker thread instead of being created per call.
    """
    loop = getattr(_thread_local, "loop", None)
    if loop is None or loop.is_closed():
        loop = asyncio.new_event_loop()
        _thread_local.loop = loop
    return loop.run_until_complete(coro)
