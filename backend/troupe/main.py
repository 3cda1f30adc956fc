from __future__ import annotations
"""Troupe — FastAPI application entry point.

Mounts all API routes, configures CORS, serves stored files from the media
volume, and optionally creates tables on startup.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from troupe.api.router import api_router
from troupe.api.ws import router as ws_router
from troupe.config import get_settings
from troupe.database import close_db, init_db

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: prepare storage and tables on startup, close DB on shutdown."""
    logger.info("Troupe starting up...")
    logger.info("Realtime notifications: %s", settings.REALTIME_ENABLED)

    os.makedirs(settings.MEDIA_VOLUME, exist_ok=True)

    if settings.DB_AUTO_CREATE:
        await init_db()
    else:
        logger.info("Skipping init_db (schema managed by Alembic)")

    yield

    await close_db()
    logger.info("Troupe shut down")


app = FastAPI(
    title="Troupe API",
    description="Sketches, cast, props and scripts for a theatre group",
    version="0.1.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount API routes
app.include_router(api_router)
app.include_router(ws_router)

# Mount stored files
os.makedirs(settings.MEDIA_VOLUME, exist_ok=True)
app.mount("/media", StaticFiles(directory=settings.MEDIA_VOLUME), name="media")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"service": settings.APP_NAME, "status": "running"}


@app.get("/health")
async def health():
    return {"status": "healthy", "realtime": settings.REALTIME_ENABLED}
