"""Local blob store — single-use upload URLs, stable retrieval URLs, deletion.

Files live under ``MEDIA_VOLUME/blobs`` and are served by the ``/media``
static mount. Each file is addressed by the opaque id of its StoredFile row.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from troupe.config import Settings, get_settings
from troupe.errors import (
    UploadSlotExpiredError,
    UploadSlotNotFoundError,
    UploadTooLargeError,
)
from troupe.models.stored_file import StoredFile, UploadSlot

logger = logging.getLogger(__name__)

BLOB_DIR = "blobs"
PENDING_UNLINKS = "troupe.pending_unlinks"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class LocalBlobStore:
    """Blob storage on the local media volume."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.base_path = Path(self.settings.MEDIA_VOLUME).resolve()

    def _relative_path(self, file_id: str) -> str:
        return f"{BLOB_DIR}/{file_id[:2]}/{file_id}"

    def _absolute_path(self, relative: str) -> Path:
        full_path = (self.base_path / relative).resolve()
        # Stored paths must stay inside the media volume
        full_path.relative_to(self.base_path)
        return full_path

    async def generate_upload_url(self, db: AsyncSession) -> str:
        """Create a write-once upload slot and return its URL."""
        token = secrets.token_urlsafe(32)
        slot = UploadSlot(
            token=token,
            expires_at=_utcnow() + timedelta(seconds=self.settings.UPLOAD_URL_TTL_SECONDS),
        )
        db.add(slot)
        await db.flush()
        return f"{self.settings.PUBLIC_BASE_URL.rstrip('/')}/api/storage/upload/{token}"

    async def store(
        self,
        db: AsyncSession,
        token: str,
        data: bytes,
        content_type: str | None = None,
    ) -> StoredFile:
        """Write ``data`` through the upload slot identified by ``token``.

        Raises:
            UploadSlotNotFoundError: unknown token.
            UploadSlotExpiredError: token already used or past its expiry.
            UploadTooLargeError: body exceeds MAX_UPLOAD_MB.
        """
        slot = await db.get(UploadSlot, token)
        if slot is None:
            raise UploadSlotNotFoundError("Upload URL not found")
        if slot.consumed_at is not None or slot.expires_at < _utcnow():
            raise UploadSlotExpiredError("Upload URL already used or expired")

        max_bytes = self.settings.MAX_UPLOAD_MB * 1024 * 1024
        if len(data) > max_bytes:
            raise UploadTooLargeError(
                f"Upload of {len(data)} bytes exceeds the {self.settings.MAX_UPLOAD_MB} MB limit"
            )

        stored = StoredFile(
            content_type=content_type,
            size_bytes=len(data),
            checksum=hashlib.sha256(data).hexdigest(),
            path="",
        )
        db.add(stored)
        await db.flush()
        stored.path = self._relative_path(stored.id)

        await asyncio.to_thread(self._write_file, stored.path, data)

        slot.consumed_at = _utcnow()
        slot.file_id = stored.id
        await db.flush()
        logger.info("Stored blob %s (%d bytes, %s)", stored.id, len(data), content_type)
        return stored

    def _write_file(self, relative: str, data: bytes) -> None:
        full_path = self._absolute_path(relative)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(data)

    async def get_url(self, db: AsyncSession, file_id: str | None) -> str | None:
        """Stable URL for a stored file, or None if it is unknown or missing on disk."""
        if not file_id:
            return None
        stored = await db.get(StoredFile, file_id)
        if stored is None:
            return None
        if not self._absolute_path(stored.path).is_file():
            return None
        return f"{self.settings.PUBLIC_BASE_URL.rstrip('/')}/media/{stored.path}"

    async def delete(self, db: AsyncSession, file_id: str | None) -> bool:
        """Remove a stored file's row now and its file after the commit.

        Returns:
            True if a row was deleted, False if the id was unknown.
        """
        if not file_id:
            return False
        stored = await db.get(StoredFile, file_id)
        if stored is None:
            return False
        await db.delete(stored)
        await db.flush()
        # the file goes once the row deletion is committed
        db.info.setdefault(PENDING_UNLINKS, []).append(self._absolute_path(stored.path))
        logger.info("Deleted blob %s", file_id)
        return True


@event.listens_for(Session, "after_commit")
def _unlink_committed(session: Session) -> None:
    for path in session.info.pop(PENDING_UNLINKS, []):
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Blob file %s was already gone", path)


@event.listens_for(Session, "after_soft_rollback")
def _keep_rolled_back(session: Session, previous_transaction) -> None:
    if previous_transaction.parent is None:
        session.info.pop(PENDING_UNLINKS, None)


def get_blob_store() -> LocalBlobStore:
    """FastAPI dependency returning a blob store bound to current settings."""
    return LocalBlobStore()
