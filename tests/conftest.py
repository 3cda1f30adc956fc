"""Pytest configuration and fixtures.

Points the app at a throwaway SQLite database and media directory before any
``troupe`` module is imported, and puts ``backend/`` on ``sys.path`` so the
tests run without installing the package.
"""
import asyncio
import os
import shutil
import sys
import tempfile

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
BACKEND = os.path.join(ROOT, "backend")
if BACKEND not in sys.path:
    sys.path.insert(0, BACKEND)

_TMP = tempfile.mkdtemp(prefix="troupe-tests-")
MEDIA_DIR = os.path.join(_TMP, "media")
os.makedirs(MEDIA_DIR, exist_ok=True)

# Forced, not setdefault: the suite drops every table it can see
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP, 'troupe_test.db')}"
os.environ["MEDIA_VOLUME"] = MEDIA_DIR
os.environ["REALTIME_ENABLED"] = "false"
os.environ["DB_AUTO_CREATE"] = "false"
os.environ["DEBUG"] = "false"
os.environ["PUBLIC_BASE_URL"] = "http://testserver"


async def _reset_database():
    from troupe.database import drop_db, init_db

    await drop_db()
    await init_db()


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def reset_db():
    asyncio.run(_reset_database())
    shutil.rmtree(os.path.join(MEDIA_DIR, "blobs"), ignore_errors=True)


@pytest.fixture
def client(reset_db):
    from fastapi.testclient import TestClient

    from troupe.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_factory(reset_db):
    from troupe.database import async_session_factory

    return async_session_factory


@pytest.fixture
def upload(client):
    """Upload bytes through the blob store API and return the storage id."""

    def _upload(data: bytes = b"file-bytes", content_type: str = "application/pdf") -> str:
        url = client.post("/api/storage/upload-url").json()["upload_url"]
        response = client.post(url, content=data, headers={"content-type": content_type})
        assert response.status_code == 201, response.text
        return response.json()["storage_id"]

    return _upload


@pytest.fixture(scope="session", autouse=True)
def _cleanup_tmp():
    yield
    shutil.rmtree(_TMP, ignore_errors=True)
