"""Blob store endpoints, script versions and media attachments."""

import hashlib

import pytest

from troupe.config import Settings
from troupe.main import app
from troupe.services.blob_store import LocalBlobStore, get_blob_store


class TestUploads:
    def test_upload_url_is_single_use(self, client):
        url = client.post("/api/storage/upload-url").json()["upload_url"]
        assert url.startswith("http://testserver/api/storage/upload/")

        first = client.post(url, content=b"hello", headers={"content-type": "text/plain"})
        second = client.post(url, content=b"again", headers={"content-type": "text/plain"})

        assert first.status_code == 201
        body = first.json()
        assert body["size_bytes"] == 5
        assert body["content_type"] == "text/plain"
        assert body["checksum"] == hashlib.sha256(b"hello").hexdigest()
        assert second.status_code == 410

    def test_unknown_token(self, client):
        response = client.post("/api/storage/upload/not-a-token", content=b"x")
        assert response.status_code == 404

    def test_too_large(self, client):
        app.dependency_overrides[get_blob_store] = lambda: LocalBlobStore(Settings(MAX_UPLOAD_MB=0))
        try:
            url = client.post("/api/storage/upload-url").json()["upload_url"]
            response = client.post(url, content=b"x")
        finally:
            app.dependency_overrides.pop(get_blob_store, None)
        assert response.status_code == 413

    def test_expired_slot(self, client):
        app.dependency_overrides[get_blob_store] = lambda: LocalBlobStore(
            Settings(UPLOAD_URL_TTL_SECONDS=-1)
        )
        try:
            url = client.post("/api/storage/upload-url").json()["upload_url"]
        finally:
            app.dependency_overrides.pop(get_blob_store, None)
        assert client.post(url, content=b"late").status_code == 410


class TestFileUrls:
    def test_url_serves_the_stored_bytes(self, client, upload):
        file_id = upload(b"%PDF-1.4", "application/pdf")

        url = client.get(f"/api/storage/{file_id}/url").json()["url"]

        assert url == f"http://testserver/media/blobs/{file_id[:2]}/{file_id}"
        assert client.get(url).content == b"%PDF-1.4"

    def test_unknown_file_has_null_url(self, client):
        assert client.get("/api/storage/unknown/url").json() == {"url": None}

    def test_delete(self, client, upload):
        file_id = upload()
        assert client.delete(f"/api/storage/{file_id}").status_code == 204
        assert client.get(f"/api/storage/{file_id}/url").json() == {"url": None}
        assert client.delete(f"/api/storage/{file_id}").status_code == 404


@pytest.fixture
def sketch(client):
    return client.post("/api/sketches/", json={"title": "Versioned"}).json()


class TestScripts:
    def test_versions_increment(self, client, sketch, upload):
        base = f"/api/sketches/{sketch['id']}/scripts/"
        assert client.get(f"{base}latest").json() is None

        v1 = client.post(base, json={"file_id": upload(b"one"), "file_name": "draft.pdf"}).json()
        v2 = client.post(base, json={"file_id": upload(b"two"), "file_name": "final.pdf"}).json()

        assert (v1["version"], v2["version"]) == (1, 2)
        latest = client.get(f"{base}latest").json()
        assert latest["id"] == v2["id"]
        assert latest["file_url"].startswith("http://testserver/media/")
        assert [s["version"] for s in client.get(base).json()] == [2, 1]

    def test_versions_are_per_sketch(self, client, sketch, upload):
        other = client.post("/api/sketches/", json={"title": "Other"}).json()
        client.post(
            f"/api/sketches/{sketch['id']}/scripts/",
            json={"file_id": upload(), "file_name": "a.pdf"},
        )
        first_of_other = client.post(
            f"/api/sketches/{other['id']}/scripts/",
            json={"file_id": upload(), "file_name": "b.pdf"},
        ).json()
        assert first_of_other["version"] == 1

    def test_missing_sketch(self, client, upload):
        response = client.post(
            "/api/sketches/ghost/scripts/", json={"file_id": upload(), "file_name": "a.pdf"}
        )
        assert response.status_code == 404

    def test_delete_version_removes_file(self, client, sketch, upload):
        file_id = upload()
        script = client.post(
            f"/api/sketches/{sketch['id']}/scripts/", json={"file_id": file_id, "file_name": "a.pdf"}
        ).json()

        response = client.delete(f"/api/sketches/{sketch['id']}/scripts/{script['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/sketches/{sketch['id']}/scripts/latest").json() is None
        assert client.get(f"/api/storage/{file_id}/url").json() == {"url": None}


class TestMedia:
    def _attach(self, client, sketch, file_id, name="photo.jpg"):
        return client.post(
            f"/api/sketches/{sketch['id']}/media/",
            json={"file_id": file_id, "file_name": name, "file_type": "image/jpeg", "width": 640, "height": 480},
        )

    def test_attach_and_list(self, client, sketch, upload):
        response = self._attach(client, sketch, upload(b"jpg"))
        assert response.status_code == 201
        body = response.json()
        assert (body["width"], body["height"]) == (640, 480)
        assert body["url"].startswith("http://testserver/media/")

        listed = client.get(f"/api/sketches/{sketch['id']}/media/").json()
        assert [m["id"] for m in listed] == [body["id"]]

    def test_attach_to_missing_sketch(self, client, upload):
        response = client.post(
            "/api/sketches/ghost/media/",
            json={"file_id": upload(), "file_name": "x.jpg", "file_type": "image/jpeg"},
        )
        assert response.status_code == 404

    def test_remove_one(self, client, sketch, upload):
        keep = self._attach(client, sketch, upload(b"a"), "a.jpg").json()
        drop = self._attach(client, sketch, upload(b"b"), "b.jpg").json()

        assert client.delete(f"/api/sketches/{sketch['id']}/media/{drop['id']}").status_code == 204

        listed = client.get(f"/api/sketches/{sketch['id']}/media/").json()
        assert [m["id"] for m in listed] == [keep["id"]]
        assert client.get(f"/api/storage/{drop['file_id']}/url").json() == {"url": None}

    def test_clear_all(self, client, sketch, upload):
        for name in ("a.jpg", "b.jpg", "c.jpg"):
            self._attach(client, sketch, upload(name.encode()), name)

        assert client.delete(f"/api/sketches/{sketch['id']}/media/").status_code == 204
        assert client.get(f"/api/sketches/{sketch['id']}/media/").json() == []

    def test_prop_media(self, client, upload):
        prop = client.post("/api/props/", json={"name": "Lamp"}).json()
        response = client.post(
            f"/api/props/{prop['id']}/media/",
            json={"file_id": upload(), "file_name": "lamp.jpg", "file_type": "image/jpeg"},
        )
        assert response.status_code == 201
        assert len(client.get(f"/api/props/{prop['id']}/media/").json()) == 1

    def test_clear_on_missing_sketch(self, client):
        assert client.delete("/api/sketches/ghost/media/").status_code == 404


class TestDeleteTransaction:
    """File removal follows the fate of the row deletion."""

    def _path(self, file_id):
        import os

        from troupe.config import get_settings

        return os.path.join(get_settings().MEDIA_VOLUME, "blobs", file_id[:2], file_id)

    def test_rolled_back_delete_keeps_file(self, client, upload, run, session_factory):
        import os

        file_id = upload(b"keep me")

        async def delete_then_roll_back():
            async with session_factory() as db:
                assert await LocalBlobStore().delete(db, file_id) is True
                await db.rollback()

        run(delete_then_roll_back())

        assert os.path.isfile(self._path(file_id))
        assert client.get(f"/api/storage/{file_id}/url").json()["url"] is not None

    def test_file_is_removed_on_commit(self, client, upload, run, session_factory):
        import os

        file_id = upload(b"drop me")

        async def delete_and_check():
            async with session_factory() as db:
                await LocalBlobStore().delete(db, file_id)
                still_there = os.path.isfile(self._path(file_id))
                await db.commit()
                return still_there

        assert run(delete_and_check()) is True
        assert not os.path.isfile(self._path(file_id))
