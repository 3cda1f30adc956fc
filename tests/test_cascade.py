"""Cascade deletes and orphan repair."""

import os

from sqlalchemy import func, select

from troupe.config import get_settings


def _blob_files():
    root = os.path.join(get_settings().MEDIA_VOLUME, "blobs")
    return sorted(name for _, _, names in os.walk(root) for name in names)


def _populate(client, upload):
    """A sketch with one of every kind of child, plus an unrelated sketch."""
    sketch = client.post("/api/sketches/", json={"title": "Doomed"}).json()
    keeper = client.post("/api/sketches/", json={"title": "Keeper"}).json()
    sid = sketch["id"]

    client.post(f"/api/sketches/{sid}/characters/", json={"name": "A"})
    client.post(f"/api/sketches/{keeper['id']}/characters/", json={"name": "B"})

    prop = client.post("/api/props/", json={"name": "Lamp"}).json()
    client.put(f"/api/sketches/{sid}/props/{prop['id']}")

    script_file = upload(b"script", "application/pdf")
    client.post(f"/api/sketches/{sid}/scripts/", json={"file_id": script_file, "file_name": "a.pdf"})

    photo = upload(b"photo", "image/jpeg")
    client.post(
        f"/api/sketches/{sid}/media/",
        json={"file_id": photo, "file_name": "a.jpg", "file_type": "image/jpeg"},
    )

    image = upload(b"cover", "image/png")
    client.patch(f"/api/sketches/{sid}", json={"image_id": image})

    return sketch, keeper, prop


class TestDeleteSketch:
    def test_removes_children_and_files(self, client, upload):
        sketch, keeper, prop = _populate(client, upload)
        sid = sketch["id"]
        assert len(_blob_files()) == 3

        assert client.delete(f"/api/sketches/{sid}").status_code == 204

        assert client.get(f"/api/sketches/{sid}").json() is None
        assert client.get(f"/api/sketches/{sid}/characters/").json() == []
        assert client.get(f"/api/sketches/{sid}/props/").json() == []
        assert client.get(f"/api/sketches/{sid}/scripts/").json() == []
        assert client.get(f"/api/sketches/{sid}/media/").json() == []
        assert _blob_files() == []

        # shared catalogue and other sketches are untouched
        assert client.get(f"/api/props/{prop['id']}").json()["name"] == "Lamp"
        assert [c["name"] for c in client.get(f"/api/sketches/{keeper['id']}/characters/").json()] == ["B"]
        assert [s["id"] for s in client.get("/api/sketches/").json()] == [keeper["id"]]

    def test_repeat_delete_is_harmless(self, client, upload):
        sketch, _, _ = _populate(client, upload)
        assert client.delete(f"/api/sketches/{sketch['id']}").status_code == 204
        assert client.delete(f"/api/sketches/{sketch['id']}").status_code == 204

    def test_rerun_cleans_up_children_left_behind(self, client, run, session_factory):
        from troupe.models import Character, Script, StoredFile
        from troupe.services import cascade
        from troupe.services.blob_store import LocalBlobStore

        async def leave_orphans():
            async with session_factory() as db:
                db.add(Character(sketch_id="gone", name="Left behind"))
                db.add(StoredFile(id="f" * 32, path="blobs/ff/" + "f" * 32, size_bytes=0))
                db.add(Script(sketch_id="gone", file_id="f" * 32, file_name="old.pdf", version=1))
                await db.commit()

        async def rerun():
            async with session_factory() as db:
                report = await cascade.delete_sketch(db, LocalBlobStore(), "gone")
                await db.commit()
                left = await db.scalar(select(func.count()).select_from(Character))
                files = await db.scalar(select(func.count()).select_from(StoredFile))
                return report, left, files

        run(leave_orphans())
        report, left, files = run(rerun())

        assert report.characters == 1
        assert report.scripts == 1
        assert report.blobs == 1
        assert report.parents == 0
        assert left == 0
        assert files == 0


class TestDeleteProp:
    def test_removes_media_and_links(self, client, upload):
        sketch = client.post("/api/sketches/", json={"title": "S"}).json()
        prop = client.post("/api/props/", json={"name": "Lamp"}).json()
        client.put(f"/api/sketches/{sketch['id']}/props/{prop['id']}")
        photo = upload(b"lamp", "image/jpeg")
        client.post(
            f"/api/props/{prop['id']}/media/",
            json={"file_id": photo, "file_name": "lamp.jpg", "file_type": "image/jpeg"},
        )

        assert client.delete(f"/api/props/{prop['id']}").status_code == 204

        assert client.get(f"/api/props/{prop['id']}/media/").json() == []
        assert client.get(f"/api/storage/{photo}/url").json() == {"url": None}

    def test_delete_missing_is_404(self, client):
        assert client.delete("/api/props/ghost").status_code == 404


class TestRepairOrphans:
    def test_repair_endpoint_on_clean_database(self, client):
        client.post("/api/sketches/", json={"title": "S"})
        report = client.post("/api/system/repair").json()
        assert set(report.values()) == {0}

    def test_removes_orphans_and_dangling_assignments(self, client, run, session_factory):
        from troupe.models import Character, Prop, PropMedia, SketchProp

        sketch = client.post("/api/sketches/", json={"title": "Alive"}).json()
        client.post(f"/api/sketches/{sketch['id']}/characters/", json={"name": "Kept"})

        async def seed():
            async with session_factory() as db:
                db.add(Character(sketch_id="dead-sketch", name="Orphan"))
                db.add(Character(sketch_id=sketch["id"], name="Miscast", assigned_to="dead-member"))
                db.add(SketchProp(sketch_id=sketch["id"], prop_id="dead-prop"))
                db.add(
                    PropMedia(
                        prop_id="dead-prop", file_id="missing", file_name="x.jpg", file_type="image/jpeg"
                    )
                )
                db.add(Prop(name="Orphaned duty", responsible_person_id="dead-member"))
                await db.commit()

        run(seed())
        report = client.post("/api/system/repair").json()

        assert report["characters"] == 1
        assert report["sketch_props"] == 1
        assert report["prop_media"] == 1
        assert report["cleared_assignments"] == 2

        names = sorted(c["name"] for c in client.get(f"/api/sketches/{sketch['id']}/characters/").json())
        assert names == ["Kept", "Miscast"]
        miscast = [
            c for c in client.get(f"/api/sketches/{sketch['id']}/characters/").json()
            if c["name"] == "Miscast"
        ][0]
        assert miscast["assigned_to"] is None

        # second pass finds nothing
        assert set(client.post("/api/system/repair").json().values()) == {0}

    def test_celery_task_body(self, client, run, session_factory):
        from troupe.models import Character
        from troupe.tasks.repair_task import _repair

        async def seed():
            async with session_factory() as db:
                db.add(Character(sketch_id="dead-sketch", name="Orphan"))
                await db.commit()

        run(seed())
        counts = run(_repair())

        assert counts["characters"] == 1
        assert set(client.post("/api/system/repair").json().values()) == {0}


class TestRunAsync:
    def test_reuses_the_thread_loop(self):
        import asyncio

        from troupe.tasks import run_async

        async def current_loop():
            return asyncio.get_running_loop()

        assert run_async(current_loop()) is run_async(current_loop())
