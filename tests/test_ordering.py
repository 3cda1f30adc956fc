"""Tests for append / reorder / delete on the ordered collections."""

import pytest


def _create_sketch(client, title):
    response = client.post("/api/sketches/", json={"title": title})
    assert response.status_code == 201, response.text
    return response.json()


def _titles(client):
    return [s["title"] for s in client.get("/api/sketches/").json()]


class TestAppend:
    def test_first_item_gets_order_zero(self, client):
        assert _create_sketch(client, "Opening")["order"] == 0

    def test_append_goes_after_current_maximum(self, client):
        orders = [_create_sketch(client, t)["order"] for t in ("A", "B", "C")]
        assert orders == [0, 1, 2]

    def test_append_leaves_existing_orders_unchanged(self, client):
        a = _create_sketch(client, "A")
        b = _create_sketch(client, "B")
        _create_sketch(client, "C")

        listed = {s["id"]: s["order"] for s in client.get("/api/sketches/").json()}
        assert listed[a["id"]] == 0
        assert listed[b["id"]] == 1

    def test_append_after_delete_uses_max_not_count(self, client):
        a = _create_sketch(client, "A")
        b = _create_sketch(client, "B")
        client.delete(f"/api/sketches/{a['id']}")
        # one sketch left, at order 1
        assert _create_sketch(client, "C")["order"] == 2
        assert client.get(f"/api/sketches/{b['id']}").json()["order"] == 1

    def test_orders_are_not_reclaimed_after_delete(self, client):
        alice = client.post("/api/team-members/", json={"name": "Alice"}).json()
        assert alice["order"] == 0

        assert client.delete(f"/api/team-members/{alice['id']}").status_code == 204

        bob = client.post("/api/team-members/", json={"name": "Bob"}).json()
        assert bob["order"] == 1

    def test_freed_tail_slot_is_not_reused(self, client):
        ids = [_create_sketch(client, t)["id"] for t in ("A", "B", "C")]
        client.delete(f"/api/sketches/{ids[2]}")
        client.post("/api/sketches/reorder", json={"sketch_ids": [ids[1], ids[0]]})

        # orders are now 0 and 1, but 2 was handed out before
        assert _create_sketch(client, "D")["order"] == 3

    def test_collections_count_independently(self, client):
        _create_sketch(client, "A")
        _create_sketch(client, "B")
        member = client.post("/api/team-members/", json={"name": "Alice"}).json()
        assert member["order"] == 0


class TestReorder:
    def test_reorder_scenario(self, client):
        a = _create_sketch(client, "A")
        b = _create_sketch(client, "B")
        c = _create_sketch(client, "C")

        response = client.post(
            "/api/sketches/reorder", json={"sketch_ids": [c["id"], a["id"], b["id"]]}
        )

        assert response.status_code == 200
        assert [s["title"] for s in response.json()] == ["C", "A", "B"]
        assert [s["order"] for s in response.json()] == [0, 1, 2]
        assert _titles(client) == ["C", "A", "B"]

    def test_reorder_closes_gaps_left_by_deletes(self, client):
        ids = [_create_sketch(client, t)["id"] for t in ("A", "B", "C", "D")]
        client.delete(f"/api/sketches/{ids[1]}")

        response = client.post(
            "/api/sketches/reorder", json={"sketch_ids": [ids[3], ids[2], ids[0]]}
        )

        assert [s["order"] for s in response.json()] == [0, 1, 2]
        assert _titles(client) == ["D", "C", "A"]

    @pytest.mark.parametrize("variant", ["missing", "duplicate", "unknown"])
    def test_malformed_permutation_is_rejected_without_writes(self, client, variant):
        a = _create_sketch(client, "A")
        b = _create_sketch(client, "B")
        c = _create_sketch(client, "C")
        ids = {
            "missing": [c["id"], a["id"]],
            "duplicate": [c["id"], a["id"], a["id"], b["id"]],
            "unknown": [c["id"], a["id"], b["id"], "not-a-sketch"],
        }[variant]

        response = client.post("/api/sketches/reorder", json={"sketch_ids": ids})

        assert response.status_code == 409
        detail = response.json()["detail"]
        if variant == "missing":
            assert detail["missing"] == [b["id"]]
        elif variant == "duplicate":
            assert detail["duplicates"] == [a["id"]]
        else:
            assert detail["unknown"] == ["not-a-sketch"]
        assert _titles(client) == ["A", "B", "C"]

    def test_reorder_of_empty_collection(self, client):
        response = client.post("/api/sketches/reorder", json={"sketch_ids": []})
        assert response.status_code == 200
        assert response.json() == []

    def test_team_members_reorder(self, client):
        names = ["Ann", "Ben", "Cat"]
        ids = [client.post("/api/team-members/", json={"name": n}).json()["id"] for n in names]

        response = client.post(
            "/api/team-members/reorder", json={"member_ids": [ids[2], ids[1], ids[0]]}
        )

        assert response.status_code == 200
        listed = client.get("/api/team-members/").json()
        assert [m["name"] for m in listed] == ["Cat", "Ben", "Ann"]
        assert [m["order"] for m in listed] == [0, 1, 2]

    def test_reorder_request_rejects_unknown_fields(self, client):
        response = client.post("/api/sketches/reorder", json={"sketch_ids": [], "force": True})
        assert response.status_code == 422


class TestOrderingService:
    """Direct tests of troupe.services.ordering against a session."""

    def test_next_order_on_empty_set(self, run, session_factory):
        from troupe.models import TeamMember
        from troupe.services import ordering

        async def scenario():
            async with session_factory() as db:
                return await ordering.next_order(db, TeamMember)

        assert run(scenario()) == 0

    def test_high_water_survives_deleting_every_row(self, run, session_factory):
        from troupe.models import OrderCounter, Sketch
        from troupe.services import ordering

        async def scenario():
            async with session_factory() as db:
                first = await ordering.append(db, Sketch, title="Only")
                await ordering.delete(db, first)
                await db.commit()
            async with session_factory() as db:
                counter = await db.get(OrderCounter, "sketches")
                return counter.high_water, await ordering.next_order(db, Sketch)

        assert run(scenario()) == (0, 1)

    def test_check_permutation_reports_all_problems(self):
        from troupe.errors import ReorderMismatchError
        from troupe.services.ordering import check_permutation

        with pytest.raises(ReorderMismatchError) as excinfo:
            check_permutation(["a", "b", "c"], ["a", "a", "x"])

        assert excinfo.value.duplicates == ["a"]
        assert excinfo.value.unknown == ["x"]
        assert excinfo.value.missing == ["b", "c"]

    def test_check_permutation_accepts_any_order(self):
        from troupe.services.ordering import check_permutation

        check_permutation(["a", "b", "c"], ["c", "a", "b"])
