"""Tests for folder, mission, sub-mission and category ordering."""

from app.db import SessionLocal
from app.models import Mission

from conftest import ADMIN, SUPERADMIN


def _create_folder(client, name):
    res = client.post("/api/admin/mission-folders", json={"name": name}, headers=ADMIN)
    assert res.status_code == 201, res.text
    return res.json()


class TestFolderOrdering:

    def test_new_folders_append(self, client):
        orders = [_create_folder(client, n)["order"] for n in ("A", "B", "C")]
        assert orders == [0, 1, 2]

    def test_reorder_full_set(self, client):
        a, b, c = (_create_folder(client, n) for n in ("A", "B", "C"))
        res = client.put(
            "/api/admin/mission-folders/reorder",
            json={"folderIds": [c["id"], a["id"], b["id"]]},
            headers=ADMIN,
        )
        assert res.status_code == 200, res.text
        assert [(f["id"], f["order"]) for f in res.json()] == [(c["id"], 0), (a["id"], 1), (b["id"], 2)]

    def test_missing_folder_is_stale(self, client):
        a, b = (_create_folder(client, n) for n in ("A", "B"))
        res = client.put(
            "/api/admin/mission-folders/reorder", json={"folderIds": [b["id"]]}, headers=ADMIN
        )
        assert res.status_code == 409
        # nothing was written
        listed = client.get("/api/admin/mission-folders", headers=ADMIN).json()
        assert [f["id"] for f in listed] == [a["id"], b["id"]]

    def test_unknown_folder_is_stale(self, client):
        a, b = (_create_folder(client, n) for n in ("A", "B"))
        res = client.put(
            "/api/admin/mission-folders/reorder",
            json={"folderIds": [b["id"], a["id"], 999]},
            headers=ADMIN,
        )
        assert res.status_code == 409
        # the known folders keep their order
        listed = client.get("/api/admin/mission-folders", headers=ADMIN).json()
        assert [(f["id"], f["order"]) for f in listed] == [(a["id"], 0), (b["id"], 1)]

    def test_duplicates_rejected(self, client):
        a = _create_folder(client, "A")
        res = client.put(
            "/api/admin/mission-folders/reorder", json={"folderIds": [a["id"], a["id"]]}, headers=ADMIN
        )
        assert res.status_code == 400
        assert res.json()["field"] == "folderIds"

    def test_delete_folder_uncategorizes_missions(self, client, make_mission):
        folder = _create_folder(client, "Spring")
        m1 = make_mission("One", folder_id=folder["id"])
        m2 = make_mission("Two", folder_id=folder["id"])

        res = client.delete(f"/api/admin/mission-folders/{folder['id']}", headers=ADMIN)
        assert res.status_code == 204

        with SessionLocal() as s:
            assert s.get(Mission, m1.id).folder_id is None
            assert s.get(Mission, m2.id).folder_id is None
        assert client.get("/api/admin/mission-folders", headers=ADMIN).json() == []


class TestMissionReorder:

    def test_uncategorized_sentinel(self, client, make_mission):
        folder = _create_folder(client, "F")
        m1 = make_mission("One", folder_id=folder["id"], order=0)
        m2 = make_mission("Two", order=0)

        res = client.put(
            "/api/admin/missions/reorder",
            json={"missionOrders": [
                {"id": m1.id, "order": 3, "folderId": "0"},
                {"id": m2.id, "order": 1, "folderId": 0},
            ]},
            headers=ADMIN,
        )
        assert res.status_code == 200, res.text
        body = res.json()
        assert body["updated"] == 2
        by_id = {m["id"]: m for m in body["missions"]}
        assert by_id[m1.id] == {"id": m1.id, "order": 3, "folderId": None}
        assert by_id[m2.id]["order"] == 1

    def test_move_into_folder(self, client, make_mission):
        folder = _create_folder(client, "F")
        m = make_mission("One")
        res = client.put(
            "/api/admin/missions/reorder",
            json={"missionOrders": [{"id": m.id, "order": 0, "folderId": str(folder["id"])}]},
            headers=ADMIN,
        )
        assert res.status_code == 200
        assert res.json()["missions"][0]["folderId"] == folder["id"]

    def test_unchanged_items_are_skipped(self, client, make_mission):
        m1 = make_mission("One", order=0)
        m2 = make_mission("Two", order=1)
        res = client.put(
            "/api/admin/missions/reorder",
            json={"missionOrders": [
                {"id": m1.id, "order": 0, "folderId": None},
                {"id": m2.id, "order": 5, "folderId": None},
            ]},
            headers=ADMIN,
        )
        assert res.json()["updated"] == 1
        assert res.json()["skipped"] == 1

    def test_child_missions_rejected(self, client, make_mission):
        parent = make_mission("Parent")
        child = make_mission("Child", parent_id=parent.id)
        res = client.put(
            "/api/admin/missions/reorder",
            json={"missionOrders": [{"id": child.id, "order": 0, "folderId": None}]},
            headers=ADMIN,
        )
        assert res.status_code == 400

    def test_unknown_mission_or_folder_is_stale(self, client, make_mission):
        m = make_mission("One")
        res = client.put(
            "/api/admin/missions/reorder",
            json={"missionOrders": [{"id": 9999, "order": 0}]},
            headers=ADMIN,
        )
        assert res.status_code == 409

        res = client.put(
            "/api/admin/missions/reorder",
            json={"missionOrders": [{"id": m.id, "order": 0, "folderId": 4242}]},
            headers=ADMIN,
        )
        assert res.status_code == 409
        with SessionLocal() as s:
            assert s.get(Mission, m.id).folder_id is None

    def test_stale_item_leaves_valid_items_unwritten(self, client, make_mission):
        folder = _create_folder(client, "F")
        m = make_mission("One", order=0)
        other = make_mission("Two", order=1)

        for stale in ({"id": 9999, "order": 1}, {"id": other.id, "order": 2, "folderId": 4242}):
            res = client.put(
                "/api/admin/missions/reorder",
                json={"missionOrders": [
                    {"id": m.id, "order": 7, "folderId": str(folder["id"])},
                    stale,
                ]},
                headers=ADMIN,
            )
            assert res.status_code == 409
            with SessionLocal() as s:
                row = s.get(Mission, m.id)
                assert (row.order, row.folder_id) == (0, None)
                assert s.get(Mission, other.id).order == 1

    def test_duplicate_ids_rejected(self, client, make_mission):
        m = make_mission("One")
        res = client.put(
            "/api/admin/missions/reorder",
            json={"missionOrders": [{"id": m.id, "order": 0}, {"id": m.id, "order": 1}]},
            headers=SUPERADMIN,
        )
        assert res.status_code == 400


class TestSubMissionAndCategoryReorder:

    def test_sub_mission_reorder(self, client, make_mission, make_sub_mission):
        mission = make_mission("M")
        s1 = make_sub_mission(mission, "first", order=0)
        s2 = make_sub_mission(mission, "second", order=1)

        res = client.patch(
            f"/api/admin/missions/{mission.id}/sub-missions/reorder",
            json={"subMissionIds": [s2.id, s1.id]},
            headers=ADMIN,
        )
        assert res.status_code == 200, res.text
        assert [s["id"] for s in res.json()] == [s2.id, s1.id]

        res = client.patch(
            f"/api/admin/missions/{mission.id}/sub-missions/reorder",
            json={"subMissionIds": [s2.id]},
            headers=ADMIN,
        )
        assert res.status_code == 409

    def test_category_reorder(self, client):
        ids = [
            client.post("/api/admin/mission-categories", json={"name": n}, headers=ADMIN).json()["id"]
            for n in ("Pregnancy", "Birth", "Postpartum")
        ]
        res = client.patch(
            "/api/admin/mission-categories/reorder",
            json={"categoryIds": list(reversed(ids))},
            headers=ADMIN,
        )
        assert res.status_code == 200
        assert [c["id"] for c in res.json()] == list(reversed(ids))
        assert [c["order"] for c in res.json()] == [0, 1, 2]
