"""Tests for per-member mission progress: start, complete and the my-missions listing."""

from app.db import SessionLocal
from app.models import UserMissionProgress

from conftest import ADMIN, member


def _start(client, mission_id, headers=None):
    return client.post(f"/api/missions/{mission_id}/start", headers=headers or member())


def _complete(client, mission_id, headers=None):
    return client.post(f"/api/missions/{mission_id}/complete", headers=headers or member())


class TestStart:

    def test_start_creates_in_progress_row(self, client, make_mission, make_sub_mission):
        mission = make_mission("Birth plan")
        make_sub_mission(mission)

        res = _start(client, mission.id)
        assert res.status_code == 201, res.text
        body = res.json()
        assert body["status"] == "in_progress"
        assert body["missionId"] == mission.id
        assert body["missionTitle"] == "Birth plan"
        assert body["completedAt"] is None
        assert body["totalSubMissions"] == 1
        assert body["progressPercent"] == 0

    def test_second_start_is_400(self, client, make_mission):
        mission = make_mission()
        assert _start(client, mission.id).status_code == 201

        res = _start(client, mission.id)
        assert res.status_code == 400
        assert res.json()["field"] == "missionId"
        with SessionLocal() as s:
            assert s.query(UserMissionProgress).count() == 1

    def test_other_members_start_independently(self, client, make_mission):
        mission = make_mission()
        assert _start(client, mission.id, member(user_id=100)).status_code == 201
        assert _start(client, mission.id, member(user_id=101)).status_code == 201

    def test_hidden_and_unknown_missions(self, client, hospitals, make_mission):
        hidden = make_mission(visibility="hospital", hospital_id=hospitals[0].id)
        assert _start(client, hidden.id, member(hospital_id=hospitals[1].id)).status_code == 403
        assert _start(client, 999).status_code == 404


class TestComplete:

    def test_needs_every_active_sub_mission_approved(
        self, client, make_mission, make_sub_mission, make_submission
    ):
        mission = make_mission()
        a = make_sub_mission(mission, "a")
        b = make_sub_mission(mission, "b")
        make_sub_mission(mission, "retired", is_active=False)
        _start(client, mission.id)

        make_submission(a, user_id=100, status="approved")
        make_submission(b, user_id=100)
        res = _complete(client, mission.id)
        assert res.status_code == 400
        assert res.json()["field"] == "subMissions"

        with SessionLocal() as s:
            row = s.query(UserMissionProgress).one()
            assert row.status == "in_progress"

    def test_completes_when_all_approved(self, client, make_mission, make_sub_mission, make_submission):
        mission = make_mission()
        for title in ("a", "b"):
            make_submission(make_sub_mission(mission, title), user_id=100, status="approved")
        _start(client, mission.id)

        res = _complete(client, mission.id)
        assert res.status_code == 200, res.text
        assert res.json()["status"] == "completed"
        assert res.json()["completedAt"] is not None
        assert res.json()["progressPercent"] == 100

        # completing again keeps the first completion
        again = _complete(client, mission.id)
        assert again.status_code == 200
        assert again.json()["completedAt"] == res.json()["completedAt"]

    def test_not_started_is_404(self, client, make_mission):
        mission = make_mission()
        assert _complete(client, mission.id).status_code == 404


class TestMyMissions:

    def test_lists_own_rows_with_percentages(
        self, client, make_mission, make_sub_mission, make_submission
    ):
        first = make_mission("First")
        done = make_sub_mission(first, "a")
        make_sub_mission(first, "b")
        make_submission(done, user_id=100, status="approved")
        second = make_mission("Second")

        _start(client, first.id)
        _start(client, second.id)
        _start(client, first.id, member(user_id=101))

        rows = client.get("/api/my-missions", headers=member(user_id=100)).json()
        assert [r["missionId"] for r in rows] == [second.id, first.id]
        by_mission = {r["missionId"]: r for r in rows}
        assert by_mission[first.id]["completedSubMissions"] == 1
        assert by_mission[first.id]["totalSubMissions"] == 2
        assert by_mission[first.id]["progressPercent"] == 50
        assert by_mission[second.id]["progressPercent"] == 0

    def test_empty(self, client):
        assert client.get("/api/my-missions", headers=member()).json() == []

    def test_requires_identity(self, client):
        assert client.get("/api/my-missions").status_code == 401

    def test_deleting_the_mission_drops_progress(self, client, make_mission):
        mission = make_mission()
        _start(client, mission.id)
        assert client.delete(f"/api/admin/missions/{mission.id}", headers=ADMIN).status_code == 204
        assert client.get("/api/my-missions", headers=member()).json() == []
