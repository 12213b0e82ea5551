"""Tests for review decisions, aggregated counts and hospital scoping."""

import pytest

from app.auth import CurrentUser
from app.db import SessionLocal
from app.services import review, submissions
from app.services.review import ReviewStatsCache, stats_cache

from conftest import ADMIN, SUPERADMIN, hospital_admin, member


def _approve(client, submission_id, headers=SUPERADMIN, **body):
    return client.post(
        f"/api/admin/review/submissions/{submission_id}/approve", json=body or None, headers=headers
    )


def _reject(client, submission_id, note, headers=SUPERADMIN):
    return client.post(
        f"/api/admin/review/submissions/{submission_id}/reject",
        json={"reviewerNote": note},
        headers=headers,
    )


def _stats(client, headers=SUPERADMIN, **params):
    res = client.get("/api/admin/review/stats", params=params, headers=headers)
    assert res.status_code == 200, res.text
    return res.json()


class TestDecisions:

    def test_approve_locks(self, client, make_mission, make_sub_mission, make_submission):
        sub = make_sub_mission(make_mission())
        row = make_submission(sub)

        res = _approve(client, row.id, reviewerNote="Lovely")
        assert res.status_code == 200, res.text
        body = res.json()
        assert body["status"] == "approved"
        assert body["isLocked"] is True
        assert body["reviewedBy"] == 1
        assert body["reviewerNote"] == "Lovely"

    def test_second_approve_conflicts(self, client, make_mission, make_sub_mission, make_submission):
        sub = make_sub_mission(make_mission())
        row = make_submission(sub)
        assert _approve(client, row.id).status_code == 200
        res = _approve(client, row.id)
        assert res.status_code == 409
        assert "approved" in res.json()["detail"]

    def test_approve_after_reject_conflicts(self, client, make_mission, make_sub_mission, make_submission):
        sub = make_sub_mission(make_mission())
        row = make_submission(sub)
        assert _reject(client, row.id, "Blurry photo").status_code == 200
        assert _approve(client, row.id).status_code == 409

    @pytest.mark.parametrize("note", ["", "   ", None])
    def test_reject_needs_note(self, client, make_mission, make_sub_mission, make_submission, note):
        sub = make_sub_mission(make_mission())
        row = make_submission(sub)
        res = _reject(client, row.id, note)
        assert res.status_code == 400
        assert res.json()["field"] == "reviewerNote"

        listed = client.get("/api/admin/review/submissions", headers=SUPERADMIN).json()
        assert listed[0]["status"] == "submitted"

    def test_reject_then_resubmit(self, client, make_mission, make_sub_mission, make_submission):
        mission = make_mission()
        sub = make_sub_mission(mission)
        row = make_submission(sub, user_id=100)

        res = _reject(client, row.id, "Please add a caption")
        assert res.json()["status"] == "rejected"
        assert res.json()["isLocked"] is False

        res = client.post(
            f"/api/missions/{mission.id}/sub-missions/{sub.id}/submit",
            json={"slots": [{"type": "text", "index": 0, "content": "with caption"}]},
            headers=member(user_id=100),
        )
        assert res.status_code == 200
        assert res.json()["status"] == "submitted"
        assert res.json()["reviewerNote"] is None

    def test_unknown_submission(self, client):
        assert _approve(client, 12345).status_code == 404

    def test_members_can_not_review(self, client, make_mission, make_sub_mission, make_submission):
        row = make_submission(make_sub_mission(make_mission()))
        assert _approve(client, row.id, headers=member()).status_code == 403


class TestCounts:

    def test_zero_state(self, client):
        assert _stats(client) == {"pending": 0, "approved": 0, "rejected": 0, "total": 0}

    def test_counts_follow_decisions(self, client, make_mission, make_sub_mission, make_submission):
        sub = make_sub_mission(make_mission())
        rows = [make_submission(sub, user_id=uid) for uid in (100, 101, 102)]

        assert _stats(client) == {"pending": 3, "approved": 0, "rejected": 0, "total": 3}
        _approve(client, rows[0].id)
        _reject(client, rows[1].id, "missing page")
        assert _stats(client) == {"pending": 1, "approved": 1, "rejected": 1, "total": 3}

    def test_cached_counts_are_invalidated(self, client, make_mission, make_sub_mission, make_submission):
        mission = make_mission()
        sub = make_sub_mission(mission)
        row = make_submission(sub)

        _stats(client)
        client.get(f"/api/admin/review/theme-missions/{mission.id}/sub-missions", headers=SUPERADMIN)
        assert stats_cache.get(("global", None)) is not None
        assert stats_cache.get(("sub", sub.id)) is not None

        _approve(client, row.id)
        assert stats_cache.get(("global", None)) is None
        assert stats_cache.get(("sub", sub.id)) is None

    def test_counts_read_before_a_decision_are_not_stored_after_it(
        self, client, make_mission, make_sub_mission, make_submission, monkeypatch
    ):
        sub = make_sub_mission(make_mission())
        row = make_submission(sub)
        real_count = review._count

        def count_then_approve(db, *criteria):
            counts = real_count(db, *criteria)
            monkeypatch.setattr(review, "_count", real_count)
            # another request approves between the count and the cache write
            with SessionLocal() as other:
                submissions.approve(other, CurrentUser(id=1, member_type="superadmin"), row.id, None, None)
            return counts

        monkeypatch.setattr(review, "_count", count_then_approve)
        assert _stats(client)["pending"] == 1
        assert stats_cache.get(("global", None)) is None
        assert _stats(client) == {"pending": 0, "approved": 1, "rejected": 0, "total": 1}

    def test_set_refuses_an_older_generation(self):
        cache = ReviewStatsCache(ttl=60)
        before = cache.generation()
        cache.invalidate(1, [1])
        assert cache.set(("sub", 1), {"pending": 1}, before) is False
        assert cache.get(("sub", 1)) is None

        assert cache.set(("sub", 1), {"pending": 0}, cache.generation()) is True
        assert cache.get(("sub", 1)) == {"pending": 0}
        cache.clear()
        assert cache.get(("sub", 1)) is None

    def test_zero_ttl_disables_caching(self):
        cache = ReviewStatsCache(ttl=0)
        assert cache.set(("global", None), {"pending": 1}, cache.generation()) is False
        assert cache.get(("global", None)) is None

    def test_theme_tree_includes_descendants(
        self, client, make_mission, make_sub_mission, make_submission
    ):
        parent = make_mission("Parent")
        child = make_mission("Child", parent_id=parent.id)
        make_submission(make_sub_mission(parent), user_id=100)
        make_submission(make_sub_mission(child), user_id=100, status="approved")

        tree = client.get("/api/admin/review/theme-missions", headers=SUPERADMIN).json()
        assert len(tree) == 1
        assert tree[0]["stats"] == {"pending": 1, "approved": 1, "rejected": 0, "total": 2}
        assert tree[0]["childMissions"][0]["stats"]["approved"] == 1

    def test_sub_mission_counts(self, client, make_mission, make_sub_mission, make_submission):
        mission = make_mission()
        a = make_sub_mission(mission, "a", order=0)
        b = make_sub_mission(mission, "b", order=1)
        make_submission(a, user_id=100)
        make_submission(a, user_id=101, status="rejected")

        res = client.get(
            f"/api/admin/review/theme-missions/{mission.id}/sub-missions", headers=SUPERADMIN
        ).json()
        assert [s["id"] for s in res] == [a.id, b.id]
        assert res[0]["stats"] == {"pending": 1, "approved": 0, "rejected": 1, "total": 2}
        assert res[1]["stats"]["total"] == 0


class TestScoping:

    @pytest.fixture
    def two_hospitals(self, hospitals, make_mission, make_sub_mission, make_submission):
        h1, h2 = hospitals
        m1 = make_mission("Seoul class", visibility="hospital", hospital_id=h1.id)
        child = make_mission("Seoul follow-up", parent_id=m1.id)
        m2 = make_mission("Busan class", visibility="hospital", hospital_id=h2.id)
        public = make_mission("Everyone")
        subs = {
            "m1": make_sub_mission(m1),
            "child": make_sub_mission(child),
            "m2": make_sub_mission(m2),
            "public": make_sub_mission(public),
        }
        rows = {key: make_submission(sub) for key, sub in subs.items()}
        return h1, h2, rows

    def test_superadmin_global_and_filtered(self, client, two_hospitals):
        h1, h2, _ = two_hospitals
        assert _stats(client)["total"] == 4
        assert _stats(client, hospitalId="all")["total"] == 4
        # child missions inherit their parent's hospital
        assert _stats(client, hospitalId=h1.id)["total"] == 2
        assert _stats(client, hospitalId=h2.id)["total"] == 1

    def test_hospital_admin_is_pinned(self, client, two_hospitals):
        h1, h2, _ = two_hospitals
        headers = hospital_admin(h1.id)
        assert _stats(client, headers)["total"] == 2
        # asking for another hospital changes nothing
        assert _stats(client, headers, hospitalId=h2.id)["total"] == 2
        assert _stats(client, headers, hospitalId="all")["total"] == 2

    def test_admin_is_pinned_too(self, client, two_hospitals):
        h1, h2, _ = two_hospitals
        headers = {"X-User-Id": "3", "X-Member-Type": "admin", "X-Hospital-Id": str(h2.id)}
        assert _stats(client, headers)["total"] == 1

    def test_admin_without_hospital_forbidden(self, client, two_hospitals):
        res = client.get("/api/admin/review/stats", headers=hospital_admin(None))
        assert res.status_code == 403
        assert client.get("/api/admin/review/stats", headers=ADMIN).status_code == 403

    def test_theme_tree_and_listing_scoped(self, client, two_hospitals):
        h1, _, rows = two_hospitals
        headers = hospital_admin(h1.id)

        tree = client.get("/api/admin/review/theme-missions", headers=headers).json()
        assert [n["title"] for n in tree] == ["Seoul class"]
        assert tree[0]["stats"]["total"] == 2

        listed = client.get("/api/admin/review/submissions", headers=headers).json()
        assert sorted(s["id"] for s in listed) == sorted([rows["m1"].id, rows["child"].id])
        assert {s["hospitalId"] for s in listed} == {h1.id}

    def test_out_of_scope_is_404(self, client, two_hospitals):
        h1, _, rows = two_hospitals
        headers = hospital_admin(h1.id)
        assert _approve(client, rows["m2"].id, headers=headers).status_code == 404
        assert _approve(client, rows["child"].id, headers=headers).status_code == 200

    def test_status_filter(self, client, two_hospitals):
        _, _, rows = two_hospitals
        _approve(client, rows["public"].id)
        approved = client.get(
            "/api/admin/review/submissions", params={"status": "approved"}, headers=SUPERADMIN
        ).json()
        assert [s["id"] for s in approved] == [rows["public"].id]
        everything = client.get(
            "/api/admin/review/submissions", params={"status": "all"}, headers=SUPERADMIN
        ).json()
        assert len(everything) == 4
        bad = client.get(
            "/api/admin/review/submissions", params={"status": "pending"}, headers=SUPERADMIN
        )
        assert bad.status_code == 400
