"""Tests for mission categories and app-level endpoints."""

from conftest import ADMIN, member


class TestCategories:

    def test_crud(self, client):
        res = client.post(
            "/api/admin/mission-categories",
            json={"name": "Birth prep", "emoji": "🍼"},
            headers=ADMIN,
        )
        assert res.status_code == 201
        cat = res.json()
        assert cat["order"] == 0

        res = client.put(
            f"/api/admin/mission-categories/{cat['id']}", json={"isActive": False}, headers=ADMIN
        )
        assert res.json()["isActive"] is False
        assert res.json()["name"] == "Birth prep"

        assert client.delete(f"/api/admin/mission-categories/{cat['id']}", headers=ADMIN).status_code == 204
        assert client.get("/api/admin/mission-categories", headers=ADMIN).json() == []

    def test_category_in_use_can_not_be_deleted(self, client):
        cat = client.post("/api/admin/mission-categories", json={"name": "Nutrition"}, headers=ADMIN).json()
        client.post(
            "/api/admin/missions", json={"title": "Iron intake", "categoryId": cat["id"]}, headers=ADMIN
        )
        res = client.delete(f"/api/admin/mission-categories/{cat['id']}", headers=ADMIN)
        assert res.status_code == 400

    def test_requires_content_admin(self, client):
        assert client.get("/api/admin/mission-categories", headers=member()).status_code == 403


class TestApp:

    def test_health(self, client):
        res = client.get("/health")
        assert res.status_code == 200
        assert res.json()["ok"] is True

    def test_validation_errors_are_400_with_fields(self, client):
        res = client.post("/api/admin/mission-folders", json={"color": "red"}, headers=ADMIN)
        assert res.status_code == 400
        fields = {e["field"] for e in res.json()["detail"]}
        assert {"name", "color"} <= fields
