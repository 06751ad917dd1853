"""Tests for the /api/restaurants routes."""

from fastapi.testclient import TestClient


def _create(client: TestClient, city_id: int, name: str) -> int:
    response = client.post("/api/restaurants", json={"city_id": city_id, "name": name})
    assert response.status_code == 201
    return int(response.json()["id"])


class TestCreateRestaurant:
    """Tests for POST /api/restaurants."""

    def test_created(self, client: TestClient, city_id: int) -> None:
        response = client.post("/api/restaurants", json={"city_id": city_id, "name": "Test"})
        assert response.status_code == 201
        body = response.json()
        assert body["id"] > 0
        assert body["city_id"] == city_id
        assert body["name"] == "Test"

    def test_unknown_city_returns_409(self, client: TestClient) -> None:
        """A foreign key violation is reported as a conflict."""
        response = client.post("/api/restaurants", json={"city_id": 999, "name": "Orphan"})
        assert response.status_code == 409
        assert "FOREIGN KEY" in response.json()["detail"]
        assert client.get("/api/restaurants").json() == []

    def test_blank_name_rejected(self, client: TestClient, city_id: int) -> None:
        response = client.post("/api/restaurants", json={"city_id": city_id, "name": ""})
        assert response.status_code == 422

    def test_name_too_long_rejected(self, client: TestClient, city_id: int) -> None:
        response = client.post("/api/restaurants", json={"city_id": city_id, "name": "x" * 201})
        assert response.status_code == 422


class TestListRestaurants:
    """Tests for GET /api/restaurants."""

    def test_all_and_filtered(self, client: TestClient, city_id: int) -> None:
        other = client.post("/api/cities", json={"postal_code_prefix": 75}).json()["id"]
        _create(client, city_id, "Alpha")
        _create(client, other, "Beta")

        assert len(client.get("/api/restaurants").json()) == 2
        filtered = client.get("/api/restaurants", params={"city_id": other}).json()
        assert [r["name"] for r in filtered] == ["Beta"]


class TestGetRestaurant:
    """Tests for GET /api/restaurants/{restaurant_id}."""

    def test_found(self, client: TestClient, city_id: int) -> None:
        restaurant_id = _create(client, city_id, "Alpha")
        response = client.get(f"/api/restaurants/{restaurant_id}")
        assert response.status_code == 200
        assert response.json() == {"id": restaurant_id, "city_id": city_id, "name": "Alpha"}

    def test_missing_returns_404(self, client: TestClient) -> None:
        assert client.get("/api/restaurants/5").status_code == 404


class TestRenameRestaurant:
    """Tests for PATCH /api/restaurants/{restaurant_id}."""

    def test_renamed(self, client: TestClient, city_id: int) -> None:
        """The tracked entity is modified and saved by the route."""
        restaurant_id = _create(client, city_id, "Old Name")
        response = client.patch(f"/api/restaurants/{restaurant_id}", json={"name": "New Name"})
        assert response.status_code == 200
        assert response.json()["name"] == "New Name"
        assert client.get(f"/api/restaurants/{restaurant_id}").json()["name"] == "New Name"

    def test_missing_returns_404(self, client: TestClient) -> None:
        response = client.patch("/api/restaurants/5", json={"name": "Nobody"})
        assert response.status_code == 404


class TestDeleteRestaurant:
    """Tests for DELETE /api/restaurants/{restaurant_id}."""

    def test_deleted(self, client: TestClient, city_id: int) -> None:
        restaurant_id = _create(client, city_id, "Alpha")
        response = client.delete(f"/api/restaurants/{restaurant_id}")
        assert response.status_code == 204
        assert client.get(f"/api/restaurants/{restaurant_id}").status_code == 404

    def test_missing_returns_404(self, client: TestClient) -> None:
        assert client.delete("/api/restaurants/5").status_code == 404
