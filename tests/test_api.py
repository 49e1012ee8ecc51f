import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_office_store, get_store
from app.main import app
from app.services.office_context import OfficeContextStore

API = "/api/v1"


@pytest.fixture()
def client(seeded_store, tmp_path):
    app.dependency_overrides[get_store] = lambda: seeded_store
    app.dependency_overrides[get_office_store] = lambda: OfficeContextStore(tmp_path / "office.json")
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    assert client.get("/").status_code == 200


class TestEntities:
    def test_list(self, client):
        response = client.get(f"{API}/entities/building")
        assert response.status_code == 200
        [building] = response.json()
        assert building["readableId"] == "IN-HQ-CAMPUS-SB"
        assert building["leaseDetails"]["monthlyRent"] == 100.0

    def test_unknown_level(self, client):
        assert client.get(f"{API}/entities/planet").status_code == 422

    def test_get_one(self, client):
        response = client.get(f"{API}/entities/floor/floor1")
        assert response.json()["totalSeats"] == 20
        assert client.get(f"{API}/entities/floor/nope").status_code == 404

    def test_create(self, client):
        payload = {"portfolioId": "portfolio1", "name": "South Campus", "type": "coworking"}
        response = client.post(f"{API}/entities/campus", json=payload)
        assert response.status_code == 201
        body = response.json()
        assert body["readableId"] == "IN-SOUTH-CAMPUS"
        assert body["id"]

    def test_create_rejected(self, client):
        payload = {"campusId": "campus1", "name": "Rented", "ownershipType": "leased"}
        response = client.post(f"{API}/entities/building", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "ConditionalFieldMismatch"

    def test_create_with_wrong_types(self, client):
        response = client.post(f"{API}/entities/floor", json={"buildingId": "building1", "floorArea": "lots"})
        assert response.status_code == 422

    def test_update(self, client):
        response = client.patch(f"{API}/entities/building/building1", json={"numberOfFloors": 8})
        assert response.status_code == 200
        assert response.json()["numberOfFloors"] == 8

    def test_update_reparent(self, client):
        response = client.patch(f"{API}/entities/floor/floor1", json={"buildingId": "other"})
        assert response.status_code == 400

    def test_delete(self, client):
        assert client.delete(f"{API}/entities/campus/campus1").status_code == 409
        assert client.delete(f"{API}/entities/seat_zone/zone1").status_code == 204
        assert client.delete(f"{API}/entities/seat_zone/zone1").status_code == 404

    def test_export(self, client):
        response = client.get(f"{API}/entities/organization/export")
        assert response.status_code == 200
        assert response.text.splitlines()[0].startswith("id,readableId,name")


class TestImports:
    def test_upload(self, client):
        content = "buildingId,floorNumber,seatCounts.fixedDesk\nbuilding1,3,40\nghost,4,10\n"
        response = client.post(
            f"{API}/imports/floor",
            files={"file": ("floors.csv", content.encode("utf-8"), "text/csv")},
        )
        assert response.status_code == 201
        report = response.json()
        assert report["total"] == 2
        assert report["succeeded"][0]["readableId"] == "IN-HQ-CAMPUS-SB-F3"
        assert report["succeeded"][0]["totalSeats"] == 40
        assert report["failed"][0]["row"] == 2
        assert report["failed"][0]["kind"] == "MissingParent"

    def test_rejects_non_csv(self, client):
        response = client.post(f"{API}/imports/floor", files={"file": ("floors.xlsx", b"x", "application/octet-stream")})
        assert response.status_code == 400

    def test_rejects_empty_file(self, client):
        response = client.post(f"{API}/imports/floor", files={"file": ("floors.csv", b"   ", "text/csv")})
        assert response.status_code == 400

    def test_template(self, client):
        response = client.get(f"{API}/imports/campus/template")
        assert response.status_code == 200
        assert "greenInfrastructure.hasSTP" in response.text.splitlines()[0]


class TestHierarchy:
    def test_tree(self, client):
        body = client.get(f"{API}/hierarchy").json()
        assert body["organizations"][0]["id"] == "org1"
        assert body["warnings"] == []

    def test_search(self, client):
        results = client.get(f"{API}/hierarchy/search", params={"q": "zone"}).json()
        assert [r["level"] for r in results] == ["seat_zone"]

    def test_stats(self, client):
        stats = client.get(f"{API}/hierarchy/stats").json()
        assert stats["total_seats"] == 20
        assert stats["counts"]["building"] == 1


class TestOfficeContext:
    def test_round_trip(self, client):
        assert client.get(f"{API}/office-context").json()["state"] == "Unset"

        selection = {"organizationId": "org1", "portfolioId": "portfolio1", "campusId": "campus1", "buildingId": "building1"}
        response = client.put(f"{API}/office-context", json=selection)
        assert response.status_code == 200
        assert response.json()["selection"]["displayName"] == "Acme > HQ Campus > Tower A"

        body = client.get(f"{API}/office-context").json()
        assert body["state"] == "Set"
        assert body["resolution"]["valid"] is True

        assert client.delete(f"{API}/office-context").status_code == 204
        assert client.get(f"{API}/office-context").json()["state"] == "Unset"

    def test_incomplete_selection(self, client):
        response = client.put(f"{API}/office-context", json={"organizationId": "org1"})
        assert response.status_code == 400

    def test_stale_selection(self, client):
        selection = {"organizationId": "org1", "portfolioId": "portfolio1", "campusId": "campus1", "buildingId": "gone"}
        client.put(f"{API}/office-context", json=selection)
        body = client.get(f"{API}/office-context").json()
        assert body["resolution"]["valid"] is False
        assert body["resolution"]["kind"] == "StalePath"
        assert body["label"] is None


def test_create_with_taken_id_is_rejected(client):
    payload = {"id": "building1", "campusId": "campus1", "name": "Clash", "code": "CL"}
    response = client.post(f"{API}/entities/building", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == {
        "kind": "DuplicateIdentifier",
        "field": "id",
        "message": "Ya existe un building con id 'building1'",
    }
