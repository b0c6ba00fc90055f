"""Tests for the /lines and /stations endpoints."""

import pytest
from fastapi.testclient import TestClient


def create_station(client: TestClient, name: str) -> dict:
    response = client.post("/stations", json={"name": name})
    assert response.status_code == 201
    return response.json()


def create_line(client: TestClient, name: str, color: str, up: dict, down: dict, distance: int):
    return client.post(
        "/lines",
        json={
            "name": name,
            "color": color,
            "up_station_id": up["id"],
            "down_station_id": down["id"],
            "distance": distance,
        },
    )


def create_section(client: TestClient, line_id: int, up: dict, down: dict, distance: int):
    return client.post(
        f"/lines/{line_id}/sections",
        json={"up_station_id": up["id"], "down_station_id": down["id"], "distance": distance},
    )


def delete_section(client: TestClient, line_id: int, station: dict):
    return client.request("DELETE", f"/lines/{line_id}/sections", json={"station_id": station["id"]})


def station_names(body: dict) -> list:
    return [station["name"] for station in body["stations"]]


@pytest.fixture
def yangjae(client):
    return create_station(client, "Yangjae")


@pytest.fixture
def pangyo(client):
    return create_station(client, "Pangyo")


@pytest.fixture
def sinbundang(client, yangjae, pangyo) -> dict:
    response = create_line(client, "Sinbundang", "bg-red-600", yangjae, pangyo, 100)
    assert response.status_code == 201
    return response.json()


# ============================================================================
# Stations
# ============================================================================

class TestStations:

    def test_create_and_list(self, client, yangjae, pangyo):
        response = client.get("/stations")
        assert response.status_code == 200
        assert [s["name"] for s in response.json()] == ["Yangjae", "Pangyo"]

    def test_duplicate_name(self, client, yangjae):
        response = client.post("/stations", json={"name": "Yangjae"})
        assert response.status_code == 409

    def test_blank_name(self, client):
        response = client.post("/stations", json={"name": "   "})
        assert response.status_code == 422

    def test_delete_station_in_use(self, client, sinbundang, yangjae):
        response = client.delete(f"/stations/{yangjae['id']}")
        assert response.status_code == 409

    def test_delete_unknown_station(self, client):
        response = client.delete("/stations/999")
        assert response.status_code == 404


# ============================================================================
# Lines
# ============================================================================

class TestLines:

    def test_create_line(self, client, yangjae, pangyo):
        response = create_line(client, "Sinbundang", "bg-red-600", yangjae, pangyo, 100)
        assert response.status_code == 201
        body = response.json()
        assert response.headers["Location"] == f"/lines/{body['id']}"
        assert station_names(body) == ["Yangjae", "Pangyo"]
        assert body["sections"] == [
            {"up_station_id": None, "down_station_id": yangjae["id"], "distance": 0},
            {"up_station_id": yangjae["id"], "down_station_id": pangyo["id"], "distance": 100},
        ]

    def test_duplicate_line_name(self, client, sinbundang, yangjae, pangyo):
        response = create_line(client, "Sinbundang", "bg-red-600", yangjae, pangyo, 100)
        assert response.status_code == 409

    def test_create_line_with_unknown_station(self, client, yangjae):
        response = create_line(client, "Sinbundang", "bg-red-600", yangjae, {"id": 999}, 100)
        assert response.status_code == 404
        assert client.get("/lines").json() == []

    @pytest.mark.parametrize("distance", [0, -5])
    def test_create_line_requires_positive_distance(self, client, yangjae, pangyo, distance):
        response = create_line(client, "Sinbundang", "bg-red-600", yangjae, pangyo, distance)
        assert response.status_code == 422

    def test_show_lines(self, client, sinbundang):
        response = client.get("/lines")
        assert response.status_code == 200
        assert [(line["id"], line["name"]) for line in response.json()] == [(sinbundang["id"], "Sinbundang")]

    def test_show_unknown_line(self, client):
        assert client.get("/lines/999").status_code == 404

    def test_update_line(self, client, sinbundang):
        response = client.put(f"/lines/{sinbundang['id']}", json={"name": "Shinbundang", "color": "bg-red-700"})
        assert response.status_code == 200
        body = client.get(f"/lines/{sinbundang['id']}").json()
        assert (body["name"], body["color"]) == ("Shinbundang", "bg-red-700")

    def test_delete_line(self, client, sinbundang):
        response = client.delete(f"/lines/{sinbundang['id']}")
        assert response.status_code == 204
        assert client.get(f"/lines/{sinbundang['id']}").status_code == 404


# ============================================================================
# Sections
# ============================================================================

class TestSections:

    def test_section_between_stations(self, client, sinbundang, yangjae):
        cheonggye = create_station(client, "Cheonggye")
        response = create_section(client, sinbundang["id"], yangjae, cheonggye, 50)

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Sinbundang"
        assert body["color"] == "bg-red-600"
        assert station_names(body) == ["Yangjae", "Cheonggye", "Pangyo"]
        assert [s["distance"] for s in body["sections"]] == [0, 50, 50]

    def test_section_before_start(self, client, sinbundang, yangjae):
        gangnam = create_station(client, "Gangnam")
        response = create_section(client, sinbundang["id"], gangnam, yangjae, 50)

        assert response.status_code == 201
        assert station_names(response.json()) == ["Gangnam", "Yangjae", "Pangyo"]

    def test_section_after_end(self, client, sinbundang, pangyo):
        gwanggyo = create_station(client, "Gwanggyo")
        response = create_section(client, sinbundang["id"], pangyo, gwanggyo, 50)

        assert response.status_code == 201
        assert station_names(response.json()) == ["Yangjae", "Pangyo", "Gwanggyo"]

    def test_already_registered_section(self, client, sinbundang, yangjae, pangyo):
        response = create_section(client, sinbundang["id"], yangjae, pangyo, 10)
        assert response.status_code == 400
        assert station_names(client.get(f"/lines/{sinbundang['id']}").json()) == ["Yangjae", "Pangyo"]

    def test_unconnected_section(self, client, sinbundang):
        gangnam = create_station(client, "Gangnam")
        gwanggyo = create_station(client, "Gwanggyo")
        response = create_section(client, sinbundang["id"], gangnam, gwanggyo, 10)
        assert response.status_code == 400

    def test_section_longer_than_split_section(self, client, sinbundang, yangjae):
        cheonggye = create_station(client, "Cheonggye")
        response = create_section(client, sinbundang["id"], yangjae, cheonggye, 100)
        assert response.status_code == 400

    def test_remove_interior_station(self, client, sinbundang, yangjae):
        cheonggye = create_station(client, "Cheonggye")
        create_section(client, sinbundang["id"], yangjae, cheonggye, 40)

        response = delete_section(client, sinbundang["id"], cheonggye)

        assert response.status_code == 204
        body = client.get(f"/lines/{sinbundang['id']}").json()
        assert station_names(body) == ["Yangjae", "Pangyo"]
        assert body["sections"][-1]["distance"] == 100

    def test_remove_from_two_station_line(self, client, sinbundang, pangyo):
        response = delete_section(client, sinbundang["id"], pangyo)
        assert response.status_code == 400

    def test_remove_station_not_on_line(self, client, sinbundang, yangjae):
        cheonggye = create_station(client, "Cheonggye")
        gangnam = create_station(client, "Gangnam")
        create_section(client, sinbundang["id"], yangjae, cheonggye, 40)

        response = delete_section(client, sinbundang["id"], gangnam)
        assert response.status_code == 400
