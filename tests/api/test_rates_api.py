"""Admin fare rule endpoints and their rate events."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from realtime.bus import EventBus
from tests.helpers import emitted, emitted_payloads


@pytest.fixture
def recording_bus():
    bus = Mock(spec=EventBus)
    bus.emit.return_value = 0
    bus.connection_count = 0
    return bus


@pytest.fixture
def client(session_factory, rate_ids, recording_bus):
    app = create_app(session_factory, event_bus=recording_bus)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.mark.unit
class TestRateCrud:
    def test_list(self, client, auth_headers):
        response = client.get("/api/admin/fares/distance", headers=auth_headers)
        assert response.status_code == 200
        assert [r["vehicleType"] for r in response.json()] == ["economy_4", "van_luxe"]
        assert response.json()[0]["baseFare"] == 5.0

    def test_list_includes_inactive(self, client, auth_headers):
        routes = client.get("/api/admin/fares/routes", headers=auth_headers).json()
        assert {r["routeName"] for r in routes} == {"CDG to Paris", "Orly to Paris"}

    def test_unknown_kind(self, client, auth_headers):
        assert client.get("/api/admin/fares/surge", headers=auth_headers).status_code == 422

    def test_create_publishes(self, client, auth_headers, recording_bus):
        response = client.post(
            "/api/admin/fares/distance",
            json={"vehicleType": "economy_5", "baseFare": 6, "perKm": 1.6},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["perKm"] == 1.6
        assert emitted(recording_bus) == [("rates", "fare_distance_created")]

    def test_created_rate_is_used_for_quotes(self, client, auth_headers):
        client.post(
            "/api/admin/fares/hourly",
            json={"vehicleType": "van_luxe", "pricePerHour": 80, "minimumHours": 3},
            headers=auth_headers,
        )

        quote = client.post(
            "/api/bookings/estimate",
            json={"vehicleType": "van_luxe", "isHourly": True, "estimatedHours": 1},
        )

        assert quote.json()["totalFare"] == 240.0

    def test_update(self, client, auth_headers, recording_bus):
        route_id = client.get("/api/admin/fares/routes", headers=auth_headers).json()[0]["id"]

        response = client.put(
            f"/api/admin/fares/routes/{route_id}", json={"price": 170}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["price"] == 170.0
        assert response.json()["routeName"] == "CDG to Paris"
        assert emitted(recording_bus) == [("rates", "fare_route_updated")]

    def test_update_clears_hour_bounds(self, client, auth_headers):
        rates = client.get("/api/admin/fares/hourly", headers=auth_headers).json()
        business = next(r for r in rates if r["vehicleType"] == "business")

        body = client.put(
            f"/api/admin/fares/hourly/{business['id']}",
            json={"maximumHours": None},
            headers=auth_headers,
        ).json()

        assert body["maximumHours"] is None
        assert body["minimumHours"] == 2.0

    def test_delete(self, client, auth_headers, recording_bus):
        extras = client.get("/api/admin/fares/extras", headers=auth_headers).json()
        extra_id = extras[0]["id"]

        response = client.delete(f"/api/admin/fares/extras/{extra_id}", headers=auth_headers)

        assert response.json() == {"deleted": True, "id": extra_id}
        assert emitted_payloads(recording_bus, "rates", "fare_extra_deleted") == [{"id": extra_id}]
        assert client.delete(f"/api/admin/fares/extras/{extra_id}", headers=auth_headers).status_code == 404

    def test_update_missing(self, client, auth_headers, recording_bus):
        response = client.put("/api/admin/fares/distance/999", json={"perKm": 2}, headers=auth_headers)
        assert response.status_code == 404
        recording_bus.emit.assert_not_called()


@pytest.mark.unit
class TestRateValidation:
    @pytest.mark.parametrize(
        "kind,payload",
        [
            ("distance", {"vehicleType": "economy_5", "baseFare": -1, "perKm": 1}),
            ("distance", {"vehicleType": "hovercraft", "baseFare": 1, "perKm": 1}),
            ("routes", {"routeName": "", "fromLocation": "A", "toLocation": "B", "vehicleType": "van_luxe", "price": 10}),
            ("hourly", {"vehicleType": "van_luxe", "pricePerHour": 50, "minimumHours": 6, "maximumHours": 2}),
            ("extras", {"item": "Wifi", "price": 5, "unexpected": True}),
        ],
    )
    def test_invalid_create(self, client, auth_headers, recording_bus, kind, payload):
        response = client.post(f"/api/admin/fares/{kind}", json=payload, headers=auth_headers)
        assert response.status_code == 422
        recording_bus.emit.assert_not_called()

    def test_requires_api_key(self, client):
        assert client.get("/api/admin/fares/distance", headers={"X-API-Key": "bad"}).status_code == 401

    def test_invalid_create_reports_errors_as_json(self, client, auth_headers):
        response = client.post(
            "/api/admin/fares/distance",
            json={"vehicleType": "economy_5", "baseFare": -1, "perKm": 1},
            headers=auth_headers,
        )

        assert response.status_code == 422
        errors = response.json()["detail"]
        assert isinstance(errors, list)
        assert any("baseFare" in error["loc"] for error in errors)

    def test_inverted_bounds_report_message(self, client, auth_headers):
        response = client.post(
            "/api/admin/fares/hourly",
            json={"vehicleType": "van_luxe", "pricePerHour": 50, "minimumHours": 6, "maximumHours": 2},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert "minimumHours must not exceed maximumHours" in response.json()["detail"][0]["msg"]

    def test_patch_cannot_invert_stored_bounds(self, client, auth_headers, recording_bus):
        rates = client.get("/api/admin/fares/hourly", headers=auth_headers).json()
        business = next(r for r in rates if r["vehicleType"] == "business")

        response = client.put(
            f"/api/admin/fares/hourly/{business['id']}",
            json={"minimumHours": 20},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "minimumHours must not exceed maximumHours"
        recording_bus.emit.assert_not_called()
        stored = client.get("/api/admin/fares/hourly", headers=auth_headers).json()
        assert next(r for r in stored if r["id"] == business["id"])["minimumHours"] == 2.0

        quote = client.post(
            "/api/bookings/estimate",
            json={"vehicleType": "business", "isHourly": True, "estimatedHours": 0.5},
        ).json()
        assert quote["totalFare"] == 60.0


@pytest.mark.unit
class TestRateConflicts:
    def test_duplicate_distance_vehicle_type(self, client, auth_headers, recording_bus):
        response = client.post(
            "/api/admin/fares/distance",
            json={"vehicleType": "economy_4", "baseFare": 7, "perKm": 2},
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert "already exists" in response.json()["detail"]
        recording_bus.emit.assert_not_called()

    def test_conflict_leaves_existing_rate(self, client, auth_headers):
        client.post(
            "/api/admin/fares/distance",
            json={"vehicleType": "economy_4", "baseFare": 7, "perKm": 2},
            headers=auth_headers,
        )

        rates = client.get("/api/admin/fares/distance", headers=auth_headers).json()
        economy = [r for r in rates if r["vehicleType"] == "economy_4"]
        assert len(economy) == 1
        assert economy[0]["baseFare"] == 5.0
