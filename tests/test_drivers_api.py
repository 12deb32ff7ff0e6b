"""HTTP tests for the driver and reference routes."""

import pytest
from fastapi.testclient import TestClient

from dhaba_ledger.core.config import Settings

from conftest import TEST_LICENSE, visit_payload

API = "/api/v1"


def post_visit(client, **overrides):
    return client.post(f"{API}/driver", json=visit_payload(**overrides))


# Recording visits
def test_first_visit_returns_201(client):
    response = post_visit(client)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Driver added successfully"
    assert body["created"] is True
    assert body["driver"]["visits"] == 1
    assert body["driver"]["total_visits"] == 1
    assert body["driver"]["eligible_for_commission"] is False

def test_repeat_visit_returns_200(client):
    post_visit(client)
    response = post_visit(client, name="Ramesh K", mobile_number="9123456780")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Driver updated successfully"
    assert body["created"] is False
    assert body["driver"]["visits"] == 2
    assert body["driver"]["name"] == "Ramesh K"
    assert body["driver"]["mobile_number"] == "9123456780"

def test_invalid_visit_returns_422_with_message(client):
    response = post_visit(client, license_number="DL123")

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "Invalid driver details"
    assert any("license_number" in error["loc"] for error in body["error"])

def test_commission_cycle_over_http(client):
    for _ in range(4):
        response = post_visit(client, last_visited_location="A")
    driver = response.json()["driver"]
    assert (driver["visits"], driver["total_visits"], driver["eligible_for_commission"]) == (4, 4, True)

    response = client.patch(f"{API}/driver/{driver['id']}/commission")
    assert response.status_code == 200
    assert response.json()["commission_received"] is True

    driver = post_visit(client, last_visited_location="A").json()["driver"]
    assert driver["visits"] == 1
    assert driver["total_visits"] == 5
    assert driver["eligible_for_commission"] is False
    assert driver["commission_received"] is False


# Directory
def test_list_and_search(client):
    post_visit(client)
    post_visit(client, license_number="HR9876543210987")

    assert len(client.get(f"{API}/driver").json()) == 2

    response = client.get(f"{API}/driver", params={"search": "hr98"})
    assert response.status_code == 200
    assert [d["license_number"] for d in response.json()] == ["HR9876543210987"]

def test_get_driver(client):
    created = post_visit(client).json()["driver"]

    response = client.get(f"{API}/driver/{created['id']}")

    assert response.status_code == 200
    assert response.json()["license_number"] == TEST_LICENSE

def test_get_missing_driver_returns_404(client):
    response = client.get(f"{API}/driver/404")

    assert response.status_code == 404
    assert response.json()["message"] == "The driver with this ID does not exist in the system"

def test_update_driver(client):
    created = post_visit(client).json()["driver"]

    response = client.put(
        f"{API}/driver/{created['id']}",
        json={"name": "R. Kumar", "license_number": "PB1112223334445", "vehicle_number": "PB10A1234", "vehicle_type": "Van"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "R. Kumar"
    assert body["vehicle_type"] == "Van"
    assert body["visits"] == created["visits"]

def test_update_missing_driver_returns_404(client):
    response = client.put(
        f"{API}/driver/404",
        json={"name": "R. Kumar", "license_number": "PB1112223334445", "vehicle_number": "PB10A1234", "vehicle_type": "Van"},
    )

    assert response.status_code == 404

def test_update_onto_existing_pair_returns_409(client):
    post_visit(client, last_visited_location="A")
    other = post_visit(client, license_number="HR9876543210987", last_visited_location="A").json()["driver"]

    response = client.put(
        f"{API}/driver/{other['id']}",
        json={"name": "X", "license_number": TEST_LICENSE, "vehicle_number": "PB10A1234", "vehicle_type": "Van"},
    )

    assert response.status_code == 409
    assert "message" in response.json()

def test_acknowledge_missing_driver_returns_404(client):
    assert client.patch(f"{API}/driver/404/commission").status_code == 404

def test_delete_driver(client):
    created = post_visit(client).json()["driver"]

    response = client.delete(f"{API}/driver/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Driver deleted successfully"}

    assert client.get(f"{API}/driver/{created['id']}").status_code == 404
    assert client.delete(f"{API}/driver/{created['id']}").status_code == 404


# Configuration driven behaviour
def test_operator_key_required_when_configured(test_settings):
    from main import create_app

    settings = test_settings.model_copy(update={"OPERATOR_API_KEY": "s3cret"})
    with TestClient(create_app(settings)) as client:
        assert client.get(f"{API}/driver").status_code == 401
        assert client.get(f"{API}/driver", headers={"X-Operator-Key": "wrong"}).status_code == 401
        assert client.get(f"{API}/driver", headers={"X-Operator-Key": "s3cret"}).status_code == 200
        # Reference data stays public
        assert client.get(f"{API}/reference/vehicle-types").status_code == 200

def test_partner_locations_can_be_enforced(test_settings):
    from main import create_app

    settings = test_settings.model_copy(update={
        "RESTRICT_TO_PARTNER_LOCATIONS": True,
        "PARTNER_LOCATIONS": "Rao Dhaba, Gurgaon;Sitara Dhaba, Panipat",
    })
    with TestClient(create_app(settings)) as client:
        response = post_visit(client, last_visited_location="Unknown Dhaba")
        assert response.status_code == 422
        assert response.json()["message"] == "Unknown partner location"

        assert post_visit(client, last_visited_location="Sitara Dhaba, Panipat").status_code == 201


# Reference data and health
def test_reference_locations(client):
    locations = client.get(f"{API}/reference/locations").json()

    assert "Amrik Sukhdev Dhaba, Murthal" in locations
    assert len(locations) == 10

def test_reference_vehicle_types(client):
    assert client.get(f"{API}/reference/vehicle-types").json() == [
        "SUV", "Sedan", "Hatchback", "Bus", "Truck", "Van", "Pickup"
    ]

def test_health(client):
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["database"] == "ok"
