import pytest

from shared.exception_handler import status_for_message


@pytest.mark.parametrize("message, status", [
    ("Authentication required", 401),
    ("Access denied: users.create permission required", 403),
    ("Unit does not belong to the same organization", 403),
    ("Tenant not found", 404),
    ("Meter number already exists in this organization", 409),
    ("Unit already has an active lease", 409),
    ("End date must be after start date", 400),
])
def test_status_for_message(message, status):
    assert status_for_message(message) == status


def test_default_status_can_be_overridden():
    assert status_for_message("boom", default=500) == 500


def test_validation_errors_use_error_shape(login):
    client = login("ORG_ADMIN")
    response = client.post("/api/units", json={"unitNumber": "A1"})
    assert response.status_code == 400
    body = response.json()
    assert set(body) == {"error"}
    assert body["error"].startswith("Invalid request")
    assert "buildingId" in body["error"]


def test_malformed_id_is_not_found(login):
    client = login("ORG_ADMIN")
    response = client.get("/api/tenants/not-a-uuid")
    assert response.status_code == 404
    assert response.json() == {"error": "Tenant not found"}


def test_health_is_public(client):
    assert client.get("/health").json() == {"status": "ok"}
