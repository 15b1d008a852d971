from datetime import datetime, timedelta

import pytest

from shared.core.database import utc_now
from bms_service.app.crud.security.access_permissions_crud import is_allowed_at_time
from bms_service.app.models.security.access_permissions import AccessPermission

# 2 June 2024 is a Sunday
SUNDAY_NOON = datetime(2024, 6, 2, 12, 0)
WEEKDAY_WINDOWS = {"time_windows": [
    {"day_of_week": day, "start_time": "08:00", "end_time": "18:00"} for day in range(1, 6)
]}


def test_restricted_access_follows_time_windows():
    permission = AccessPermission(access_level="restricted", restrictions=WEEKDAY_WINDOWS)
    assert is_allowed_at_time(permission, SUNDAY_NOON) is False
    assert is_allowed_at_time(permission, SUNDAY_NOON + timedelta(days=1)) is True
    assert is_allowed_at_time(permission, SUNDAY_NOON + timedelta(days=1, hours=7)) is False


def test_full_and_denied_levels():
    assert is_allowed_at_time(AccessPermission(access_level="full",
                                               restrictions=WEEKDAY_WINDOWS), SUNDAY_NOON)
    assert not is_allowed_at_time(AccessPermission(access_level="denied"), SUNDAY_NOON)
    expired = AccessPermission(access_level="full", valid_until=SUNDAY_NOON - timedelta(days=1))
    assert not is_allowed_at_time(expired, SUNDAY_NOON)


def _permission_body(building, tenant, **overrides):
    body = {
        "buildingId": str(building.id),
        "entityType": "tenant",
        "entityId": str(tenant.id),
        "accessLevel": "restricted",
        "restrictions": {"timeWindows": [
            {"dayOfWeek": 1, "startTime": "08:00", "endTime": "18:00"}]},
    }
    body.update(overrides)
    return body


def test_create_and_check_access(login, building, tenant):
    client = login("BUILDING_MANAGER")
    response = client.post("/api/access-control", json=_permission_body(building, tenant))
    assert response.status_code == 201, response.text
    created = response.json()
    assert created["restrictions"]["timeWindows"][0]["startTime"] == "08:00"

    params = {"buildingId": str(building.id), "entityType": "tenant", "entityId": str(tenant.id)}
    monday = client.get("/api/access-control/check",
                        params={**params, "at": "2024-06-03T09:30:00"}).json()
    assert monday == {"allowed": True, "reason": "Access granted"}

    sunday = client.get("/api/access-control/check",
                        params={**params, "at": "2024-06-02T09:30:00"}).json()
    assert sunday == {"allowed": False, "reason": "Outside of allowed time windows"}

    unknown = client.get("/api/access-control/check",
                         params={**params, "entityId": "visitor-1"}).json()
    assert unknown["allowed"] is False
    assert unknown["reason"] == "No access permission found"


def test_duplicate_permission_conflicts(login, building, tenant):
    client = login("BUILDING_MANAGER")
    client.post("/api/access-control", json=_permission_body(building, tenant))
    response = client.post("/api/access-control", json=_permission_body(building, tenant))
    assert response.status_code == 409
    assert response.json() == {
        "error": "Access permission already exists for this entity in this building"}


@pytest.mark.parametrize("window, message", [
    ({"dayOfWeek": 7, "startTime": "08:00", "endTime": "18:00"},
     "dayOfWeek must be between 0 and 6"),
    ({"dayOfWeek": 1, "startTime": "8am", "endTime": "18:00"},
     "Invalid time format: 8am. Expected HH:mm format."),
    ({"dayOfWeek": 1, "startTime": "18:00", "endTime": "08:00"},
     "endTime must be after startTime"),
])
def test_time_window_validation(login, building, tenant, window, message):
    response = login("BUILDING_MANAGER").post("/api/access-control", json=_permission_body(
        building, tenant, restrictions={"timeWindows": [window]}))
    assert response.status_code == 400
    assert response.json() == {"error": message}


def test_validity_period_must_be_ordered(login, building, tenant):
    response = login("BUILDING_MANAGER").post("/api/access-control", json=_permission_body(
        building, tenant, validFrom="2024-06-10T00:00:00", validUntil="2024-06-01T00:00:00"))
    assert response.status_code == 400
    assert response.json() == {"error": "validFrom must be before validUntil"}


def test_access_control_is_manager_only(login):
    response = login("SECURITY").get("/api/access-control")
    assert response.status_code == 403
    assert response.json() == {
        "error": "Access denied: requires one of ORG_ADMIN, BUILDING_MANAGER"}


def test_resolving_incident_stamps_resolution(login, users, building):
    client = login("SECURITY")
    response = client.post("/api/security-incidents", json={
        "buildingId": str(building.id),
        "incidentType": "theft",
        "severity": "high",
        "title": "Stolen laptop",
        "description": "Laptop taken from reception desk",
    })
    assert response.status_code == 201
    incident = response.json()
    assert incident["status"] == "reported"
    assert incident["reportedBy"] == str(users["SECURITY"].id)

    resolved = client.patch(f"/api/security-incidents/{incident['id']}", json={
        "status": "resolved", "resolutionNotes": "Recovered from CCTV review"}).json()
    assert resolved["resolvedAt"] is not None
    assert resolved["resolvedBy"] == str(users["SECURITY"].id)

    listed = client.get("/api/security-incidents", params={"severity": "high"}).json()
    assert listed["total"] == 1


def test_reopening_incident_clears_resolution(login, building):
    client = login("SECURITY")
    incident = client.post("/api/security-incidents", json={
        "buildingId": str(building.id), "incidentType": "vandalism", "severity": "low",
        "title": "Broken lobby glass", "description": "Crack in the lobby door",
    }).json()
    client.patch(f"/api/security-incidents/{incident['id']}", json={"status": "resolved"})

    reopened = client.patch(f"/api/security-incidents/{incident['id']}",
                            json={"status": "under_investigation"}).json()
    assert reopened["status"] == "under_investigation"
    assert reopened["resolvedAt"] is None
    assert reopened["resolvedBy"] is None

    closed = client.patch(f"/api/security-incidents/{incident['id']}",
                          json={"status": "closed"}).json()
    assert closed["resolvedAt"] is not None


def test_visitor_entry_and_exit(login, building, tenant):
    client = login("SECURITY")
    log = client.post("/api/visitor-logs", json={
        "buildingId": str(building.id),
        "visitorName": "Hanna Girma",
        "purpose": "Delivery",
        "hostTenantId": str(tenant.id),
    }).json()
    assert log["exitTime"] is None

    active = client.get("/api/visitor-logs/active").json()
    assert [v["id"] for v in active["visitorLogs"]] == [log["id"]]

    exited = client.post(f"/api/visitor-logs/{log['id']}/exit", json={})
    assert exited.status_code == 200
    assert exited.json()["exitTime"] is not None
    assert client.get("/api/visitor-logs/active").json()["total"] == 0

    again = client.post(f"/api/visitor-logs/{log['id']}/exit", json={})
    assert again.status_code == 400
    assert again.json() == {"error": "Visitor has already exited"}


def test_visitor_exit_before_entry(login, building):
    client = login("SECURITY")
    log = client.post("/api/visitor-logs", json={
        "buildingId": str(building.id), "visitorName": "Samuel T", "purpose": "Meeting",
        "entryTime": utc_now().isoformat()}).json()
    response = client.post(f"/api/visitor-logs/{log['id']}/exit", json={
        "exitTime": (utc_now() - timedelta(hours=2)).isoformat()})
    assert response.status_code == 400
    assert response.json() == {"error": "Exit time cannot be before entry time"}


def test_visitor_requires_purpose(login, building):
    response = login("SECURITY").post("/api/visitor-logs", json={
        "buildingId": str(building.id), "visitorName": "No Purpose", "purpose": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "visitorName and purpose are required"}


def test_security_staff_profile_is_unique(login, users, building):
    client = login("ORG_ADMIN")
    body = {"userId": str(users["SECURITY"].id), "buildingId": str(building.id),
            "employeeId": "SEC-014", "assignedBuildings": [str(building.id)]}
    created = client.post("/api/security-staff", json=body)
    assert created.status_code == 201
    assert created.json()["assignedBuildings"] == [str(building.id)]

    response = client.post("/api/security-staff", json=body)
    assert response.status_code == 409
    assert response.json() == {"error": "Security staff profile already exists for this user"}


def test_security_staff_from_other_org(login, users, building):
    response = login("ORG_ADMIN").post("/api/security-staff", json={
        "userId": str(users["OTHER_ADMIN"].id), "buildingId": str(building.id)})
    assert response.status_code == 403


def test_visitor_name_cannot_be_blanked(login, building):
    client = login("SECURITY")
    log = client.post("/api/visitor-logs", json={
        "buildingId": str(building.id), "visitorName": "Meron A", "purpose": "Interview"}).json()

    response = client.patch(f"/api/visitor-logs/{log['id']}", json={"visitorName": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "visitorName cannot be empty"}

    notes = client.patch(f"/api/visitor-logs/{log['id']}", json={"notes": ""})
    assert notes.status_code == 200
    assert notes.json()["visitorName"] == "Meron A"
