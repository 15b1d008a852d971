from datetime import timedelta

import pytest

from shared.core.database import utc_now
from bms_service.app.crud.energy_iot import meters_crud
from bms_service.app.crud.energy_iot.meter_readings_crud import check_monotonic
from bms_service.app.models.energy_iot.meters import Meter
from bms_service.app.schemas.energy_iot.meters_schemas import MeterCreate


@pytest.fixture
def meter(db, org, building, unit):
    return meters_crud.create(db, org.id, MeterCreate(
        building_id=building.id, unit_id=unit.id, meter_type="electricity",
        meter_number="EEU-0001", unit="kwh"))


def _reading(client, meter, value, when=None, **extra):
    body = {"meterId": str(meter.id), "reading": value, **extra}
    if when:
        body["readingDate"] = when.isoformat()
    return client.post("/api/meter-readings", json=body)


def test_check_monotonic_message():
    with pytest.raises(ValueError) as exc:
        check_monotonic(90, 100)
    assert str(exc.value) == (
        "Reading (90) must be greater than or equal to last reading (100). "
        "Set allowDecrease=true for corrections.")
    check_monotonic(90, 100, allow_decrease=True)
    check_monotonic(5, None)


def test_create_meter(login, building):
    response = login("FACILITY_MANAGER").post("/api/meters", json={
        "buildingId": str(building.id), "meterType": "water",
        "meterNumber": "AAWSA-77", "unit": "cubic_meter"})
    assert response.status_code == 201
    body = response.json()
    assert body["meterType"] == "water"
    assert body["lastReading"] is None


def test_duplicate_meter_number(login, building, meter):
    response = login("FACILITY_MANAGER").post("/api/meters", json={
        "buildingId": str(building.id), "meterType": "electricity",
        "meterNumber": "EEU-0001", "unit": "kwh"})
    assert response.status_code == 409
    assert response.json() == {"error": "Meter number already exists in this organization"}


def test_readings_update_last_reading(login, db, meter):
    client = login("TECHNICIAN")
    assert _reading(client, meter, 1200).status_code == 201
    assert _reading(client, meter, 1350).status_code == 201

    db.expire_all()
    assert db.get(Meter, meter.id).last_reading == 1350


def test_decreasing_reading_is_rejected(login, meter):
    client = login("TECHNICIAN")
    _reading(client, meter, 1200)
    response = _reading(client, meter, 1100)
    assert response.status_code == 400
    assert "Set allowDecrease=true for corrections" in response.json()["error"]

    assert _reading(client, meter, 1100, allowDecrease=True).status_code == 201


def test_negative_reading_is_rejected(login, meter):
    response = _reading(login("TECHNICIAN"), meter, -1)
    assert response.status_code == 400
    assert response.json() == {"error": "reading must be a non-negative number"}


def test_consumption_over_range(login, meter):
    client = login("TECHNICIAN")
    start = utc_now() - timedelta(days=30)
    _reading(client, meter, 1000, start)
    _reading(client, meter, 1180.5, start + timedelta(days=10))
    _reading(client, meter, 1420.25, start + timedelta(days=20))

    response = client.get(f"/api/meters/{meter.id}/consumption", params={
        "startDate": (start - timedelta(days=1)).isoformat(),
        "endDate": utc_now().isoformat(),
    })
    assert response.status_code == 200
    body = response.json()
    assert body["consumption"] == 420.25
    assert body["unit"] == "kwh"


def test_consumption_needs_two_readings(login, meter):
    client = login("TECHNICIAN")
    _reading(client, meter, 1000)
    body = client.get(f"/api/meters/{meter.id}/consumption", params={
        "startDate": (utc_now() - timedelta(days=1)).isoformat(),
        "endDate": (utc_now() + timedelta(days=1)).isoformat(),
    }).json()
    assert body["consumption"] is None


def test_consumption_rejects_inverted_range(login, meter):
    response = login("TECHNICIAN").get(f"/api/meters/{meter.id}/consumption", params={
        "startDate": utc_now().isoformat(),
        "endDate": (utc_now() - timedelta(days=2)).isoformat(),
    })
    assert response.status_code == 400
    assert response.json() == {"error": "endDate must be after startDate"}


def test_deleting_latest_reading_restores_previous(login, db, meter):
    client = login("TECHNICIAN")
    earlier = utc_now() - timedelta(days=5)
    _reading(client, meter, 500, earlier)
    latest = _reading(client, meter, 650).json()

    response = client.delete(f"/api/meter-readings/{latest['id']}")
    assert response.json() == {"message": "Meter reading deleted"}

    db.expire_all()
    refreshed = db.get(Meter, meter.id)
    assert refreshed.last_reading == 500
    assert refreshed.last_reading_date == earlier


def test_reading_for_foreign_meter(login, meter):
    response = _reading(login("OTHER_ADMIN"), meter, 10)
    assert response.status_code == 403


def _two_readings(client, meter):
    start = utc_now() - timedelta(days=10)
    first = _reading(client, meter, 100, start).json()
    second = _reading(client, meter, 200, start + timedelta(days=5)).json()
    return start, first, second


def test_correcting_older_reading_between_neighbours(login, db, meter):
    client = login("TECHNICIAN")
    _, first, _ = _two_readings(client, meter)

    response = client.patch(f"/api/meter-readings/{first['id']}", json={"reading": 150})
    assert response.status_code == 200, response.text
    assert response.json()["reading"] == 150

    db.expire_all()
    assert db.get(Meter, meter.id).last_reading == 200


def test_older_reading_cannot_exceed_next(login, meter):
    client = login("TECHNICIAN")
    _, first, _ = _two_readings(client, meter)

    response = client.patch(f"/api/meter-readings/{first['id']}", json={"reading": 250})
    assert response.status_code == 400
    assert response.json() == {"error": (
        "Reading (250) must be less than or equal to the next reading (200). "
        "Set allowDecrease=true for corrections.")}

    allowed = client.patch(f"/api/meter-readings/{first['id']}",
                           json={"reading": 250, "allowDecrease": True})
    assert allowed.status_code == 200


def test_moving_reading_date_past_neighbour_is_rejected(login, db, meter):
    client = login("TECHNICIAN")
    start, _, second = _two_readings(client, meter)

    response = client.patch(f"/api/meter-readings/{second['id']}", json={
        "readingDate": (start - timedelta(days=1)).isoformat()})
    assert response.status_code == 400
    assert "must be less than or equal to the next reading (100)" in response.json()["error"]

    db.expire_all()
    assert db.get(Meter, meter.id).last_reading == 200


def test_moving_reading_date_within_neighbours(login, meter):
    client = login("TECHNICIAN")
    start, _, second = _two_readings(client, meter)

    response = client.patch(f"/api/meter-readings/{second['id']}", json={
        "readingDate": (start + timedelta(days=2)).isoformat()})
    assert response.status_code == 200


def test_reading_date_cannot_be_cleared(login, meter):
    client = login("TECHNICIAN")
    _, first, _ = _two_readings(client, meter)

    response = client.patch(f"/api/meter-readings/{first['id']}", json={"readingDate": None})
    assert response.status_code == 400
    assert response.json() == {"error": "readingDate cannot be empty"}
