from datetime import datetime, timedelta

import pytest

from shared.core.database import utc_now
from bms_service.app.crud.maintenance_assets.assets_crud import (
    calculate_depreciation, reliability_score
)
from bms_service.app.models.maintenance_assets.assets import Asset

PURCHASED = datetime(2020, 1, 1)


def _asset(**depreciation):
    return Asset(name="Chiller", asset_type="hvac", purchase_price=100000,
                 purchase_date=PURCHASED, depreciation=depreciation)


def test_straight_line_depreciation():
    result = calculate_depreciation(
        _asset(method="straight-line", useful_life_years=10, salvage_value=10000),
        PURCHASED + timedelta(days=365.25 * 3))
    assert result == {
        "method": "straight-line",
        "annual_depreciation": 9000,
        "accumulated_depreciation": 27000,
        "current_value": 73000,
        "years_elapsed": 3,
    }


def test_straight_line_stops_at_salvage():
    result = calculate_depreciation(
        _asset(useful_life_years=5, salvage_value=20000), PURCHASED + timedelta(days=365.25 * 9))
    assert result["current_value"] == 20000


def test_declining_balance_depreciation():
    result = calculate_depreciation(
        _asset(method="declining-balance", useful_life_years=10, salvage_value=10000),
        PURCHASED + timedelta(days=365.25 * 2))
    assert result["current_value"] == 64000
    assert result["accumulated_depreciation"] == 36000
    assert result["annual_depreciation"] == 12800


def test_useful_life_required():
    with pytest.raises(ValueError, match="Useful life must be greater than zero"):
        calculate_depreciation(_asset(useful_life_years=0))


@pytest.mark.parametrize("count, downtime, cost, expected", [
    (0, 0, 0, 100),
    (15, 12, 15000, 68),
    (30, 40, 30000, 0),
])
def test_reliability_score(count, downtime, cost, expected):
    assert reliability_score(count, 12, downtime, cost) == expected


@pytest.fixture
def asset_id(login, building):
    response = login("ORG_ADMIN").post("/api/assets", json={
        "buildingId": str(building.id),
        "name": "Passenger lift A",
        "assetType": "elevator",
        "purchaseDate": "2022-01-01T00:00:00",
        "purchasePrice": 1200000,
        "depreciation": {"method": "straight-line", "usefulLifeYears": 20, "salvageValue": 200000},
        "maintenanceSchedule": {"frequency": "monthly"},
    })
    assert response.status_code == 201, response.text
    assert response.json()["currentValue"] == 1200000
    return response.json()["id"]


def test_depreciation_endpoint(login, asset_id):
    response = login("ACCOUNTANT").get(f"/api/assets/{asset_id}/depreciation",
                                       params={"asOf": "2024-01-01T12:00:00"})
    assert response.status_code == 200
    body = response.json()
    assert body["method"] == "straight-line"
    assert body["annualDepreciation"] == 50000
    assert body["yearsElapsed"] == 2


def test_history_updates_schedule(login, asset_id):
    client = login("TECHNICIAN")
    next_due = (utc_now() + timedelta(days=30)).replace(microsecond=0)
    response = client.post(f"/api/assets/{asset_id}/history", json={
        "maintenanceType": "preventive",
        "description": "Cable inspection",
        "cost": 2000,
        "partsUsed": [{"name": "Brake pad", "quantity": 2, "cost": 500}],
        "nextMaintenanceDate": next_due.isoformat(),
    })
    assert response.status_code == 201
    assert response.json()["partsUsed"][0]["name"] == "Brake pad"

    asset = client.get(f"/api/assets/{asset_id}").json()
    assert asset["maintenanceSchedule"]["frequency"] == "monthly"
    assert asset["maintenanceSchedule"]["nextMaintenanceDate"] == next_due.isoformat()
    assert asset["maintenanceSchedule"]["lastMaintenanceDate"] is not None

    history = client.get(f"/api/assets/{asset_id}/history").json()
    assert history["total"] == 1


def test_reliability_endpoint(login, asset_id):
    client = login("TECHNICIAN")
    client.post(f"/api/assets/{asset_id}/history", json={
        "maintenanceType": "preventive", "cost": 2000,
        "partsUsed": [{"name": "Brake pad", "quantity": 2, "cost": 500}]})
    client.post(f"/api/assets/{asset_id}/history", json={
        "maintenanceType": "corrective", "cost": 1000, "downtimeHours": 4,
        "performedAt": (utc_now() - timedelta(days=30)).isoformat()})

    response = client.get(f"/api/assets/{asset_id}/reliability")
    assert response.status_code == 200
    body = response.json()
    assert body["totalMaintenanceCount"] == 2
    assert body["countsByType"] == {"preventive": 1, "corrective": 1, "emergency": 0}
    assert body["totalCost"] == 4000
    assert body["averageDowntimeHours"] == 2
    assert body["averageDaysBetweenMaintenance"] == 360
    assert body["reliabilityScore"] == 100


def test_reliability_period_must_be_positive(login, asset_id):
    response = login("TECHNICIAN").get(f"/api/assets/{asset_id}/reliability",
                                       params={"periodMonths": 0})
    assert response.status_code == 400


def test_delete_disposes_asset(login, asset_id):
    client = login("ORG_ADMIN")
    assert client.delete(f"/api/assets/{asset_id}").json() == {"message": "Asset disposed"}
    assert client.get(f"/api/assets/{asset_id}").json()["status"] == "disposed"
