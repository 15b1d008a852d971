import pytest

from bms_service.app.crud.leasing_tenants.rent_crud import calculate_unit_rent, merge_policy
from bms_service.app.models.space_sites.units import Unit
from bms_service.app.models.leasing_tenants.leases import Lease
from bms_service.app.models.space_sites.buildings import Building

POLICY = merge_policy(None, {
    "base_rate_per_sqm": 500,
    "decrement_per_floor": 20,
    "ground_floor_multiplier": 1.2,
    "min_rate_per_sqm": 400,
    "floor_overrides": [{"floor": 5, "rate_per_sqm": 450}, {"floor": 7, "rate_per_sqm": 350}],
})


@pytest.mark.parametrize("floor, expected_rate, expected_source", [
    (0, 600, "policy"),
    (1, 480, "policy"),
    (3, 440, "policy"),
    (5, 450, "floor_override"),
    (7, 400, "floor_override"),
    (9, 400, "policy"),
])
def test_floor_rates(floor, expected_rate, expected_source):
    pricing = calculate_unit_rent(Unit(unit_number="X", floor=floor, area=10), POLICY)
    assert pricing["rate_per_sqm"] == expected_rate
    assert pricing["rent"] == expected_rate * 10
    assert pricing["rate_source"] == expected_source


def test_flat_override_wins():
    unit = Unit(unit_number="A", floor=5, area=10, flat_rent_override=7000,
                rate_per_sqm_override=900)
    pricing = calculate_unit_rent(unit, POLICY)
    assert pricing == {"rate_per_sqm": None, "rent": 7000, "rate_source": "flat_override"}


def test_unit_rate_override_beats_floor_override():
    unit = Unit(unit_number="B", floor=5, area=10, rate_per_sqm_override=900)
    pricing = calculate_unit_rent(unit, POLICY)
    assert pricing["rent"] == 9000
    assert pricing["rate_source"] == "unit_override"


def test_missing_area_cannot_be_priced_by_rate():
    with pytest.raises(ValueError, match="has no area"):
        calculate_unit_rent(Unit(unit_number="C", floor=2), POLICY)


def test_missing_base_rate():
    with pytest.raises(ValueError, match="baseRatePerSqm"):
        calculate_unit_rent(Unit(unit_number="D", floor=2, area=10), merge_policy(None, {}))


def test_preview_does_not_persist(login, db, building, lease):
    response = login("ORG_ADMIN").post("/api/rent/bulk-update", json={
        "buildingId": str(building.id),
        "policy": {"baseRatePerSqm": 600},
    })
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Preview only"
    assert body["count"] == 1
    result = body["results"][0]
    assert result["oldRent"] == 25000
    # floor 1: 600 less one 20 step, times 50 sqm
    assert result["newRent"] == 29000

    db.expire_all()
    assert db.get(Lease, lease.id).rent_amount == 25000
    assert db.get(Building, building.id).rent_policy["base_rate_per_sqm"] == 500


def test_apply_updates_leases(login, db, building, unit, lease):
    response = login("ORG_ADMIN").post("/api/rent/bulk-update", json={
        "buildingId": str(building.id),
        "apply": True,
        "unitOverrides": [{"unitId": str(unit.id), "ratePerSqmOverride": 520}],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Rent updates applied"
    assert body["results"][0]["rateSource"] == "unit_override"

    db.expire_all()
    updated = db.get(Lease, lease.id)
    assert updated.rent_amount == 26000
    assert updated.rent_breakdown["previous_rent"] == 25000
    assert updated.rent_breakdown["rate_source"] == "unit_override"
    assert db.get(Unit, unit.id).rent_amount == 26000


def test_floor_filter_excludes_units(login, building, lease):
    response = login("ORG_ADMIN").post("/api/rent/bulk-update", json={
        "buildingId": str(building.id),
        "floorFilter": {"from": 2},
    })
    assert response.json()["count"] == 0


def test_rent_update_requires_lease_permission(login, building):
    response = login("ACCOUNTANT").post("/api/rent/bulk-update",
                                        json={"buildingId": str(building.id)})
    assert response.status_code == 403
