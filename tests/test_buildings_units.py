def test_create_building_returns_camel_case(login, org):
    response = login("ORG_ADMIN").post("/api/buildings", json={
        "name": "Kazanchis Plaza",
        "buildingType": "commercial",
        "totalFloors": 10,
        "address": {"street": "Ras Desta Damtew St", "city": "Addis Ababa"},
        "rentPolicy": {"baseRatePerSqm": 650, "decrementPerFloor": 15},
    })
    assert response.status_code == 201
    body = response.json()
    assert body["orgId"] == str(org.id)
    assert body["buildingType"] == "commercial"
    assert body["totalFloors"] == 10
    assert body["rentPolicy"]["baseRatePerSqm"] == 650
    assert "building_type" not in body


def test_manager_must_belong_to_same_org(login, users):
    response = login("ORG_ADMIN").post("/api/buildings", json={
        "name": "Foreign Managed", "managerId": str(users["OTHER_ADMIN"].id)})
    assert response.status_code == 403
    assert response.json() == {"error": "Manager does not belong to the same organization"}


def test_building_from_other_org_is_hidden(login, building):
    client = login("ORG_ADMIN")
    assert client.get(f"/api/buildings/{building.id}").status_code == 200

    other = login("OTHER_ADMIN")
    response = other.get(f"/api/buildings/{building.id}")
    assert response.status_code == 404
    assert response.json() == {"error": "Building not found"}


def test_building_list_and_overview(login, building, unit):
    client = login("BUILDING_MANAGER")
    body = client.get("/api/buildings").json()
    assert body["total"] == 1
    assert body["buildings"][0]["name"] == "Bole Tower"

    overview = client.get("/api/buildings/overview").json()
    assert overview["totalBuildings"] == 1
    assert overview["totalUnits"] == 1
    assert overview["occupiedUnits"] == 0


def test_delete_building_marks_inactive(login, building):
    response = login("ORG_ADMIN").delete(f"/api/buildings/{building.id}")
    assert response.status_code == 200
    assert response.json()["status"] == "inactive"


def test_create_unit(login, building):
    response = login("ORG_ADMIN").post("/api/units", json={
        "buildingId": str(building.id), "unitNumber": "202", "floor": 2, "area": 80})
    assert response.status_code == 201
    body = response.json()
    assert body["unitNumber"] == "202"
    assert body["status"] == "available"
    assert body["unitType"] == "apartment"


def test_duplicate_unit_number_conflicts(login, building, unit):
    response = login("ORG_ADMIN").post("/api/units", json={
        "buildingId": str(building.id), "unitNumber": "101"})
    assert response.status_code == 409
    assert response.json() == {"error": 'Unit number "101" already exists in this building'}


def test_unit_in_foreign_building_is_rejected(login, building):
    response = login("OTHER_ADMIN").post("/api/units", json={
        "buildingId": str(building.id), "unitNumber": "900"})
    assert response.status_code == 403


def test_negative_area_is_invalid(login, building):
    response = login("ORG_ADMIN").post("/api/units", json={
        "buildingId": str(building.id), "unitNumber": "303", "area": -5})
    assert response.status_code == 400
    assert "area" in response.json()["error"]


def test_list_units_by_building(login, building, unit):
    body = login("TECHNICIAN").get("/api/units", params={"buildingId": str(building.id)}).json()
    assert body["total"] == 1
    assert body["units"][0]["id"] == str(unit.id)


def test_unit_with_active_lease_cannot_be_deleted(login, unit, lease):
    response = login("ORG_ADMIN").delete(f"/api/units/{unit.id}")
    assert response.status_code == 400
    assert response.json() == {"error": "Unit has an active lease and cannot be deleted"}


def test_delete_unit_moves_it_to_maintenance(login, unit):
    response = login("ORG_ADMIN").delete(f"/api/units/{unit.id}")
    assert response.status_code == 200
    assert response.json()["status"] == "maintenance"
