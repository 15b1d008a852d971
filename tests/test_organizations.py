def test_super_admin_creates_organization(login):
    client = login("SUPER_ADMIN")
    response = client.post("/api/organizations", json={
        "name": "Piassa Holdings",
        "code": "PIASSA",
        "contactInfo": {"email": "info@piassaholdings.com", "phone": "+251111000000"},
    })
    assert response.status_code == 201
    body = response.json()
    assert body["code"] == "PIASSA"
    assert body["status"] == "active"
    assert body["contactInfo"]["email"] == "info@piassaholdings.com"


def test_duplicate_organization_code_conflicts(login):
    client = login("SUPER_ADMIN")
    response = client.post("/api/organizations", json={"name": "Addis Again", "code": "ADDIS"})
    assert response.status_code == 409
    assert response.json() == {"error": "Organization code already exists"}


def test_org_admin_cannot_create_organization(login):
    response = login("ORG_ADMIN").post("/api/organizations",
                                       json={"name": "Rogue", "code": "ROGUE"})
    assert response.status_code == 403


def test_org_admin_lists_only_own_organization(login, org):
    response = login("ORG_ADMIN").get("/api/organizations")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["organizations"][0]["id"] == str(org.id)


def test_super_admin_lists_every_organization(login):
    body = login("SUPER_ADMIN").get("/api/organizations").json()
    assert {o["code"] for o in body["organizations"]} == {"ADDIS", "BOLE"}


def test_foreign_organization_is_not_found(login, other_org):
    response = login("ORG_ADMIN").get(f"/api/organizations/{other_org.id}")
    assert response.status_code == 404
    assert response.json() == {"error": "Organization not found"}


def test_deactivate_requires_super_admin(login, org):
    assert login("ORG_ADMIN").delete(f"/api/organizations/{org.id}").status_code == 403

    response = login("SUPER_ADMIN").delete(f"/api/organizations/{org.id}")
    assert response.status_code == 200
    assert response.json()["status"] == "inactive"


def test_organization_settings_are_merged(login):
    client = login("ORG_ADMIN")
    first = client.patch("/api/settings/organization",
                         json={"settings": {"currency": "ETB", "lateFeePercent": 5}})
    assert first.status_code == 200

    second = client.patch("/api/settings/organization", json={"settings": {"lateFeePercent": 7}})
    assert second.json()["settings"] == {"currency": "ETB", "lateFeePercent": 7}

    current = client.get("/api/settings/organization").json()
    assert current["settings"]["lateFeePercent"] == 7


def test_super_admin_without_org_needs_organization_id(login, org):
    client = login("SUPER_ADMIN")
    response = client.get("/api/settings/organization")
    assert response.status_code == 400
    assert response.json() == {"error": "Organization context is required"}

    response = client.get("/api/settings/organization", params={"organizationId": str(org.id)})
    assert response.status_code == 200
    assert response.json()["code"] == "ADDIS"


def test_system_settings_defaults_and_update(login, users):
    client = login("SUPER_ADMIN")
    defaults = client.get("/api/settings/system").json()
    assert defaults["general"]["currency"] == "ETB"

    response = client.patch("/api/settings/system",
                            json={"general": {"system_name": "Addis BMS"}})
    assert response.status_code == 200
    body = response.json()
    assert body["general"]["system_name"] == "Addis BMS"
    assert body["general"]["currency"] == "ETB"
    assert body["updatedBy"] == str(users["SUPER_ADMIN"].id)
