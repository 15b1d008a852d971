from shared.core.permissions import PERMISSIONS, has_any_role_permission, has_permission


def test_read_all_satisfies_read():
    assert has_permission("SUPER_ADMIN", "buildings", "read")
    assert has_permission("SUPER_ADMIN", "invoices", "list")
    assert not has_permission("SUPER_ADMIN", "buildings", "create")


def test_unknown_role_or_module_has_no_permissions():
    assert not has_permission("JANITOR", "buildings", "read")
    assert not has_permission("ORG_ADMIN", "spaceships", "read")
    assert not has_permission("TENANT", "users", "read")


def test_any_role_grants():
    assert has_any_role_permission(["TENANT", "ACCOUNTANT"], "payments", "reconcile")
    assert not has_any_role_permission(["TENANT", "TECHNICIAN"], "payments", "reconcile")
    assert not has_any_role_permission([], "buildings", "read")


def test_every_role_covers_every_module():
    modules = set(PERMISSIONS["ORG_ADMIN"])
    for role, grants in PERMISSIONS.items():
        assert set(grants) == modules, role


def test_route_denies_missing_permission(login):
    client = login("TENANT")
    response = client.post("/api/buildings", json={"name": "Tenant Tower"})
    assert response.status_code == 403
    assert response.json()["error"].startswith("Access denied")


def test_access_control_routes_are_limited_to_managers(login):
    assert login("TECHNICIAN").get("/api/access-control").status_code == 403
    assert login("BUILDING_MANAGER").get("/api/access-control").status_code == 200


def test_system_settings_are_super_admin_only(login):
    assert login("ORG_ADMIN").get("/api/settings/system").status_code == 403
    assert login("SUPER_ADMIN").get("/api/settings/system").status_code == 200
