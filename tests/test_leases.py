from datetime import timedelta

from shared.core.database import utc_now
from bms_service.app.crud.leasing_tenants import tenants_crud
from bms_service.app.schemas.leasing_tenants.tenants_schemas import TenantCreate


def _lease_body(tenant, unit, **overrides):
    body = {
        "tenantId": str(tenant.id),
        "unitId": str(unit.id),
        "startDate": utc_now().isoformat(),
        "rentAmount": 24000,
    }
    body.update(overrides)
    return body


def test_create_lease_occupies_unit(login, db, tenant, unit):
    response = login("ORG_ADMIN").post("/api/leases", json=_lease_body(
        tenant, unit, additionalCharges=[{"name": "Parking", "amount": 1500}]))
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "active"
    assert body["dueDay"] == 1
    assert body["additionalCharges"][0]["frequency"] == "monthly"

    db.refresh(unit)
    assert unit.status == "occupied"


def test_second_active_lease_conflicts(login, tenant, unit, lease):
    response = login("ORG_ADMIN").post("/api/leases", json=_lease_body(tenant, unit))
    assert response.status_code == 409
    assert response.json() == {"error": "Unit already has an active lease"}


def test_pending_lease_can_share_unit(login, tenant, unit, lease):
    response = login("ORG_ADMIN").post("/api/leases",
                                       json=_lease_body(tenant, unit, status="pending"))
    assert response.status_code == 201


def test_end_date_must_follow_start(login, tenant, unit):
    start = utc_now()
    response = login("ORG_ADMIN").post("/api/leases", json=_lease_body(
        tenant, unit, startDate=start.isoformat(),
        endDate=(start - timedelta(days=1)).isoformat()))
    assert response.status_code == 400
    assert response.json() == {"error": "End date must be after start date"}


def test_due_day_range(login, tenant, unit):
    response = login("ORG_ADMIN").post("/api/leases", json=_lease_body(tenant, unit, dueDay=32))
    assert response.status_code == 400
    assert response.json() == {"error": "dueDay must be between 1 and 31"}


def test_tenant_from_other_org_rejected(login, db, other_org, unit):
    outsider = tenants_crud.create(db, other_org.id, TenantCreate(
        first_name="Sara", last_name="Alemu", primary_phone="+251911000099"))
    response = login("ORG_ADMIN").post("/api/leases", json=_lease_body(outsider, unit))
    assert response.status_code == 403
    assert response.json() == {"error": "Tenant does not belong to the same organization"}


def test_terminate_frees_unit(login, db, unit, lease):
    response = login("ORG_ADMIN").post(f"/api/leases/{lease.id}/terminate",
                                       json={"reason": "Tenant relocated"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "terminated"
    assert body["terminationReason"] == "Tenant relocated"
    assert body["terminationDate"] is not None

    db.refresh(unit)
    assert unit.status == "available"


def test_terminate_twice_fails(login, lease):
    client = login("ORG_ADMIN")
    client.post(f"/api/leases/{lease.id}/terminate", json={})
    response = client.post(f"/api/leases/{lease.id}/terminate", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Lease is already terminated"}


def test_update_status_to_expired_frees_unit(login, db, unit, lease):
    response = login("BUILDING_MANAGER").patch(f"/api/leases/{lease.id}",
                                               json={"status": "expired"})
    assert response.status_code == 200
    db.refresh(unit)
    assert unit.status == "available"


def test_lease_with_invoices_cannot_be_deleted(login, invoice):
    response = login("ORG_ADMIN").delete(f"/api/leases/{invoice.lease_id}")
    assert response.status_code == 400
    assert "terminate it instead" in response.json()["error"]


def test_delete_lease(login, db, unit, lease):
    response = login("ORG_ADMIN").delete(f"/api/leases/{lease.id}")
    assert response.json() == {"message": "Lease deleted"}
    db.refresh(unit)
    assert unit.status == "available"


def test_tenant_list_and_overview(login, tenant, lease):
    client = login("ORG_ADMIN")
    body = client.get("/api/tenants", params={"search": "Abebe"}).json()
    assert body["total"] == 1
    assert body["tenants"][0]["primaryPhone"] == "+251911000001"

    overview = client.get("/api/tenants/overview").json()
    assert overview["totalTenants"] == 1
