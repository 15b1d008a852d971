from datetime import timedelta

import pytest

from shared.core.database import utc_now
from bms_service.app.crud.financials.invoices_crud import calculate_totals, generate_invoice_number
from bms_service.app.crud.leasing_tenants import tenants_crud
from bms_service.app.schemas.leasing_tenants.tenants_schemas import TenantCreate


def _invoice_body(lease, **overrides):
    now = utc_now()
    body = {
        "leaseId": str(lease.id),
        "tenantId": str(lease.tenant_id),
        "unitId": str(lease.unit_id),
        "dueDate": (now + timedelta(days=15)).isoformat(),
        "periodStart": now.isoformat(),
        "periodEnd": (now + timedelta(days=30)).isoformat(),
        "items": [
            {"description": "Monthly rent", "amount": 20000, "type": "rent"},
            {"description": "Service charge", "amount": 1500.55, "type": "charge"},
        ],
        "vatRate": 15,
    }
    body.update(overrides)
    return body


def test_calculate_totals_with_vat():
    totals = calculate_totals([{"amount": 1000}, {"amount": 250}], vat_rate=15)
    assert totals == {"subtotal": 1250, "tax": 187.5, "total": 1437.5}


def test_explicit_tax_overrides_vat_rate():
    totals = calculate_totals([{"amount": 1000}], tax=50, vat_rate=15)
    assert totals == {"subtotal": 1000, "tax": 50, "total": 1050}


def test_invoice_numbers_are_sequential_per_year(db, org, invoice):
    year = utc_now().year
    assert invoice.invoice_number == f"INV-{year}-001"
    assert generate_invoice_number(db, org.id) == f"INV-{year}-002"
    assert generate_invoice_number(db, org.id, year + 1) == f"INV-{year + 1}-001"


def test_create_invoice_computes_totals(login, lease, invoice):
    response = login("ACCOUNTANT").post("/api/invoices", json=_invoice_body(lease))
    assert response.status_code == 201
    body = response.json()
    assert body["invoiceNumber"].endswith("-002")
    assert body["status"] == "draft"
    assert body["subtotal"] == 21500.55
    assert body["tax"] == 3225.08
    assert body["total"] == 24725.63


def test_invoice_requires_items(login, lease):
    response = login("ACCOUNTANT").post("/api/invoices", json=_invoice_body(lease, items=[]))
    assert response.status_code == 400
    assert response.json() == {"error": "Invoice must have at least one item"}


def test_invoice_tenant_must_match_lease(login, lease, db, org):
    stranger = tenants_crud.create(db, org.id, TenantCreate(
        first_name="Meron", last_name="Girma", primary_phone="+251911000055"))
    response = login("ACCOUNTANT").post("/api/invoices",
                                        json=_invoice_body(lease, tenantId=str(stranger.id)))
    assert response.status_code == 400
    assert response.json() == {"error": "Tenant does not match the lease"}


def test_only_draft_invoices_are_editable(login, lease, invoice):
    client = login("ACCOUNTANT")
    response = client.patch(f"/api/invoices/{invoice.id}", json={"notes": "Late"})
    assert response.status_code == 400
    assert response.json() == {"error": "Only draft invoices can be modified"}

    draft = client.post("/api/invoices", json=_invoice_body(lease)).json()
    response = client.patch(f"/api/invoices/{draft['id']}",
                            json={"items": [{"description": "Rent", "amount": 10000}]})
    assert response.status_code == 200
    assert response.json()["total"] == 11500


def test_status_only_patch_is_allowed_after_draft(login, invoice):
    response = login("ACCOUNTANT").patch(f"/api/invoices/{invoice.id}",
                                         json={"status": "pending"})
    assert response.status_code == 200
    assert response.json()["status"] == "pending"


def test_paid_invoice_cannot_be_cancelled(login, invoice):
    client = login("ACCOUNTANT")
    paid = client.patch(f"/api/invoices/{invoice.id}/status", json={"status": "paid"})
    assert paid.json()["paidAt"] is not None

    response = client.patch(f"/api/invoices/{invoice.id}/status", json={"status": "cancelled"})
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot cancel a paid invoice"}


def test_mark_overdue(login, invoice):
    client = login("ACCOUNTANT")
    assert client.post("/api/invoices/mark-overdue").json() == {"updated": 0}

    as_of = (utc_now() + timedelta(days=30)).isoformat()
    assert client.post("/api/invoices/mark-overdue", params={"asOf": as_of}).json() == {"updated": 1}
    assert client.get(f"/api/invoices/{invoice.id}").json()["status"] == "overdue"


def test_delete_draft_only(login, lease, invoice):
    client = login("ACCOUNTANT")
    response = client.delete(f"/api/invoices/{invoice.id}")
    assert response.status_code == 400

    draft = client.post("/api/invoices", json=_invoice_body(lease)).json()
    assert client.delete(f"/api/invoices/{draft['id']}").json() == {"message": "Invoice deleted"}


def test_invoice_overview(login, invoice):
    overview = login("ACCOUNTANT").get("/api/invoices/overview").json()
    assert overview["sent"] == {"count": 1, "total": 28750}


def test_invoice_pdf_download(login, invoice):
    response = login("ACCOUNTANT").get(f"/api/invoices/{invoice.id}/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert f'filename="{invoice.invoice_number}.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


@pytest.mark.parametrize("role", ["TECHNICIAN", "SECURITY"])
def test_staff_without_invoice_rights_cannot_create(login, lease, role):
    assert login(role).post("/api/invoices", json=_invoice_body(lease)).status_code == 403
