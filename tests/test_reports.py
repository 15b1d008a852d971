from datetime import timedelta

import pytest

from shared.core.database import utc_now
from bms_service.app.crud.financials import invoices_crud
from bms_service.app.crud.financials.reports_crud import bucket_for
from bms_service.app.schemas.financials.invoices_schemas import InvoiceCreate


@pytest.mark.parametrize("days, bucket", [
    (0, "current"), (30, "current"), (31, "31-60"), (60, "31-60"),
    (61, "61-90"), (90, "61-90"), (91, "90+"), (400, "90+"),
])
def test_bucket_boundaries(days, bucket):
    assert bucket_for(days) == bucket


def _past_due_invoice(db, org, lease, days_ago, amount):
    due = utc_now() - timedelta(days=days_ago)
    return invoices_crud.create(db, org.id, InvoiceCreate(
        lease_id=lease.id, tenant_id=lease.tenant_id, unit_id=lease.unit_id,
        due_date=due, period_start=due - timedelta(days=30), period_end=due,
        items=[{"description": "Service charge", "amount": amount, "type": "charge"}],
        status="sent",
    ))


def test_aging_report_buckets(login, db, org, lease, invoice):
    _past_due_invoice(db, org, lease, 45, 4000)
    _past_due_invoice(db, org, lease, 120, 1500)
    client = login("ACCOUNTANT")
    client.post("/api/payments", json={
        "invoiceId": str(invoice.id), "tenantId": str(invoice.tenant_id),
        "amount": 10000, "paymentMethod": "cbe_birr", "referenceNumber": "CBE-77"})

    response = client.get("/api/reports/aging")
    assert response.status_code == 200
    report = response.json()
    by_key = {b["bucket"]: b for b in report["buckets"]}
    assert [b["bucket"] for b in report["buckets"]] == ["current", "31-60", "61-90", "90+"]
    assert by_key["current"]["total"] == 18750
    assert by_key["current"]["invoices"][0]["daysOverdue"] == 0
    assert by_key["31-60"]["total"] == 4000
    assert by_key["61-90"]["invoiceCount"] == 0
    assert by_key["90+"]["invoices"][0]["daysOverdue"] == 120
    assert report["totalReceivables"] == 24250
    assert report["totalInvoiceCount"] == 3


def test_aging_skips_settled_invoices(login, db, org, lease, invoice):
    client = login("ACCOUNTANT")
    client.post("/api/payments", json={
        "invoiceId": str(invoice.id), "tenantId": str(invoice.tenant_id),
        "amount": invoice.total, "paymentMethod": "telebirr", "referenceNumber": "TB-55"})
    assert client.get("/api/reports/aging").json()["totalInvoiceCount"] == 0


def test_financial_report(login, invoice):
    client = login("ACCOUNTANT")
    client.post("/api/payments", json={
        "invoiceId": str(invoice.id), "tenantId": str(invoice.tenant_id),
        "amount": 10000, "paymentMethod": "telebirr", "referenceNumber": "TB-56"})

    report = client.get("/api/reports/financial").json()
    assert report["totalInvoiced"] == 28750
    assert report["totalCollected"] == 10000
    assert report["outstanding"] == 18750
    assert report["collectionRate"] == 34.78
    assert report["paymentsByMethod"] == {"telebirr": 10000}
    assert report["invoicesByStatus"] == {"sent": 1}


def test_occupancy_report(login, building, lease):
    report = login("BUILDING_MANAGER").get("/api/reports/occupancy").json()
    assert report["totalUnits"] == 1
    assert report["occupiedUnits"] == 1
    assert report["occupancyRate"] == 100
    assert report["buildings"][0]["buildingName"] == "Bole Tower"


def test_financial_reports_need_permission(login):
    assert login("BUILDING_MANAGER").get("/api/reports/aging").status_code == 403
    assert login("SECURITY").get("/api/reports/financial").status_code == 403


def test_export_aging_csv(login, invoice):
    response = login("ACCOUNTANT").get("/api/reports/export/aging", params={"format": "csv"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="aging_report_')
    assert disposition.endswith('.csv"')

    lines = response.text.strip().splitlines()
    assert lines[0] == "Bucket,Invoice,Tenant,Due Date,Days Overdue,Outstanding"
    assert invoice.invoice_number in lines[1]


def test_export_invoices_pdf(login, invoice):
    response = login("ORG_ADMIN").get("/api/reports/export/invoices", params={"format": "pdf"})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_export_rejects_unknown_report(login):
    response = login("ACCOUNTANT").get("/api/reports/export/parking")
    assert response.status_code == 400
    assert response.json() == {"error": "Unknown report: parking"}


def test_export_rejects_unknown_format(login):
    response = login("ACCOUNTANT").get("/api/reports/export/payments", params={"format": "xml"})
    assert response.status_code == 400
    assert response.json() == {"error": "Unsupported export format: xml"}


def test_export_needs_permission(login):
    assert login("TECHNICIAN").get("/api/reports/export/payments").status_code == 403
