import pytest

from bms_service.app.crud.financials import payments_crud
from bms_service.app.crud.leasing_tenants import tenants_crud
from bms_service.app.models.financials.invoices import Invoice
from bms_service.app.schemas.financials.payments_schemas import ChapaInitiateRequest
from bms_service.app.schemas.leasing_tenants.tenants_schemas import TenantCreate
from shared.utils import chapa_client
from shared.utils.chapa_client import ChapaClient, ChapaError


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload


def _payment_body(invoice, **overrides):
    body = {
        "invoiceId": str(invoice.id),
        "tenantId": str(invoice.tenant_id),
        "amount": invoice.total,
        "paymentMethod": "telebirr",
        "referenceNumber": "TB-0001",
    }
    body.update(overrides)
    return body


def _invoice_status(db, invoice):
    db.expire_all()
    return db.get(Invoice, invoice.id).status


def test_full_payment_marks_invoice_paid(login, db, invoice):
    response = login("ACCOUNTANT").post("/api/payments", json=_payment_body(invoice))
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "completed"
    assert body["reconciliationStatus"] == "pending"
    assert _invoice_status(db, invoice) == "paid"


def test_partial_payments_accumulate(login, db, invoice):
    client = login("ACCOUNTANT")
    client.post("/api/payments", json=_payment_body(invoice, amount=10000))
    assert _invoice_status(db, invoice) == "sent"

    client.post("/api/payments", json=_payment_body(invoice, amount=18750,
                                                    referenceNumber="TB-0002"))
    assert _invoice_status(db, invoice) == "paid"


def test_pending_payment_does_not_settle_invoice(login, db, invoice):
    client = login("ACCOUNTANT")
    payment = client.post("/api/payments", json=_payment_body(invoice, status="pending")).json()
    assert _invoice_status(db, invoice) == "sent"

    response = client.patch(f"/api/payments/{payment['id']}", json={"status": "completed"})
    assert response.json()["status"] == "completed"
    assert _invoice_status(db, invoice) == "paid"


def test_refund_reopens_invoice(login, db, invoice):
    client = login("ACCOUNTANT")
    payment = client.post("/api/payments", json=_payment_body(invoice)).json()

    response = client.post(f"/api/payments/{payment['id']}/refund", json={"reason": "Duplicate"})
    assert response.status_code == 200
    assert response.json()["status"] == "refunded"
    assert response.json()["notes"] == "Refund: Duplicate"
    assert _invoice_status(db, invoice) == "sent"

    again = client.post(f"/api/payments/{payment['id']}/refund", json={})
    assert again.status_code == 400
    assert again.json() == {"error": "Only completed payments can be refunded"}


def test_duplicate_reference_conflicts(login, invoice):
    client = login("ACCOUNTANT")
    client.post("/api/payments", json=_payment_body(invoice, amount=100))
    response = client.post("/api/payments", json=_payment_body(invoice, amount=100))
    assert response.status_code == 409
    assert response.json() == {"error": "Payment with this reference number already exists"}


def test_amount_must_be_positive(login, invoice):
    response = login("ACCOUNTANT").post("/api/payments", json=_payment_body(invoice, amount=0))
    assert response.status_code == 400
    assert response.json() == {"error": "Payment amount must be greater than zero"}


def test_invoice_must_belong_to_tenant(login, db, org, invoice):
    other = tenants_crud.create(db, org.id, TenantCreate(
        first_name="Dawit", last_name="Bekele", primary_phone="+251911000077"))
    response = login("ACCOUNTANT").post("/api/payments",
                                        json=_payment_body(invoice, tenantId=str(other.id)))
    assert response.status_code == 400
    assert response.json() == {"error": "Invoice does not belong to this tenant"}


def test_completed_payment_cannot_be_edited(login, invoice):
    client = login("ACCOUNTANT")
    payment = client.post("/api/payments", json=_payment_body(invoice)).json()

    response = client.patch(f"/api/payments/{payment['id']}", json={"notes": "typo"})
    assert response.json() == {"error": "Only pending payments can be modified"}


def test_delete_refunds_payment(login, db, invoice):
    client = login("ACCOUNTANT")
    payment = client.post("/api/payments", json=_payment_body(invoice)).json()
    assert _invoice_status(db, invoice) == "paid"

    response = client.delete(f"/api/payments/{payment['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Payment refunded successfully"}
    assert client.get(f"/api/payments/{payment['id']}").json()["status"] == "refunded"
    assert _invoice_status(db, invoice) == "sent"

    again = client.delete(f"/api/payments/{payment['id']}")
    assert again.status_code == 400
    assert again.json() == {"error": "Only completed payments can be refunded"}


def test_delete_needs_reconcile_permission(login, invoice):
    payment = login("ACCOUNTANT").post("/api/payments", json=_payment_body(invoice)).json()
    response = login("TENANT").delete(f"/api/payments/{payment['id']}")
    assert response.status_code == 403


def test_reconciliation_queue_and_bulk(login, invoice):
    client = login("ACCOUNTANT")
    done = client.post("/api/payments", json=_payment_body(invoice, amount=500)).json()
    pending = client.post("/api/payments", json=_payment_body(
        invoice, amount=500, status="pending", referenceNumber="TB-0009")).json()

    queue = client.get("/api/payments/reconciliation").json()
    assert [p["id"] for p in queue["payments"]] == [done["id"]]

    response = client.post("/api/payments/reconciliation", json={
        "paymentIds": [done["id"], pending["id"], "missing"],
        "bankStatementReference": "CBE-2024-11",
        "reconciliationNotes": "November statement",
    })
    assert response.status_code == 200
    body = response.json()
    assert body["summary"] == {"total": 3, "succeeded": 1, "failed": 2}
    assert body["results"][1]["error"] == "Only completed payments can be reconciled"
    assert body["results"][2]["error"] == "Payment not found"

    reconciled = client.get(f"/api/payments/{done['id']}").json()
    assert reconciled["reconciliationStatus"] == "reconciled"
    assert reconciled["notes"] == "[Bulk Reconciliation] November statement"
    assert reconciled["providerResponse"]["bankStatementReference"] == "CBE-2024-11"


def test_bulk_reconcile_requires_ids(login):
    response = login("ACCOUNTANT").post("/api/payments/reconciliation", json={"paymentIds": []})
    assert response.status_code == 400
    assert response.json() == {"error": "paymentIds must be a non-empty list"}


def test_single_reconcile_marks_disputed(login, invoice):
    client = login("ACCOUNTANT")
    payment = client.post("/api/payments", json=_payment_body(invoice, amount=500)).json()
    response = client.patch(f"/api/payments/{payment['id']}/reconcile",
                            json={"reconciliationStatus": "disputed", "notes": "Amount mismatch"})
    assert response.status_code == 200
    assert response.json()["reconciliationStatus"] == "disputed"


def test_reconcile_needs_permission(login):
    assert login("BUILDING_MANAGER").get("/api/payments/reconciliation").status_code == 403


def test_chapa_checkout_in_test_mode(login, db, invoice):
    client = login("ACCOUNTANT")
    response = client.post("/api/payments/chapa/initiate", json={"invoiceId": str(invoice.id)})
    assert response.status_code == 200
    body = response.json()
    assert body["testMode"] is True
    assert body["txRef"].startswith(f"CHAPA-{invoice.id}-")
    assert "mock=true" in body["checkoutUrl"]

    verified = client.get(f"/api/payments/chapa/verify/{body['txRef']}").json()
    assert verified["verified"] is True
    assert verified["payment"]["status"] == "completed"
    assert verified["payment"]["amount"] == 28750
    assert _invoice_status(db, invoice) == "paid"


def test_chapa_rejects_paid_invoice(login, invoice):
    client = login("ACCOUNTANT")
    client.patch(f"/api/invoices/{invoice.id}/status", json={"status": "paid"})
    response = client.post("/api/payments/chapa/initiate", json={"invoiceId": str(invoice.id)})
    assert response.status_code == 400
    assert response.json() == {"error": "Invoice is already paid"}


def test_chapa_verify_unknown_reference(login):
    response = login("ACCOUNTANT").get("/api/payments/chapa/verify/CHAPA-unknown")
    assert response.status_code == 404


def test_chapa_live_failure_marks_payment_failed(db, org, invoice, monkeypatch):
    live = ChapaClient(secret_key="CHASECK-live-key", base_url="https://chapa.example")
    calls = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        calls["post"] = (url, json, headers)
        return FakeResponse({"status": "success",
                             "data": {"checkout_url": "https://checkout.chapa.co/abc"}})

    def fake_get(url, headers=None, timeout=None):
        calls["get"] = url
        return FakeResponse({"status": "success", "message": "Payment failed",
                             "data": {"status": "failed"}})

    monkeypatch.setattr(chapa_client.requests, "post", fake_post)
    monkeypatch.setattr(chapa_client.requests, "get", fake_get)

    started = payments_crud.initiate_chapa(
        db, org.id, ChapaInitiateRequest(invoice_id=invoice.id, amount=1000), client=live)
    assert started["checkout_url"] == "https://checkout.chapa.co/abc"
    assert started["test_mode"] is False
    url, body, headers = calls["post"]
    assert url == "https://chapa.example/transaction/initialize"
    assert body["amount"] == "1000.00"
    assert headers["Authorization"] == "Bearer CHASECK-live-key"

    result = payments_crud.verify_chapa(db, org.id, started["tx_ref"], client=live)
    assert calls["get"].endswith(started["tx_ref"])
    assert result["verified"] is False
    assert result["payment"].status == "failed"
    assert result["payment"].failure_reason == "Payment failed"
    assert result["payment"].retry_attempts == 1


def test_chapa_provider_error_raises(monkeypatch):
    live = ChapaClient(secret_key="CHASECK-live-key")
    monkeypatch.setattr(chapa_client.requests, "post",
                        lambda *a, **kw: FakeResponse({"status": "failed", "message": "Invalid currency"}, 400))
    with pytest.raises(ChapaError, match="Invalid currency"):
        live.initialize(amount=10, currency="XYZ", tx_ref="CHAPA-1-1", email=None,
                        first_name="A", last_name="B", return_url="http://localhost/return")
