from datetime import timedelta

import pytest

from shared.core.config import settings
from shared.core.database import utc_now
from bms_service.app.crud.energy_iot import meters_crud
from bms_service.app.schemas.energy_iot.meters_schemas import MeterCreate


@pytest.fixture
def meter(db, org, building):
    return meters_crud.create(db, org.id, MeterCreate(
        building_id=building.id, meter_type="water", meter_number="AAWSA-1",
        unit="cubic_meter"))


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


def _body(meter, **overrides):
    start = utc_now() - timedelta(days=30)
    body = {
        "meterId": str(meter.id),
        "utilityType": "water",
        "periodStart": start.isoformat(),
        "periodEnd": utc_now().isoformat(),
        "amount": 1840.5,
        "paymentMethod": "cbe_birr",
    }
    body.update(overrides)
    return body


def test_upload_receipt(login, upload_dir):
    response = login("FACILITY_MANAGER").post(
        "/api/utility-payments/upload",
        files={"file": ("water-bill.pdf", b"%PDF-1.4 receipt", "application/pdf")})
    assert response.status_code == 201
    body = response.json()
    assert body["url"].startswith("/uploads/utility-receipts/")
    assert body["url"].endswith(".pdf")
    assert body["fileName"] == "water-bill.pdf"
    assert body["size"] == len(b"%PDF-1.4 receipt")
    stored = list((upload_dir / "utility-receipts").iterdir())
    assert len(stored) == 1


def test_upload_rejects_unknown_type(login, upload_dir):
    response = login("FACILITY_MANAGER").post(
        "/api/utility-payments/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid file type. Allowed: JPEG, PNG, GIF, WEBP, PDF"}


def test_upload_rejects_large_file(login, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 8)
    response = login("FACILITY_MANAGER").post(
        "/api/utility-payments/upload",
        files={"file": ("meter.png", b"0123456789", "image/png")})
    assert response.status_code == 400
    assert response.json() == {"error": "File size exceeds 10MB limit"}


def test_upload_requires_file(login, upload_dir):
    response = login("FACILITY_MANAGER").post("/api/utility-payments/upload")
    assert response.status_code == 400
    assert response.json() == {"error": "No file uploaded"}


def test_create_and_list_utility_payment(login, meter):
    client = login("FACILITY_MANAGER")
    response = client.post("/api/utility-payments", json=_body(
        meter, receiptUrl="/uploads/utility-receipts/abc.pdf"))
    assert response.status_code == 201
    assert response.json()["paymentMethod"] == "cbe_birr"

    body = client.get("/api/utility-payments", params={"meterId": str(meter.id)}).json()
    assert body["total"] == 1
    assert body["utilityPayments"][0]["amount"] == 1840.5


def test_amount_must_be_positive(login, meter):
    response = login("FACILITY_MANAGER").post("/api/utility-payments", json=_body(meter, amount=0))
    assert response.status_code == 400
    assert response.json() == {"error": "Amount must be greater than zero"}


def test_period_must_be_ordered(login, meter):
    response = login("FACILITY_MANAGER").post("/api/utility-payments", json=_body(
        meter, periodEnd=(utc_now() - timedelta(days=60)).isoformat()))
    assert response.status_code == 400
    assert response.json() == {"error": "Period end must be on or after period start"}


def test_auditor_cannot_record_utility_payment(login, meter):
    assert login("AUDITOR").post("/api/utility-payments", json=_body(meter)).status_code == 403
