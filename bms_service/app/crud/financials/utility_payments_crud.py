import logging
import os
import uuid
from typing import Optional
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import parse_id, utc_now

from ...models.energy_iot.meters import Meter
from ...models.financials.utility_payments import UtilityPayment
from ...schemas.financials.utility_payments_schemas import (
    UtilityPaymentCreate, UtilityPaymentOut, UtilityPaymentRequest, UtilityPaymentUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate

logger = logging.getLogger(__name__)

RECEIPT_SUBDIR = "utility-receipts"
ALLOWED_RECEIPT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "application/pdf": ".pdf",
}


def _validate(amount: Optional[float], period_start, period_end):
    if amount is not None and amount <= 0:
        raise ValueError("Amount must be greater than zero")
    if period_start and period_end and period_end < period_start:
        raise ValueError("Period end must be on or after period start")


def get_list(db: Session, org_id: UUID, params: UtilityPaymentRequest):
    query = db.query(UtilityPayment).filter(UtilityPayment.org_id == org_id)
    if params.meter_id:
        query = query.filter(UtilityPayment.meter_id == parse_id(params.meter_id))
    if params.utility_type:
        query = query.filter(UtilityPayment.utility_type == params.utility_type)
    if params.start_date:
        query = query.filter(UtilityPayment.payment_date >= params.start_date)
    if params.end_date:
        query = query.filter(UtilityPayment.payment_date <= params.end_date)

    rows, total = paginate(query.order_by(UtilityPayment.payment_date.desc()), params)
    return {
        "utility_payments": [UtilityPaymentOut.model_validate(r) for r in rows],
        "total": total,
    }


def get_by_id(db: Session, payment_id, org_id: Optional[UUID] = None) -> Optional[UtilityPayment]:
    return get_scoped(db, UtilityPayment, payment_id, org_id)


def create(db: Session, org_id: UUID, payload: UtilityPaymentCreate,
           user_id: Optional[str] = None) -> UtilityPayment:
    data = payload.model_dump()
    ensure_same_org(db, Meter, data["meter_id"], org_id, "Meter")
    _validate(data["amount"], data["period_start"], data["period_end"])
    if data["amount"] is None:
        raise ValueError("Amount must be greater than zero")

    data["payment_date"] = data.get("payment_date") or utc_now()
    record = UtilityPayment(**data, org_id=org_id, created_by=parse_id(user_id))
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def update(db: Session, payment_id, org_id: UUID,
           payload: UtilityPaymentUpdate) -> Optional[UtilityPayment]:
    record = get_by_id(db, payment_id, org_id)
    if not record:
        return None

    data = payload.model_dump(exclude_unset=True)
    if "amount" in data and data["amount"] is None:
        raise ValueError("Amount must be greater than zero")
    _validate(data.get("amount"),
              data.get("period_start") or record.period_start,
              data.get("period_end") or record.period_end)

    apply_updates(record, data)
    db.commit()
    db.refresh(record)
    return record


def delete(db: Session, payment_id, org_id: UUID) -> bool:
    record = get_by_id(db, payment_id, org_id)
    if not record:
        return False
    db.delete(record)
    db.commit()
    return True


async def save_receipt(file: UploadFile) -> dict:
    """Store an uploaded receipt and return its public url and metadata."""
    if not file or not file.filename:
        raise ValueError("No file uploaded")
    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_RECEIPT_TYPES:
        raise ValueError("Invalid file type. Allowed: JPEG, PNG, GIF, WEBP, PDF")

    contents = await file.read()
    if len(contents) > settings.MAX_UPLOAD_SIZE:
        raise ValueError("File size exceeds 10MB limit")

    ext = os.path.splitext(file.filename)[1].lower() or ALLOWED_RECEIPT_TYPES[content_type]
    stored_name = f"{uuid.uuid4().hex}{ext}"
    target_dir = os.path.join(settings.UPLOAD_DIR, RECEIPT_SUBDIR)
    os.makedirs(target_dir, exist_ok=True)
    with open(os.path.join(target_dir, stored_name), "wb") as out:
        out.write(contents)

    logger.info(f"Stored receipt {file.filename} as {stored_name} ({len(contents)} bytes)")
    return {
        "url": f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{RECEIPT_SUBDIR}/{stored_name}",
        "file_name": file.filename,
        "size": len(contents),
        "content_type": content_type,
    }
