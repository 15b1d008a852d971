import logging
import re
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now
from shared.helpers.email_helper import notify_invoice_sent
from shared.utils.invoice_pdf import generate_invoice_pdf

from ...models.financials.invoices import Invoice
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.tenants import Tenant
from ...models.space_sites.organizations import Organization
from ...schemas.financials.invoices_schemas import (
    InvoiceCreate, InvoiceOut, InvoiceRequest, InvoiceUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate

logger = logging.getLogger(__name__)

UNPAID_STATUSES = ("draft", "sent", "pending")
INVOICE_NUMBER_PATTERN = re.compile(r"^INV-(\d{4})-(\d+)$")


def generate_invoice_number(db: Session, org_id: UUID, year: Optional[int] = None) -> str:
    """Next `INV-YYYY-NNN` number for the organization in that year."""
    year = year or utc_now().year
    prefix = f"INV-{year}-"
    numbers = (
        db.query(Invoice.invoice_number)
        .filter(Invoice.org_id == org_id, Invoice.invoice_number.like(f"{prefix}%"))
        .all()
    )
    last = 0
    for (number,) in numbers:
        match = INVOICE_NUMBER_PATTERN.match(number or "")
        if match:
            last = max(last, int(match.group(2)))
    return f"{prefix}{last + 1:03d}"


def calculate_totals(items: List[dict], tax: Optional[float] = None,
                     vat_rate: Optional[float] = None) -> dict:
    subtotal = round(sum(float(i["amount"]) for i in items), 2)
    if tax is None:
        tax = round(subtotal * vat_rate / 100, 2) if vat_rate else 0.0
    return {"subtotal": subtotal, "tax": round(tax, 2), "total": round(subtotal + tax, 2)}


def _validate_items(items: List[dict]):
    if not items:
        raise ValueError("Invoice must have at least one item")
    for item in items:
        if not item.get("description"):
            raise ValueError("Invoice item description is required")


def _validate_period(period_start: datetime, period_end: datetime):
    if period_end < period_start:
        raise ValueError("periodEnd must be on or after periodStart")


def get_list(db: Session, org_id: UUID, params: InvoiceRequest):
    query = db.query(Invoice).filter(Invoice.org_id == org_id)
    if params.status:
        query = query.filter(Invoice.status == params.status)
    if params.tenant_id:
        query = query.filter(Invoice.tenant_id == parse_id(params.tenant_id))
    if params.lease_id:
        query = query.filter(Invoice.lease_id == parse_id(params.lease_id))
    if params.unit_id:
        query = query.filter(Invoice.unit_id == parse_id(params.unit_id))
    if params.due_before:
        query = query.filter(Invoice.due_date < params.due_before)
    if params.search:
        query = query.filter(Invoice.invoice_number.ilike(f"%{params.search}%"))

    rows, total = paginate(query.order_by(Invoice.issue_date.desc()), params)
    return {"invoices": [InvoiceOut.model_validate(i) for i in rows], "total": total}


def get_by_id(db: Session, invoice_id, org_id: Optional[UUID] = None) -> Optional[Invoice]:
    return get_scoped(db, Invoice, invoice_id, org_id)


def find_by_tenant(db: Session, tenant_id, org_id: Optional[UUID] = None) -> List[Invoice]:
    query = db.query(Invoice).filter(Invoice.tenant_id == parse_id(tenant_id))
    if org_id:
        query = query.filter(Invoice.org_id == org_id)
    return query.order_by(Invoice.due_date.desc()).all()


def find_by_lease(db: Session, lease_id, org_id: Optional[UUID] = None) -> List[Invoice]:
    query = db.query(Invoice).filter(Invoice.lease_id == parse_id(lease_id))
    if org_id:
        query = query.filter(Invoice.org_id == org_id)
    return query.order_by(Invoice.due_date.desc()).all()


def create(db: Session, org_id: UUID, payload: InvoiceCreate) -> Invoice:
    data = payload.model_dump()

    lease = ensure_same_org(db, Lease, data["lease_id"], org_id, "Lease")
    if lease.tenant_id != data["tenant_id"]:
        raise ValueError("Tenant does not match the lease")
    if lease.unit_id != data["unit_id"]:
        raise ValueError("Unit does not match the lease")

    _validate_items(data["items"])
    _validate_period(data["period_start"], data["period_end"])

    data.update(calculate_totals(data["items"], data.get("tax"), data.get("vat_rate")))
    data["issue_date"] = data.get("issue_date") or utc_now()

    if data.get("invoice_number"):
        exists = db.query(Invoice.id).filter(
            Invoice.org_id == org_id,
            Invoice.invoice_number == data["invoice_number"]).first()
        if exists:
            raise ValueError("Invoice with this number already exists")
    else:
        data["invoice_number"] = generate_invoice_number(
            db, org_id, data["issue_date"].year)

    if data["status"] == "paid":
        data["paid_at"] = utc_now()

    invoice = Invoice(**data, org_id=org_id)
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    return invoice


def update(db: Session, invoice_id, org_id: UUID, payload: InvoiceUpdate) -> Optional[Invoice]:
    invoice = get_by_id(db, invoice_id, org_id)
    if not invoice:
        return None

    data = payload.model_dump(exclude_unset=True)
    if set(data.keys()) == {"status"}:
        return update_status(db, invoice.id, org_id, data["status"])

    if invoice.status != "draft":
        raise ValueError("Only draft invoices can be modified")

    status = data.pop("status", None)

    if "items" in data:
        _validate_items(data["items"])
    _validate_period(data.get("period_start") or invoice.period_start,
                     data.get("period_end") or invoice.period_end)

    if {"items", "tax", "vat_rate"} & set(data.keys()):
        items = data.get("items", invoice.items)
        vat_rate = data.get("vat_rate", invoice.vat_rate)
        tax = data.get("tax") if "tax" in data else (None if vat_rate is not None else invoice.tax)
        data.update(calculate_totals(items, tax, vat_rate))

    apply_updates(invoice, data)
    db.commit()

    if status and status != invoice.status:
        return update_status(db, invoice.id, org_id, status)
    db.refresh(invoice)
    return invoice


def update_status(db: Session, invoice_id, org_id: Optional[UUID], status: str) -> Optional[Invoice]:
    invoice = get_by_id(db, invoice_id, org_id)
    if not invoice:
        return None

    if status == "cancelled" and invoice.status == "paid":
        raise ValueError("Cannot cancel a paid invoice")

    previous = invoice.status
    invoice.status = status
    invoice.paid_at = (invoice.paid_at or utc_now()) if status == "paid" else None
    db.commit()
    db.refresh(invoice)

    if status == "sent" and previous != "sent":
        _notify_sent(db, invoice)
    return invoice


def _notify_sent(db: Session, invoice: Invoice):
    try:
        tenant = db.query(Tenant).filter(Tenant.id == invoice.tenant_id).first()
        if tenant:
            notify_invoice_sent(tenant, invoice)
    except Exception:
        logger.exception(f"Invoice sent notification failed for {invoice.invoice_number}")


def find_overdue(db: Session, org_id: Optional[UUID] = None,
                 as_of: Optional[datetime] = None) -> List[Invoice]:
    as_of = as_of or utc_now()
    query = db.query(Invoice).filter(Invoice.status.in_(UNPAID_STATUSES),
                                     Invoice.due_date < as_of)
    if org_id:
        query = query.filter(Invoice.org_id == org_id)
    return query.order_by(Invoice.due_date.asc()).all()


def mark_overdue(db: Session, org_id: UUID, as_of: Optional[datetime] = None) -> int:
    invoices = [i for i in find_overdue(db, org_id, as_of) if i.status != "draft"]
    for invoice in invoices:
        invoice.status = "overdue"
    db.commit()
    logger.info(f"Marked {len(invoices)} invoices overdue for org {org_id}")
    return len(invoices)


def delete(db: Session, invoice_id, org_id: UUID) -> bool:
    invoice = get_by_id(db, invoice_id, org_id)
    if not invoice:
        return False
    if invoice.status != "draft":
        raise ValueError("Only draft invoices can be deleted")
    db.delete(invoice)
    db.commit()
    return True


def invoices_overview(db: Session, org_id: UUID):
    rows = (
        db.query(Invoice.status, func.count(Invoice.id), func.coalesce(func.sum(Invoice.total), 0))
        .filter(Invoice.org_id == org_id)
        .group_by(Invoice.status)
        .all()
    )
    return {
        status: {"count": count, "total": round(float(total), 2)}
        for status, count, total in rows
    }


def render_pdf(db: Session, invoice_id, org_id: UUID) -> Optional[Tuple[str, bytes]]:
    invoice = get_by_id(db, invoice_id, org_id)
    if not invoice:
        return None
    organization = db.query(Organization).filter(Organization.id == invoice.org_id).first()
    tenant = db.query(Tenant).filter(Tenant.id == invoice.tenant_id).first()
    tenant_name = f"{tenant.first_name} {tenant.last_name}" if tenant else ""
    content = generate_invoice_pdf(invoice, organization.name if organization else "",
                                   tenant_name)
    return f"{invoice.invoice_number}.pdf", content
