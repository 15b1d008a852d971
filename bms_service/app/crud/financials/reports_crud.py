import logging
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now

from ...models.financials.invoices import Invoice
from ...models.financials.payments import Payment
from ...models.space_sites.buildings import Building
from ...models.space_sites.units import Unit

logger = logging.getLogger(__name__)

AGING_STATUSES = ("draft", "sent", "pending", "overdue")

# (key, label, lower bound inclusive, upper bound inclusive); days overdue
AGING_BUCKETS = [
    ("current", "Current (0-30 days)", None, 30),
    ("31-60", "31-60 days", 31, 60),
    ("61-90", "61-90 days", 61, 90),
    ("90+", "Over 90 days", 91, None),
]


def bucket_for(days_overdue: int) -> str:
    for key, _, low, high in AGING_BUCKETS:
        if (low is None or days_overdue >= low) and (high is None or days_overdue <= high):
            return key
    return AGING_BUCKETS[-1][0]


def _paid_by_invoice(db: Session, invoice_ids: List[UUID]) -> Dict[UUID, float]:
    if not invoice_ids:
        return {}
    rows = (
        db.query(Payment.invoice_id, func.sum(Payment.amount))
        .filter(Payment.invoice_id.in_(invoice_ids), Payment.status == "completed")
        .group_by(Payment.invoice_id)
        .all()
    )
    return {invoice_id: float(total or 0) for invoice_id, total in rows}


def _invoice_query(db: Session, org_id: UUID, building_id: Optional[str] = None):
    query = db.query(Invoice).filter(Invoice.org_id == org_id)
    if building_id:
        query = query.join(Unit, Unit.id == Invoice.unit_id).filter(
            Unit.building_id == parse_id(building_id))
    return query


def aging_report(db: Session, org_id: UUID, as_of: Optional[datetime] = None,
                 building_id: Optional[str] = None, tenant_id: Optional[str] = None) -> dict:
    as_of = as_of or utc_now()
    query = _invoice_query(db, org_id, building_id).filter(Invoice.status.in_(AGING_STATUSES))
    if tenant_id:
        query = query.filter(Invoice.tenant_id == parse_id(tenant_id))
    invoices = query.order_by(Invoice.due_date.asc()).all()
    paid = _paid_by_invoice(db, [i.id for i in invoices])

    buckets = {key: {"bucket": key, "label": label, "total": 0.0, "invoice_count": 0, "invoices": []}
               for key, label, _, _ in AGING_BUCKETS}
    for invoice in invoices:
        outstanding = round(invoice.total - paid.get(invoice.id, 0.0), 2)
        if outstanding <= 0:
            continue
        days_overdue = max(0, (as_of - invoice.due_date).days)
        bucket = buckets[bucket_for(days_overdue)]
        bucket["total"] = round(bucket["total"] + outstanding, 2)
        bucket["invoice_count"] += 1
        bucket["invoices"].append({
            "invoice_id": invoice.id,
            "invoice_number": invoice.invoice_number,
            "tenant_id": invoice.tenant_id,
            "amount": outstanding,
            "due_date": invoice.due_date,
            "days_overdue": days_overdue,
        })

    ordered = [buckets[key] for key, _, _, _ in AGING_BUCKETS]
    return {
        "as_of": as_of,
        "buckets": ordered,
        "total_receivables": round(sum(b["total"] for b in ordered), 2),
        "total_invoice_count": sum(b["invoice_count"] for b in ordered),
    }


def financial_report(db: Session, org_id: UUID, start_date: Optional[datetime] = None,
                     end_date: Optional[datetime] = None, building_id: Optional[str] = None) -> dict:
    invoice_query = _invoice_query(db, org_id, building_id)
    if start_date:
        invoice_query = invoice_query.filter(Invoice.issue_date >= start_date)
    if end_date:
        invoice_query = invoice_query.filter(Invoice.issue_date <= end_date)
    invoices = invoice_query.all()

    invoices_by_status: Dict[str, int] = {}
    for invoice in invoices:
        invoices_by_status[invoice.status] = invoices_by_status.get(invoice.status, 0) + 1
    billable = [i for i in invoices if i.status != "cancelled"]
    total_invoiced = round(sum(i.total for i in billable), 2)
    paid = _paid_by_invoice(db, [i.id for i in billable])
    outstanding = round(sum(max(0.0, i.total - paid.get(i.id, 0.0))
                            for i in billable if i.status != "paid"), 2)

    payment_query = db.query(Payment).filter(Payment.org_id == org_id,
                                             Payment.status == "completed")
    if start_date:
        payment_query = payment_query.filter(Payment.payment_date >= start_date)
    if end_date:
        payment_query = payment_query.filter(Payment.payment_date <= end_date)
    if building_id:
        payment_query = payment_query.join(Invoice, Invoice.id == Payment.invoice_id) \
            .join(Unit, Unit.id == Invoice.unit_id) \
            .filter(Unit.building_id == parse_id(building_id))
    payments = payment_query.all()

    payments_by_method: Dict[str, float] = {}
    for payment in payments:
        payments_by_method[payment.payment_method] = round(
            payments_by_method.get(payment.payment_method, 0.0) + payment.amount, 2)
    total_collected = round(sum(p.amount for p in payments), 2)

    return {
        "start_date": start_date,
        "end_date": end_date,
        "total_invoiced": total_invoiced,
        "total_collected": total_collected,
        "outstanding": outstanding,
        "collection_rate": round(total_collected / total_invoiced * 100, 2) if total_invoiced else 0.0,
        "payments_by_method": payments_by_method,
        "invoices_by_status": invoices_by_status,
    }


def occupancy_report(db: Session, org_id: UUID, building_id: Optional[str] = None) -> dict:
    query = db.query(Building).filter(Building.org_id == org_id, Building.status != "inactive")
    if building_id:
        query = query.filter(Building.id == parse_id(building_id))
    buildings = query.order_by(Building.name.asc()).all()

    rows = []
    total_units = occupied_units = 0
    for building in buildings:
        counts: Dict[str, int] = {}
        for (status,) in db.query(Unit.status).filter(Unit.building_id == building.id).all():
            counts[status] = counts.get(status, 0) + 1
        units = sum(counts.values())
        occupied = counts.get("occupied", 0)
        total_units += units
        occupied_units += occupied
        rows.append({
            "building_id": building.id,
            "building_name": building.name,
            "total_units": units,
            "units_by_status": counts,
            "occupancy_rate": round(occupied / units * 100, 2) if units else 0.0,
        })

    return {
        "buildings": rows,
        "total_units": total_units,
        "occupied_units": occupied_units,
        "occupancy_rate": round(occupied_units / total_units * 100, 2) if total_units else 0.0,
    }
