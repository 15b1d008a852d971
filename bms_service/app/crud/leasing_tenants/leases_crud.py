import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now

from ...models.financials.invoices import Invoice
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.tenants import Tenant
from ...models.space_sites.units import Unit
from ...schemas.leasing_tenants.leases_schemas import (
    LeaseCreate, LeaseOut, LeaseRequest, LeaseUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate

logger = logging.getLogger(__name__)


def validate_lease_dates(start_date: datetime, end_date: Optional[datetime]):
    if not start_date:
        raise ValueError("Invalid start date")
    if end_date and end_date <= start_date:
        raise ValueError("End date must be after start date")


def validate_due_day(due_day: int):
    if due_day is None or due_day < 1 or due_day > 31:
        raise ValueError("dueDay must be between 1 and 31")


def find_active_for_unit(db: Session, unit_id, org_id: Optional[UUID] = None,
                         exclude_id: Optional[UUID] = None) -> Optional[Lease]:
    query = db.query(Lease).filter(Lease.unit_id == parse_id(unit_id),
                                   Lease.status == "active")
    if org_id:
        query = query.filter(Lease.org_id == org_id)
    if exclude_id:
        query = query.filter(Lease.id != exclude_id)
    return query.first()


def validate_unit_is_available(db: Session, unit_id, org_id: UUID,
                               exclude_id: Optional[UUID] = None) -> Unit:
    unit = ensure_same_org(db, Unit, unit_id, org_id, "Unit")
    if find_active_for_unit(db, unit.id, org_id, exclude_id=exclude_id):
        raise ValueError("Unit already has an active lease")
    return unit


def _set_unit_status(db: Session, unit_id: UUID, status: str):
    # Unit status is a projection of lease state; a failed sync must not fail the lease write.
    try:
        unit = db.query(Unit).filter(Unit.id == unit_id).first()
        if unit:
            unit.status = status
    except Exception:
        logger.exception(f"Failed to update unit {unit_id} status to {status}")


def get_list(db: Session, org_id: UUID, params: LeaseRequest):
    query = db.query(Lease).filter(Lease.org_id == org_id)
    if params.status:
        query = query.filter(Lease.status == params.status)
    if params.tenant_id:
        query = query.filter(Lease.tenant_id == parse_id(params.tenant_id))
    if params.unit_id:
        query = query.filter(Lease.unit_id == parse_id(params.unit_id))

    rows, total = paginate(query.order_by(Lease.start_date.desc()), params)
    return {"leases": [LeaseOut.model_validate(l) for l in rows], "total": total}


def get_by_id(db: Session, lease_id, org_id: Optional[UUID] = None) -> Optional[Lease]:
    return get_scoped(db, Lease, lease_id, org_id)


def find_by_tenant(db: Session, tenant_id, org_id: Optional[UUID] = None,
                   status: Optional[str] = None) -> List[Lease]:
    tid = parse_id(tenant_id)
    if not tid:
        return []
    query = db.query(Lease).filter(Lease.tenant_id == tid)
    if org_id:
        query = query.filter(Lease.org_id == org_id)
    if status:
        query = query.filter(Lease.status == status)
    return query.order_by(Lease.start_date.desc()).all()


def find_by_unit(db: Session, unit_id, org_id: Optional[UUID] = None) -> List[Lease]:
    uid = parse_id(unit_id)
    if not uid:
        return []
    query = db.query(Lease).filter(Lease.unit_id == uid)
    if org_id:
        query = query.filter(Lease.org_id == org_id)
    return query.order_by(Lease.start_date.desc()).all()


def create(db: Session, org_id: UUID, payload: LeaseCreate) -> Lease:
    data = payload.model_dump()

    ensure_same_org(db, Tenant, data["tenant_id"], org_id, "Tenant")
    if data["status"] == "active":
        validate_unit_is_available(db, data["unit_id"], org_id)
    else:
        ensure_same_org(db, Unit, data["unit_id"], org_id, "Unit")

    validate_lease_dates(data["start_date"], data.get("end_date"))
    validate_due_day(data["due_day"])

    lease = Lease(**data, org_id=org_id)
    db.add(lease)
    if lease.status == "active":
        _set_unit_status(db, lease.unit_id, "occupied")
    db.commit()
    db.refresh(lease)
    return lease


def update(db: Session, lease_id, org_id: UUID, payload: LeaseUpdate) -> Optional[Lease]:
    lease = get_by_id(db, lease_id, org_id)
    if not lease:
        return None

    data = payload.model_dump(exclude_unset=True)

    if "start_date" in data or "end_date" in data:
        validate_lease_dates(data.get("start_date") or lease.start_date,
                             data["end_date"] if "end_date" in data else lease.end_date)
    if "due_day" in data:
        validate_due_day(data["due_day"])

    if data.get("tenant_id") and data["tenant_id"] != lease.tenant_id:
        ensure_same_org(db, Tenant, data["tenant_id"], org_id, "Tenant")

    new_status = data.get("status") or lease.status
    new_unit_id = data.get("unit_id") or lease.unit_id

    if new_unit_id != lease.unit_id:
        if new_status == "active":
            validate_unit_is_available(db, new_unit_id, org_id, exclude_id=lease.id)
        else:
            ensure_same_org(db, Unit, new_unit_id, org_id, "Unit")
        if lease.status == "active":
            _set_unit_status(db, lease.unit_id, "available")
        if new_status == "active":
            _set_unit_status(db, new_unit_id, "occupied")
    elif new_status != lease.status:
        if lease.status == "active" and new_status in ("terminated", "expired"):
            _set_unit_status(db, lease.unit_id, "available")
        elif new_status == "active":
            validate_unit_is_available(db, lease.unit_id, org_id, exclude_id=lease.id)
            _set_unit_status(db, lease.unit_id, "occupied")

    apply_updates(lease, data)
    db.commit()
    db.refresh(lease)
    return lease


def terminate(db: Session, lease_id, org_id: UUID, reason: Optional[str] = None) -> Optional[Lease]:
    lease = get_by_id(db, lease_id, org_id)
    if not lease:
        return None
    if lease.status == "terminated":
        raise ValueError("Lease is already terminated")

    was_active = lease.status == "active"
    now = utc_now()
    lease.status = "terminated"
    lease.end_date = now
    lease.termination_date = now
    lease.termination_reason = reason
    if was_active:
        _set_unit_status(db, lease.unit_id, "available")
    db.commit()
    db.refresh(lease)
    logger.info(f"Lease {lease.id} terminated")
    return lease


def delete(db: Session, lease_id, org_id: UUID) -> bool:
    lease = get_by_id(db, lease_id, org_id)
    if not lease:
        return False
    if db.query(Invoice.id).filter(Invoice.lease_id == lease.id).first():
        raise ValueError("Lease has invoices and cannot be deleted; terminate it instead")
    if lease.status == "active":
        _set_unit_status(db, lease.unit_id, "available")
    db.delete(lease)
    db.commit()
    return True
