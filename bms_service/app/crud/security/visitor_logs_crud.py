from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now

from ...models.leasing_tenants.tenants import Tenant
from ...models.security.visitor_logs import VisitorLog
from ...models.space_sites.buildings import Building
from ...models.space_sites.units import Unit
from ...schemas.security.visitor_logs_schemas import (
    VisitorLogCreate, VisitorLogOut, VisitorLogRequest, VisitorLogUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate


def _check_references(db: Session, org_id: UUID, data: dict):
    if data.get("building_id"):
        ensure_same_org(db, Building, data["building_id"], org_id, "Building")
    if data.get("host_tenant_id"):
        ensure_same_org(db, Tenant, data["host_tenant_id"], org_id, "Tenant")
    if data.get("host_unit_id"):
        ensure_same_org(db, Unit, data["host_unit_id"], org_id, "Unit")


def get_list(db: Session, org_id: UUID, params: VisitorLogRequest):
    query = db.query(VisitorLog).filter(VisitorLog.org_id == org_id)
    if params.building_id:
        query = query.filter(VisitorLog.building_id == parse_id(params.building_id))
    if params.host_tenant_id:
        query = query.filter(VisitorLog.host_tenant_id == parse_id(params.host_tenant_id))
    if params.active is True:
        query = query.filter(VisitorLog.exit_time.is_(None))
    elif params.active is False:
        query = query.filter(VisitorLog.exit_time.isnot(None))
    if params.start_date:
        query = query.filter(VisitorLog.entry_time >= params.start_date)
    if params.end_date:
        query = query.filter(VisitorLog.entry_time <= params.end_date)
    if params.search:
        query = query.filter(VisitorLog.visitor_name.ilike(f"%{params.search}%"))

    rows, total = paginate(query.order_by(VisitorLog.entry_time.desc()), params)
    return {"visitor_logs": [VisitorLogOut.model_validate(v) for v in rows], "total": total}


def get_by_id(db: Session, log_id, org_id: Optional[UUID] = None) -> Optional[VisitorLog]:
    return get_scoped(db, VisitorLog, log_id, org_id)


def find_active(db: Session, org_id: UUID, building_id=None) -> List[VisitorLog]:
    query = db.query(VisitorLog).filter(VisitorLog.org_id == org_id,
                                        VisitorLog.exit_time.is_(None))
    if building_id:
        query = query.filter(VisitorLog.building_id == parse_id(building_id))
    return query.order_by(VisitorLog.entry_time.desc()).all()


def create(db: Session, org_id: UUID, payload: VisitorLogCreate,
           user_id: Optional[str] = None) -> VisitorLog:
    data = payload.model_dump()
    if not data.get("visitor_name") or not data.get("purpose"):
        raise ValueError("visitorName and purpose are required")
    _check_references(db, org_id, data)
    data["entry_time"] = data.get("entry_time") or utc_now()

    log = VisitorLog(**data, org_id=org_id, logged_by=parse_id(user_id))
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


def update(db: Session, log_id, org_id: UUID, payload: VisitorLogUpdate) -> Optional[VisitorLog]:
    log = get_by_id(db, log_id, org_id)
    if not log:
        return None
    data = payload.model_dump(exclude_unset=True)
    _check_references(db, org_id, data)
    apply_updates(log, data)
    db.commit()
    db.refresh(log)
    return log


def log_exit(db: Session, log_id, org_id: UUID,
             exit_time: Optional[datetime] = None) -> Optional[VisitorLog]:
    log = get_by_id(db, log_id, org_id)
    if not log:
        return None
    if log.exit_time:
        raise ValueError("Visitor has already exited")
    exit_time = exit_time or utc_now()
    if exit_time < log.entry_time:
        raise ValueError("Exit time cannot be before entry time")

    log.exit_time = exit_time
    db.commit()
    db.refresh(log)
    return log


def delete(db: Session, log_id, org_id: UUID) -> bool:
    log = get_by_id(db, log_id, org_id)
    if not log:
        return False
    db.delete(log)
    db.commit()
    return True
