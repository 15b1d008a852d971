from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now

from ...models.security.security_incidents import SecurityIncident
from ...models.security.visitor_logs import VisitorLog
from ...models.space_sites.buildings import Building
from ...models.space_sites.units import Unit
from ...schemas.security.security_incidents_schemas import (
    SecurityIncidentCreate, SecurityIncidentOut, SecurityIncidentRequest, SecurityIncidentUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate

RESOLVED_STATUSES = ("resolved", "closed")


def _check_references(db: Session, org_id: UUID, data: dict):
    if data.get("building_id"):
        ensure_same_org(db, Building, data["building_id"], org_id, "Building")
    if data.get("unit_id"):
        ensure_same_org(db, Unit, data["unit_id"], org_id, "Unit")
    if data.get("linked_visitor_log_id"):
        ensure_same_org(db, VisitorLog, data["linked_visitor_log_id"], org_id, "Visitor log")


def get_list(db: Session, org_id: UUID, params: SecurityIncidentRequest):
    query = db.query(SecurityIncident).filter(SecurityIncident.org_id == org_id)
    if params.building_id:
        query = query.filter(SecurityIncident.building_id == parse_id(params.building_id))
    if params.status:
        query = query.filter(SecurityIncident.status == params.status)
    if params.severity:
        query = query.filter(SecurityIncident.severity == params.severity)
    if params.incident_type:
        query = query.filter(SecurityIncident.incident_type == params.incident_type)
    if params.start_date:
        query = query.filter(SecurityIncident.reported_at >= params.start_date)
    if params.end_date:
        query = query.filter(SecurityIncident.reported_at <= params.end_date)
    if params.search:
        query = query.filter(SecurityIncident.title.ilike(f"%{params.search}%"))

    rows, total = paginate(query.order_by(SecurityIncident.reported_at.desc()), params)
    return {"incidents": [SecurityIncidentOut.model_validate(i) for i in rows], "total": total}


def get_by_id(db: Session, incident_id, org_id: Optional[UUID] = None) -> Optional[SecurityIncident]:
    return get_scoped(db, SecurityIncident, incident_id, org_id)


def create(db: Session, org_id: UUID, payload: SecurityIncidentCreate,
           user_id: Optional[str] = None) -> SecurityIncident:
    data = payload.model_dump()
    _check_references(db, org_id, data)
    data["reported_at"] = data.get("reported_at") or utc_now()

    incident = SecurityIncident(**data, org_id=org_id, reported_by=parse_id(user_id))
    db.add(incident)
    db.commit()
    db.refresh(incident)
    return incident


def update(db: Session, incident_id, org_id: UUID, payload: SecurityIncidentUpdate,
           user_id: Optional[str] = None) -> Optional[SecurityIncident]:
    incident = get_by_id(db, incident_id, org_id)
    if not incident:
        return None

    data = payload.model_dump(exclude_unset=True)
    _check_references(db, org_id, data)
    apply_updates(incident, data)

    if incident.status in RESOLVED_STATUSES and not incident.resolved_at:
        incident.resolved_at = utc_now()
        incident.resolved_by = incident.resolved_by or parse_id(user_id)
    elif incident.status not in RESOLVED_STATUSES:
        incident.resolved_at = None
        incident.resolved_by = None
    db.commit()
    db.refresh(incident)
    return incident


def delete(db: Session, incident_id, org_id: UUID) -> bool:
    incident = get_by_id(db, incident_id, org_id)
    if not incident:
        return False
    db.delete(incident)
    db.commit()
    return True
