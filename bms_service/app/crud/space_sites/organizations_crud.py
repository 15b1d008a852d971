from typing import Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from shared.core.database import parse_id

from ...models.space_sites.organizations import Organization
from ...schemas.space_sites.organizations_schemas import (
    OrganizationCreate, OrganizationOut, OrganizationRequest, OrganizationUpdate
)
from ..common.references import apply_updates, paginate


def _check_unique(db: Session, data: dict, exclude_id: Optional[UUID] = None):
    checks = [
        ("code", "Organization code already exists"),
        ("subdomain", "Subdomain already exists"),
        ("domain", "Domain already exists"),
    ]
    for field, message in checks:
        value = data.get(field)
        if not value:
            continue
        query = db.query(Organization).filter(
            getattr(Organization, field) == value)
        if exclude_id:
            query = query.filter(Organization.id != exclude_id)
        if query.first():
            raise ValueError(message)


def get_list(db: Session, params: OrganizationRequest, org_id: Optional[UUID] = None):
    query = db.query(Organization)
    if org_id:
        query = query.filter(Organization.id == org_id)
    if params.status:
        query = query.filter(Organization.status == params.status)
    if params.search:
        term = f"%{params.search}%"
        query = query.filter(or_(Organization.name.ilike(term),
                                 Organization.code.ilike(term)))

    rows, total = paginate(query.order_by(Organization.name.asc()), params)
    return {
        "organizations": [OrganizationOut.model_validate(o) for o in rows],
        "total": total,
    }


def get_by_id(db: Session, organization_id) -> Optional[Organization]:
    oid = parse_id(organization_id)
    if not oid:
        return None
    return db.query(Organization).filter(Organization.id == oid).first()


def get_by_code(db: Session, code: str) -> Optional[Organization]:
    return db.query(Organization).filter(Organization.code == code.strip()).first()


def create(db: Session, payload: OrganizationCreate) -> Organization:
    data = payload.model_dump()
    _check_unique(db, data)
    org = Organization(**data)
    db.add(org)
    db.commit()
    db.refresh(org)
    return org


def update(db: Session, organization_id, payload: OrganizationUpdate) -> Optional[Organization]:
    org = get_by_id(db, organization_id)
    if not org:
        return None
    data = payload.model_dump(exclude_unset=True)
    _check_unique(db, data, exclude_id=org.id)
    apply_updates(org, data)
    db.commit()
    db.refresh(org)
    return org


def update_settings(db: Session, organization_id, settings: dict) -> Optional[Organization]:
    """Shallow-merge into the organization's settings document."""
    org = get_by_id(db, organization_id)
    if not org:
        return None
    org.settings = {**(org.settings or {}), **settings}
    db.commit()
    db.refresh(org)
    return org


def delete(db: Session, organization_id) -> Optional[Organization]:
    org = get_by_id(db, organization_id)
    if not org:
        return None
    org.status = "inactive"
    db.commit()
    db.refresh(org)
    return org
