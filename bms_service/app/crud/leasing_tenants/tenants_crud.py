from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...models.leasing_tenants.tenants import Tenant
from ...schemas.leasing_tenants.tenants_schemas import (
    TenantCreate, TenantOut, TenantRequest, TenantUpdate
)
from ..common.references import apply_updates, get_scoped, paginate


def build_tenant_filters(org_id: UUID, params: TenantRequest):
    filters = [Tenant.org_id == org_id]
    if params.status:
        filters.append(Tenant.status == params.status)
    if params.search:
        term = f"%{params.search}%"
        filters.append(or_(
            Tenant.first_name.ilike(term),
            Tenant.last_name.ilike(term),
            Tenant.primary_phone.ilike(term),
            Tenant.email.ilike(term),
        ))
    return filters


def get_list(db: Session, org_id: UUID, params: TenantRequest):
    query = db.query(Tenant).filter(*build_tenant_filters(org_id, params))
    rows, total = paginate(
        query.order_by(Tenant.last_name.asc(), Tenant.first_name.asc()), params)
    return {"tenants": [TenantOut.model_validate(t) for t in rows], "total": total}


def get_by_id(db: Session, tenant_id, org_id: Optional[UUID] = None) -> Optional[Tenant]:
    return get_scoped(db, Tenant, tenant_id, org_id)


def find_by_phone(db: Session, phone: str, org_id: UUID) -> Optional[Tenant]:
    return db.query(Tenant).filter(Tenant.org_id == org_id,
                                   Tenant.primary_phone == phone.strip()).first()


def _check_phone(db: Session, org_id: UUID, phone: str, exclude_id: Optional[UUID] = None):
    existing = find_by_phone(db, phone, org_id)
    if existing and existing.id != exclude_id:
        raise ValueError("Tenant with this phone already exists")


def create(db: Session, org_id: UUID, payload: TenantCreate) -> Tenant:
    data = payload.model_dump()
    for field in ("first_name", "last_name", "primary_phone"):
        if not data.get(field):
            raise ValueError("firstName, lastName, and primaryPhone are required")
    _check_phone(db, org_id, data["primary_phone"])

    tenant = Tenant(**data, org_id=org_id)
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


def update(db: Session, tenant_id, org_id: UUID, payload: TenantUpdate) -> Optional[Tenant]:
    tenant = get_by_id(db, tenant_id, org_id)
    if not tenant:
        return None

    data = payload.model_dump(exclude_unset=True)
    for field in ("first_name", "last_name", "primary_phone"):
        if field in data and not data[field]:
            raise ValueError("firstName, lastName, and primaryPhone are required")
    if data.get("primary_phone") and data["primary_phone"] != tenant.primary_phone:
        _check_phone(db, org_id, data["primary_phone"], exclude_id=tenant.id)

    apply_updates(tenant, data)
    db.commit()
    db.refresh(tenant)
    return tenant


def delete(db: Session, tenant_id, org_id: UUID) -> Optional[Tenant]:
    tenant = get_by_id(db, tenant_id, org_id)
    if not tenant:
        return None
    tenant.status = "inactive"
    db.commit()
    db.refresh(tenant)
    return tenant


def tenants_overview(db: Session, org_id: UUID):
    rows = (
        db.query(Tenant.status, func.count(Tenant.id))
        .filter(Tenant.org_id == org_id)
        .group_by(Tenant.status)
        .all()
    )
    by_status = {status: count for status, count in rows}
    return {
        "totalTenants": sum(by_status.values()),
        "activeTenants": by_status.get("active", 0),
        "inactiveTenants": by_status.get("inactive", 0),
        "suspendedTenants": by_status.get("suspended", 0),
    }
