from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id
from shared.models.users import Users

from ...models.security.security_staff import SecurityStaff
from ...models.space_sites.buildings import Building
from ...schemas.security.security_staff_schemas import (
    SecurityStaffCreate, SecurityStaffOut, SecurityStaffRequest, SecurityStaffUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate


def _prepare(db: Session, org_id: UUID, data: dict) -> dict:
    if data.get("building_id"):
        ensure_same_org(db, Building, data["building_id"], org_id, "Building")
    if data.get("assigned_buildings") is not None:
        for building_id in data["assigned_buildings"]:
            ensure_same_org(db, Building, building_id, org_id, "Building")
        data["assigned_buildings"] = [str(b) for b in data["assigned_buildings"]]
    return data


def get_list(db: Session, org_id: UUID, params: SecurityStaffRequest):
    query = db.query(SecurityStaff).filter(SecurityStaff.org_id == org_id)
    if params.building_id:
        query = query.filter(SecurityStaff.building_id == parse_id(params.building_id))
    if params.search:
        query = query.filter(SecurityStaff.employee_id.ilike(f"%{params.search}%"))

    rows, total = paginate(query.order_by(SecurityStaff.created_at.desc()), params)
    return {"security_staff": [SecurityStaffOut.model_validate(s) for s in rows], "total": total}


def get_by_id(db: Session, staff_id, org_id: Optional[UUID] = None) -> Optional[SecurityStaff]:
    return get_scoped(db, SecurityStaff, staff_id, org_id)


def find_by_user(db: Session, user_id, org_id: UUID) -> Optional[SecurityStaff]:
    return db.query(SecurityStaff).filter(SecurityStaff.org_id == org_id,
                                          SecurityStaff.user_id == parse_id(user_id)).first()


def create(db: Session, org_id: UUID, payload: SecurityStaffCreate) -> SecurityStaff:
    data = _prepare(db, org_id, payload.model_dump())
    ensure_same_org(db, Users, data["user_id"], org_id, "User")
    if find_by_user(db, data["user_id"], org_id):
        raise ValueError("Security staff profile already exists for this user")

    staff = SecurityStaff(**data, org_id=org_id)
    db.add(staff)
    db.commit()
    db.refresh(staff)
    return staff


def update(db: Session, staff_id, org_id: UUID, payload: SecurityStaffUpdate) -> Optional[SecurityStaff]:
    staff = get_by_id(db, staff_id, org_id)
    if not staff:
        return None
    data = _prepare(db, org_id, payload.model_dump(exclude_unset=True))
    apply_updates(staff, data)
    db.commit()
    db.refresh(staff)
    return staff


def delete(db: Session, staff_id, org_id: UUID) -> bool:
    staff = get_by_id(db, staff_id, org_id)
    if not staff:
        return False
    db.delete(staff)
    db.commit()
    return True
