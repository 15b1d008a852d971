from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id

from ...models.leasing_tenants.leases import Lease
from ...models.space_sites.buildings import Building
from ...models.space_sites.units import Unit
from ...schemas.space_sites.units_schemas import UnitCreate, UnitOut, UnitRequest, UnitUpdate
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate


def is_unit_number_unique(db: Session, building_id: UUID, unit_number: str,
                          exclude_id: Optional[UUID] = None) -> bool:
    query = db.query(Unit.id).filter(Unit.building_id == building_id,
                                     Unit.unit_number == unit_number)
    if exclude_id:
        query = query.filter(Unit.id != exclude_id)
    return query.first() is None


def get_list(db: Session, org_id: UUID, params: UnitRequest):
    query = db.query(Unit).filter(Unit.org_id == org_id)
    if params.building_id:
        query = query.filter(Unit.building_id == parse_id(params.building_id))
    if params.status:
        query = query.filter(Unit.status == params.status)
    if params.unit_type:
        query = query.filter(Unit.unit_type == params.unit_type)
    if params.floor is not None:
        query = query.filter(Unit.floor == params.floor)
    if params.search:
        query = query.filter(Unit.unit_number.ilike(f"%{params.search}%"))

    rows, total = paginate(
        query.order_by(Unit.floor.asc(), Unit.unit_number.asc()), params)
    return {"units": [UnitOut.model_validate(u) for u in rows], "total": total}


def get_by_id(db: Session, unit_id, org_id: Optional[UUID] = None) -> Optional[Unit]:
    return get_scoped(db, Unit, unit_id, org_id)


def find_by_building(db: Session, building_id, org_id: Optional[UUID] = None,
                     status: Optional[str] = None) -> List[Unit]:
    bid = parse_id(building_id)
    if not bid:
        return []
    query = db.query(Unit).filter(Unit.building_id == bid)
    if org_id:
        query = query.filter(Unit.org_id == org_id)
    if status:
        query = query.filter(Unit.status == status)
    return query.order_by(Unit.floor.asc(), Unit.unit_number.asc()).all()


def create(db: Session, org_id: UUID, payload: UnitCreate) -> Unit:
    data = payload.model_dump()
    if not data.get("unit_number"):
        raise ValueError("Unit number is required")
    ensure_same_org(db, Building, data["building_id"], org_id, "Building")

    if not is_unit_number_unique(db, data["building_id"], data["unit_number"]):
        raise ValueError(
            f'Unit number "{data["unit_number"]}" already exists in this building')

    unit = Unit(**data, org_id=org_id)
    db.add(unit)
    db.commit()
    db.refresh(unit)
    return unit


def update(db: Session, unit_id, org_id: UUID, payload: UnitUpdate) -> Optional[Unit]:
    unit = get_by_id(db, unit_id, org_id)
    if not unit:
        return None

    data = payload.model_dump(exclude_unset=True)
    new_building_id = data.get("building_id") or unit.building_id
    new_number = data.get("unit_number") or unit.unit_number

    if new_building_id != unit.building_id:
        ensure_same_org(db, Building, new_building_id, org_id, "Building")

    if new_building_id != unit.building_id or new_number != unit.unit_number:
        if not is_unit_number_unique(db, new_building_id, new_number, exclude_id=unit.id):
            raise ValueError(
                f'Unit number "{new_number}" already exists in this building')

    apply_updates(unit, data)
    db.commit()
    db.refresh(unit)
    return unit


def delete(db: Session, unit_id, org_id: UUID) -> Optional[Unit]:
    unit = get_by_id(db, unit_id, org_id)
    if not unit:
        return None

    active_lease = db.query(Lease.id).filter(
        Lease.unit_id == unit.id, Lease.status == "active").first()
    if active_lease:
        raise ValueError("Unit has an active lease and cannot be deleted")

    unit.status = "maintenance"
    db.commit()
    db.refresh(unit)
    return unit
