from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.database import parse_id
from shared.models.users import Users

from ...models.space_sites.buildings import Building
from ...models.space_sites.units import Unit
from ...schemas.space_sites.buildings_schemas import (
    BuildingCreate, BuildingOut, BuildingRequest, BuildingUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate


def build_building_filters(org_id: UUID, params: BuildingRequest):
    filters = [Building.org_id == org_id]
    if params.status:
        filters.append(Building.status == params.status)
    if params.building_type:
        filters.append(Building.building_type == params.building_type)
    if params.manager_id:
        filters.append(Building.manager_id == parse_id(params.manager_id))
    if params.search:
        term = f"%{params.search}%"
        filters.append(Building.name.ilike(term))
    return filters


def get_list(db: Session, org_id: UUID, params: BuildingRequest):
    query = db.query(Building).filter(*build_building_filters(org_id, params))
    rows, total = paginate(query.order_by(Building.name.asc()), params)
    return {
        "buildings": [BuildingOut.model_validate(b) for b in rows],
        "total": total,
    }


def get_by_id(db: Session, building_id, org_id: Optional[UUID] = None) -> Optional[Building]:
    return get_scoped(db, Building, building_id, org_id)


def _validate_manager(db: Session, manager_id, org_id: UUID):
    if manager_id:
        ensure_same_org(db, Users, manager_id, org_id, "Manager")


def create(db: Session, org_id: UUID, payload: BuildingCreate) -> Building:
    data = payload.model_dump()
    if not data.get("name"):
        raise ValueError("Building name is required")
    _validate_manager(db, data.get("manager_id"), org_id)

    building = Building(**data, org_id=org_id)
    db.add(building)
    db.commit()
    db.refresh(building)
    return building


def update(db: Session, building_id, org_id: UUID, payload: BuildingUpdate) -> Optional[Building]:
    building = get_by_id(db, building_id, org_id)
    if not building:
        return None

    data = payload.model_dump(exclude_unset=True)
    if "name" in data and not data["name"]:
        raise ValueError("Building name is required")
    if data.get("manager_id") and data["manager_id"] != building.manager_id:
        _validate_manager(db, data["manager_id"], org_id)

    apply_updates(building, data)
    db.commit()
    db.refresh(building)
    return building


def delete(db: Session, building_id, org_id: UUID) -> Optional[Building]:
    building = get_by_id(db, building_id, org_id)
    if not building:
        return None
    building.status = "inactive"
    db.commit()
    db.refresh(building)
    return building


def buildings_overview(db: Session, org_id: UUID):
    total = db.query(func.count(Building.id)).filter(
        Building.org_id == org_id).scalar() or 0
    active = db.query(func.count(Building.id)).filter(
        Building.org_id == org_id, Building.status == "active").scalar() or 0
    units = db.query(func.count(Unit.id)).filter(
        Unit.org_id == org_id).scalar() or 0
    occupied = db.query(func.count(Unit.id)).filter(
        Unit.org_id == org_id, Unit.status == "occupied").scalar() or 0
    return {
        "totalBuildings": total,
        "activeBuildings": active,
        "totalUnits": units,
        "occupiedUnits": occupied,
        "occupancyRate": round(occupied / units * 100, 2) if units else 0.0,
    }
