from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id

from ...models.energy_iot.meters import Meter
from ...models.maintenance_assets.assets import Asset
from ...models.space_sites.buildings import Building
from ...models.space_sites.units import Unit
from ...schemas.energy_iot.meters_schemas import MeterCreate, MeterOut, MeterRequest, MeterUpdate
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate


def _check_number(db: Session, org_id: UUID, meter_number: str, exclude_id: Optional[UUID] = None):
    query = db.query(Meter.id).filter(Meter.org_id == org_id,
                                      Meter.meter_number == meter_number)
    if exclude_id:
        query = query.filter(Meter.id != exclude_id)
    if query.first():
        raise ValueError("Meter number already exists in this organization")


def _check_references(db: Session, org_id: UUID, data: dict):
    if data.get("building_id"):
        ensure_same_org(db, Building, data["building_id"], org_id, "Building")
    if data.get("unit_id"):
        ensure_same_org(db, Unit, data["unit_id"], org_id, "Unit")
    if data.get("asset_id"):
        ensure_same_org(db, Asset, data["asset_id"], org_id, "Asset")


def get_list(db: Session, org_id: UUID, params: MeterRequest):
    query = db.query(Meter).filter(Meter.org_id == org_id)
    if params.building_id:
        query = query.filter(Meter.building_id == parse_id(params.building_id))
    if params.unit_id:
        query = query.filter(Meter.unit_id == parse_id(params.unit_id))
    if params.meter_type:
        query = query.filter(Meter.meter_type == params.meter_type)
    if params.status:
        query = query.filter(Meter.status == params.status)
    if params.search:
        query = query.filter(Meter.meter_number.ilike(f"%{params.search}%"))

    rows, total = paginate(query.order_by(Meter.meter_number.asc()), params)
    return {"meters": [MeterOut.model_validate(m) for m in rows], "total": total}


def get_by_id(db: Session, meter_id, org_id: Optional[UUID] = None) -> Optional[Meter]:
    return get_scoped(db, Meter, meter_id, org_id)


def find_by_building(db: Session, building_id, org_id: Optional[UUID] = None) -> List[Meter]:
    query = db.query(Meter).filter(Meter.building_id == parse_id(building_id))
    if org_id:
        query = query.filter(Meter.org_id == org_id)
    return query.order_by(Meter.meter_number.asc()).all()


def create(db: Session, org_id: UUID, payload: MeterCreate) -> Meter:
    data = payload.model_dump()
    if not data.get("meter_number"):
        raise ValueError("Meter number is required")
    _check_references(db, org_id, data)
    _check_number(db, org_id, data["meter_number"])

    meter = Meter(**data, org_id=org_id)
    db.add(meter)
    db.commit()
    db.refresh(meter)
    return meter


def update(db: Session, meter_id, org_id: UUID, payload: MeterUpdate) -> Optional[Meter]:
    meter = get_by_id(db, meter_id, org_id)
    if not meter:
        return None

    data = payload.model_dump(exclude_unset=True)
    _check_references(db, org_id, data)
    if data.get("meter_number") and data["meter_number"] != meter.meter_number:
        _check_number(db, org_id, data["meter_number"], exclude_id=meter.id)

    apply_updates(meter, data)
    db.commit()
    db.refresh(meter)
    return meter


def delete(db: Session, meter_id, org_id: UUID) -> bool:
    meter = get_by_id(db, meter_id, org_id)
    if not meter:
        return False
    db.delete(meter)
    db.commit()
    return True
