import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now

from ...models.energy_iot.meter_readings import MeterReading
from ...models.energy_iot.meters import Meter
from ...schemas.energy_iot.meter_readings_schemas import (
    MeterReadingCreate, MeterReadingOut, MeterReadingRequest, MeterReadingUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate

logger = logging.getLogger(__name__)


def check_monotonic(reading: float, last_reading: Optional[float], allow_decrease: bool = False):
    if allow_decrease or last_reading is None:
        return
    if reading < last_reading:
        raise ValueError(
            f"Reading ({reading:g}) must be greater than or equal to last reading "
            f"({last_reading:g}). Set allowDecrease=true for corrections.")


def _check_value(reading: Optional[float]):
    if reading is None or reading < 0:
        raise ValueError("reading must be a non-negative number")


def check_neighbours(db: Session, reading: MeterReading, value: float, reading_date: datetime):
    """Keep an edited reading between the readings dated before and after it."""
    others = db.query(MeterReading).filter(MeterReading.meter_id == reading.meter_id,
                                           MeterReading.id != reading.id)
    previous = (
        others.filter(MeterReading.reading_date <= reading_date)
        .order_by(MeterReading.reading_date.desc(), MeterReading.created_at.desc())
        .first()
    )
    following = (
        others.filter(MeterReading.reading_date > reading_date)
        .order_by(MeterReading.reading_date.asc(), MeterReading.created_at.asc())
        .first()
    )
    check_monotonic(value, previous.reading if previous else None)
    if following and value > following.reading:
        raise ValueError(
            f"Reading ({value:g}) must be less than or equal to the next reading "
            f"({following.reading:g}). Set allowDecrease=true for corrections.")


def refresh_meter_last_reading(db: Session, meter: Meter):
    """Point the meter at its newest remaining reading."""
    latest = (
        db.query(MeterReading)
        .filter(MeterReading.meter_id == meter.id)
        .order_by(MeterReading.reading_date.desc(), MeterReading.created_at.desc())
        .first()
    )
    meter.last_reading = latest.reading if latest else None
    meter.last_reading_date = latest.reading_date if latest else None


def get_list(db: Session, org_id: UUID, params: MeterReadingRequest):
    query = db.query(MeterReading).filter(MeterReading.org_id == org_id)
    if params.meter_id:
        query = query.filter(MeterReading.meter_id == parse_id(params.meter_id))
    if params.start_date:
        query = query.filter(MeterReading.reading_date >= params.start_date)
    if params.end_date:
        query = query.filter(MeterReading.reading_date <= params.end_date)

    rows, total = paginate(query.order_by(MeterReading.reading_date.desc()), params)
    return {"readings": [MeterReadingOut.model_validate(r) for r in rows], "total": total}


def get_by_id(db: Session, reading_id, org_id: Optional[UUID] = None) -> Optional[MeterReading]:
    return get_scoped(db, MeterReading, reading_id, org_id)


def get_latest(db: Session, meter_id, org_id: Optional[UUID] = None) -> Optional[MeterReading]:
    query = db.query(MeterReading).filter(MeterReading.meter_id == parse_id(meter_id))
    if org_id:
        query = query.filter(MeterReading.org_id == org_id)
    return query.order_by(MeterReading.reading_date.desc()).first()


def create(db: Session, org_id: UUID, payload: MeterReadingCreate,
           user_id: Optional[str] = None) -> MeterReading:
    data = payload.model_dump()
    allow_decrease = data.pop("allow_decrease", False)

    meter = ensure_same_org(db, Meter, data["meter_id"], org_id, "Meter")
    _check_value(data["reading"])
    check_monotonic(data["reading"], meter.last_reading, allow_decrease)

    data["reading_date"] = data.get("reading_date") or utc_now()
    reading = MeterReading(**data, org_id=org_id, read_by=parse_id(user_id))
    db.add(reading)

    if meter.last_reading_date is None or reading.reading_date >= meter.last_reading_date:
        meter.last_reading = reading.reading
        meter.last_reading_date = reading.reading_date

    db.commit()
    db.refresh(reading)
    return reading


def update(db: Session, reading_id, org_id: UUID,
           payload: MeterReadingUpdate) -> Optional[MeterReading]:
    reading = get_by_id(db, reading_id, org_id)
    if not reading:
        return None

    data = payload.model_dump(exclude_unset=True)
    allow_decrease = data.pop("allow_decrease", False)
    meter = db.query(Meter).filter(Meter.id == reading.meter_id).first()

    if "reading" in data:
        _check_value(data["reading"])
    if ("reading" in data or data.get("reading_date")) and not allow_decrease:
        check_neighbours(db, reading, data.get("reading", reading.reading),
                         data.get("reading_date") or reading.reading_date)

    apply_updates(reading, data)
    db.flush()
    if meter:
        refresh_meter_last_reading(db, meter)
    db.commit()
    db.refresh(reading)
    return reading


def delete(db: Session, reading_id, org_id: UUID) -> bool:
    reading = get_by_id(db, reading_id, org_id)
    if not reading:
        return False
    meter = db.query(Meter).filter(Meter.id == reading.meter_id).first()
    db.delete(reading)
    db.flush()
    if meter:
        refresh_meter_last_reading(db, meter)
    db.commit()
    return True


def calculate_consumption(db: Session, meter_id, start_date: datetime, end_date: datetime,
                          org_id: Optional[UUID] = None) -> Optional[float]:
    """Last minus first reading in the range; None with fewer than two readings."""
    if org_id:
        ensure_same_org(db, Meter, meter_id, org_id, "Meter")
    readings = (
        db.query(MeterReading.reading)
        .filter(MeterReading.meter_id == parse_id(meter_id),
                MeterReading.reading_date >= start_date,
                MeterReading.reading_date <= end_date)
        .order_by(MeterReading.reading_date.asc())
        .all()
    )
    if len(readings) < 2:
        return None
    return round(readings[-1][0] - readings[0][0], 4)
