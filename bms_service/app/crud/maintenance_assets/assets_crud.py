import logging
import math
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now
from shared.wrappers.empty_string_model_wrapper import to_naive_utc

from ...models.maintenance_assets.assets import Asset
from ...models.maintenance_assets.maintenance_history import MaintenanceHistory
from ...models.space_sites.buildings import Building
from ...models.space_sites.units import Unit
from ...schemas.maintenance_assets.assets_schemas import (
    AssetCreate, AssetOut, AssetRequest, AssetUpdate
)
from ...schemas.maintenance_assets.maintenance_history_schemas import (
    MaintenanceHistoryCreate, MaintenanceHistoryOut
)
from ..common.references import (
    apply_updates, ensure_same_org, get_scoped, json_ready, paginate
)

logger = logging.getLogger(__name__)

ASSET_JSON_FIELDS = ("warranty", "depreciation", "maintenance_schedule")
DAYS_PER_YEAR = 365.25


def _as_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return to_naive_utc(date_parser.isoparse(str(value)))


def _check_references(db: Session, org_id: UUID, data: dict):
    if data.get("building_id"):
        ensure_same_org(db, Building, data["building_id"], org_id, "Building")
    if data.get("unit_id"):
        ensure_same_org(db, Unit, data["unit_id"], org_id, "Unit")


def get_list(db: Session, org_id: UUID, params: AssetRequest):
    query = db.query(Asset).filter(Asset.org_id == org_id)
    if params.building_id:
        query = query.filter(Asset.building_id == parse_id(params.building_id))
    if params.unit_id:
        query = query.filter(Asset.unit_id == parse_id(params.unit_id))
    if params.asset_type:
        query = query.filter(Asset.asset_type == params.asset_type)
    if params.status:
        query = query.filter(Asset.status == params.status)
    if params.search:
        query = query.filter(Asset.name.ilike(f"%{params.search}%"))

    rows, total = paginate(query.order_by(Asset.name.asc()), params)
    return {"assets": [AssetOut.model_validate(a) for a in rows], "total": total}


def get_by_id(db: Session, asset_id, org_id: Optional[UUID] = None) -> Optional[Asset]:
    return get_scoped(db, Asset, asset_id, org_id)


def create(db: Session, org_id: UUID, payload: AssetCreate) -> Asset:
    data = json_ready(payload, payload.model_dump(), ASSET_JSON_FIELDS)
    if not data.get("name") or not data.get("asset_type"):
        raise ValueError("name and assetType are required")
    _check_references(db, org_id, data)

    asset = Asset(**data, org_id=org_id)
    if asset.current_value is None:
        asset.current_value = asset.purchase_price
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset


def update(db: Session, asset_id, org_id: UUID, payload: AssetUpdate) -> Optional[Asset]:
    asset = get_by_id(db, asset_id, org_id)
    if not asset:
        return None

    data = json_ready(payload, payload.model_dump(exclude_unset=True),
                      ASSET_JSON_FIELDS, exclude_unset=True)
    _check_references(db, org_id, data)
    # nested objects are merged, not replaced
    for key in ASSET_JSON_FIELDS:
        if isinstance(data.get(key), dict):
            data[key] = {**(getattr(asset, key) or {}), **data[key]}

    apply_updates(asset, data)
    db.commit()
    db.refresh(asset)
    return asset


def delete(db: Session, asset_id, org_id: UUID) -> bool:
    """Assets are retired, never removed: status becomes disposed."""
    asset = get_by_id(db, asset_id, org_id)
    if not asset:
        return False
    asset.status = "disposed"
    db.commit()
    return True


# ----------------------------------------------------------------- depreciation

def calculate_depreciation(asset: Asset, as_of: Optional[datetime] = None) -> dict:
    config = asset.depreciation or {}
    method = config.get("method") or "straight-line"
    life = config.get("useful_life_years")
    if not life or life <= 0:
        raise ValueError("Useful life must be greater than zero")
    if asset.purchase_price is None:
        raise ValueError("Asset has no purchase price")

    price = float(asset.purchase_price)
    salvage = min(float(config.get("salvage_value") or 0), price)
    start = _as_datetime(config.get("depreciation_start_date")) \
        or asset.purchase_date or asset.created_at
    as_of = as_of or utc_now()
    years = max(0.0, (as_of - start).total_seconds() / 86400 / DAYS_PER_YEAR)

    if method == "declining-balance":
        rate = min(2.0 / life, 1.0)
        value = max(price * (1 - rate) ** years, salvage)
        year_start_value = max(price * (1 - rate) ** math.floor(years), salvage)
        annual = min(year_start_value * rate, year_start_value - salvage)
    else:
        annual = (price - salvage) / life
        value = max(price - annual * years, salvage)

    return {
        "method": method,
        "annual_depreciation": round(annual, 2),
        "accumulated_depreciation": round(price - value, 2),
        "current_value": round(value, 2),
        "years_elapsed": round(years, 2),
    }


# ----------------------------------------------------------------- maintenance history

def list_history(db: Session, asset_id, org_id: UUID, limit: Optional[int] = None):
    query = db.query(MaintenanceHistory).filter(
        MaintenanceHistory.asset_id == parse_id(asset_id),
        MaintenanceHistory.org_id == org_id,
    ).order_by(MaintenanceHistory.performed_at.desc())
    total = query.count()
    if limit:
        query = query.limit(limit)
    return {"history": [MaintenanceHistoryOut.model_validate(h) for h in query.all()],
            "total": total}


def add_history(db: Session, asset_id, org_id: UUID,
                payload: MaintenanceHistoryCreate) -> Optional[MaintenanceHistory]:
    asset = get_by_id(db, asset_id, org_id)
    if not asset:
        return None

    data = json_ready(payload, payload.model_dump(), ("parts_used",))
    next_due = data.pop("next_maintenance_date", None)
    data["performed_at"] = data.get("performed_at") or utc_now()

    entry = MaintenanceHistory(**data, asset_id=asset.id, org_id=org_id)
    db.add(entry)

    schedule = dict(asset.maintenance_schedule or {})
    last = _as_datetime(schedule.get("last_maintenance_date"))
    if last is None or entry.performed_at >= last:
        schedule["last_maintenance_date"] = entry.performed_at.isoformat()
    if next_due:
        schedule["next_maintenance_date"] = next_due.isoformat()
    asset.maintenance_schedule = schedule

    db.commit()
    db.refresh(entry)
    logger.info(f"Recorded {entry.maintenance_type} maintenance for asset {asset.id}")
    return entry


# ----------------------------------------------------------------- reliability

def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def reliability_score(count: int, period_months: int, avg_downtime: float, avg_cost: float) -> int:
    frequency = _clamp(100 - 10 * max(0, count - period_months))
    downtime = _clamp(100 - 5 * max(0.0, avg_downtime - 8))
    cost = _clamp(100 - (avg_cost - 10000) / 100) if avg_cost > 10000 else 100.0
    return round(0.3 * frequency + 0.4 * downtime + 0.3 * cost)


def _entry_cost(entry: MaintenanceHistory) -> float:
    parts = sum(float(p.get("cost") or 0) * float(p.get("quantity") or 0)
                for p in entry.parts_used or [])
    return float(entry.cost or 0) + parts


def calculate_reliability(db: Session, asset_id, org_id: UUID, period_months: int = 12) -> Optional[dict]:
    asset = get_by_id(db, asset_id, org_id)
    if not asset:
        return None

    now = utc_now()
    since = now - relativedelta(months=period_months)
    history: List[MaintenanceHistory] = (
        db.query(MaintenanceHistory)
        .filter(MaintenanceHistory.asset_id == asset.id,
                MaintenanceHistory.performed_at >= since,
                MaintenanceHistory.performed_at <= now)
        .order_by(MaintenanceHistory.performed_at.desc())
        .all()
    )

    count = len(history)
    counts_by_type = {"preventive": 0, "corrective": 0, "emergency": 0}
    for h in history:
        counts_by_type[h.maintenance_type] = counts_by_type.get(h.maintenance_type, 0) + 1

    total_cost = sum(_entry_cost(h) for h in history)
    total_downtime = sum(float(h.downtime_hours or 0) for h in history)
    avg_cost = total_cost / count if count else 0.0
    avg_downtime = total_downtime / count if count else 0.0

    schedule = asset.maintenance_schedule or {}
    last_date = history[0].performed_at if history \
        else _as_datetime(schedule.get("last_maintenance_date"))

    return {
        "asset_id": asset.id,
        "period_months": period_months,
        "total_maintenance_count": count,
        "counts_by_type": counts_by_type,
        "total_cost": round(total_cost, 2),
        "average_cost": round(avg_cost, 2),
        "total_downtime_hours": round(total_downtime, 2),
        "average_downtime_hours": round(avg_downtime, 2),
        "average_days_between_maintenance":
            round(period_months * 30 / (count - 1), 2) if count > 1 else None,
        "last_maintenance_date": last_date,
        "next_maintenance_date": _as_datetime(schedule.get("next_maintenance_date")),
        "reliability_score": reliability_score(count, period_months, avg_downtime, avg_cost),
    }
