"""Floor-based rent pricing and the building-wide bulk rent update."""
import logging
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from shared.helpers.email_helper import notify_rent_change

from ...enum.leasing_tenants_enum import RateSource
from ...models.leasing_tenants.leases import Lease
from ...models.leasing_tenants.tenants import Tenant
from ...models.space_sites.buildings import Building
from ...models.space_sites.units import Unit
from ...schemas.leasing_tenants.rent_schemas import RentBulkUpdateRequest
from ..common.references import ensure_same_org

logger = logging.getLogger(__name__)

DEFAULT_POLICY = {
    "base_rate_per_sqm": None,
    "decrement_per_floor": 0,
    "ground_floor_multiplier": 1,
    "min_rate_per_sqm": None,
    "effective_date": None,
    "floor_overrides": [],
}


def merge_policy(stored: Optional[Dict[str, Any]], incoming: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Overlay the provided policy fields on the stored building policy."""
    merged = {**DEFAULT_POLICY, **(stored or {})}
    for key, value in (incoming or {}).items():
        if value is not None:
            merged[key] = value
    return merged


def _clamp(rate: float, policy: Dict[str, Any]) -> float:
    minimum = policy.get("min_rate_per_sqm")
    if minimum is not None:
        rate = max(rate, minimum)
    return max(rate, 0.0)


def floor_rate(floor: Optional[int], policy: Dict[str, Any]) -> Tuple[float, str]:
    """Rate per square meter for a floor, before unit-level overrides."""
    floor = floor or 0
    for override in policy.get("floor_overrides") or []:
        if override.get("floor") == floor:
            return _clamp(float(override["rate_per_sqm"]), policy), RateSource.floor_override.value

    base = policy.get("base_rate_per_sqm")
    if base is None:
        raise ValueError("Rent policy requires baseRatePerSqm")

    if floor == 0:
        rate = base * (policy.get("ground_floor_multiplier") or 1)
    else:
        rate = base - (policy.get("decrement_per_floor") or 0) * floor

    return _clamp(rate, policy), RateSource.policy.value


def calculate_unit_rent(unit: Unit, policy: Dict[str, Any]) -> Dict[str, Any]:
    """
    Monthly rent for a unit.

    Precedence: flat rent override, unit rate override, floor override,
    then the policy formula (base rate adjusted per floor, clamped to the minimum).
    """
    if unit.flat_rent_override is not None:
        return {
            "rate_per_sqm": None,
            "rent": round(float(unit.flat_rent_override), 2),
            "rate_source": RateSource.flat_override.value,
        }

    if unit.rate_per_sqm_override is not None:
        rate, source = float(unit.rate_per_sqm_override), RateSource.unit_override.value
    else:
        rate, source = floor_rate(unit.floor, policy)

    if not unit.area:
        raise ValueError(f'Unit "{unit.unit_number}" has no area; cannot price by rate')

    return {
        "rate_per_sqm": round(rate, 4),
        "rent": round(rate * unit.area, 2),
        "rate_source": source,
    }


def _apply_unit_overrides(db: Session, org_id: UUID, building: Building, overrides):
    for override in overrides or []:
        unit = ensure_same_org(db, Unit, override["unit_id"], org_id, "Unit")
        if unit.building_id != building.id:
            raise ValueError(f'Unit "{unit.unit_number}" is not in this building')
        if "rate_per_sqm_override" in override:
            unit.rate_per_sqm_override = override["rate_per_sqm_override"]
        if "flat_rent_override" in override:
            unit.flat_rent_override = override["flat_rent_override"]


def _notify(db: Session, lease: Lease, old_rent: float, new_rent: float, effective_from):
    try:
        tenant = db.query(Tenant).filter(Tenant.id == lease.tenant_id).first()
        if tenant:
            notify_rent_change(tenant, old_rent, new_rent, effective_from)
    except Exception:
        logger.exception(f"Rent change notification failed for lease {lease.id}")


def bulk_update(db: Session, org_id: UUID, payload: RentBulkUpdateRequest):
    building = ensure_same_org(db, Building, payload.building_id, org_id, "Building")
    incoming = payload.policy.model_dump(exclude_unset=True) if payload.policy else {}
    policy = merge_policy(building.rent_policy, incoming)

    if payload.apply:
        overrides = [o.model_dump(exclude_unset=True) for o in payload.unit_overrides or []]
        _apply_unit_overrides(db, org_id, building, overrides)
        building.rent_policy = policy
        db.flush()

    units_query = db.query(Unit).filter(Unit.building_id == building.id,
                                        Unit.org_id == org_id)
    if payload.floor_filter:
        if payload.floor_filter.from_floor is not None:
            units_query = units_query.filter(Unit.floor >= payload.floor_filter.from_floor)
        if payload.floor_filter.to_floor is not None:
            units_query = units_query.filter(Unit.floor <= payload.floor_filter.to_floor)
    units = units_query.order_by(Unit.floor.asc(), Unit.unit_number.asc()).all()

    # preview prices with the requested overrides without persisting them
    preview_overrides = {}
    if not payload.apply:
        for o in payload.unit_overrides or []:
            preview_overrides[o.unit_id] = o.model_dump(exclude_unset=True)

    effective_from = payload.effective_from
    results = []
    for unit in units:
        override = preview_overrides.get(unit.id) or {}
        flat = override.get("flat_rent_override", unit.flat_rent_override)
        if flat is None and not unit.area:
            logger.warning(f"Skipping unit {unit.id}: no area and no flat rent override")
            continue
        pricing = _price_unit(unit, policy, override)
        leases = db.query(Lease).filter(Lease.unit_id == unit.id,
                                        Lease.status == "active").all()
        for lease in leases:
            old_rent = float(lease.rent_amount or 0)
            new_rent = pricing["rent"]
            results.append({
                "lease_id": lease.id,
                "unit_id": unit.id,
                "unit_number": unit.unit_number,
                "floor": unit.floor,
                "old_rent": old_rent,
                "new_rent": new_rent,
                "rate_source": pricing["rate_source"],
            })
            if payload.apply:
                lease.rent_amount = new_rent
                lease.rent_breakdown = {
                    "rate_per_sqm": pricing["rate_per_sqm"],
                    "area": unit.area,
                    "rate_source": pricing["rate_source"],
                    "previous_rent": old_rent,
                    "effective_from": effective_from.isoformat() if effective_from else policy.get("effective_date"),
                }
        if payload.apply:
            unit.rent_amount = pricing["rent"]

    if payload.apply:
        db.commit()
        for r in results:
            if r["old_rent"] != r["new_rent"]:
                lease = db.query(Lease).filter(Lease.id == r["lease_id"]).first()
                _notify(db, lease, r["old_rent"], r["new_rent"], effective_from)
        logger.info(f"Rent updates applied to {len(results)} leases in building {building.id}")
    else:
        db.rollback()

    return {
        "message": "Rent updates applied" if payload.apply else "Preview only",
        "count": len(results),
        "results": results,
    }


def _price_unit(unit: Unit, policy: Dict[str, Any], override: Optional[Dict[str, Any]] = None):
    if not override:
        return calculate_unit_rent(unit, policy)
    preview = Unit(
        unit_number=unit.unit_number,
        floor=unit.floor,
        area=unit.area,
        rate_per_sqm_override=override.get("rate_per_sqm_override", unit.rate_per_sqm_override),
        flat_rent_override=override.get("flat_rent_override", unit.flat_rent_override),
    )
    return calculate_unit_rent(preview, policy)
