import logging
import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now
from shared.models.users import Users

from ...models.leasing_tenants.tenants import Tenant
from ...models.security.access_permissions import AccessPermission
from ...models.space_sites.buildings import Building
from ...schemas.security.access_permissions_schemas import (
    AccessPermissionCreate, AccessPermissionOut, AccessPermissionRequest, AccessPermissionUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, json_ready, paginate

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")


def _minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def validate_time(value: Optional[str]):
    if not value or not TIME_PATTERN.match(value):
        raise ValueError(f"Invalid time format: {value}. Expected HH:mm format.")


def validate_restrictions(restrictions: Optional[dict]):
    if not restrictions:
        return
    for window in restrictions.get("time_windows") or []:
        day = window.get("day_of_week")
        if day is None or day < 0 or day > 6:
            raise ValueError("dayOfWeek must be between 0 and 6")
        validate_time(window.get("start_time"))
        validate_time(window.get("end_time"))
        if _minutes(window["end_time"]) <= _minutes(window["start_time"]):
            raise ValueError("endTime must be after startTime")


def validate_period(valid_from: Optional[datetime], valid_until: Optional[datetime]):
    if valid_from and valid_until and valid_from >= valid_until:
        raise ValueError("validFrom must be before validUntil")


def validate_entity(db: Session, entity_type: str, entity_id: str, org_id: UUID):
    if not entity_id:
        raise ValueError("entityId is required")
    if entity_type == "tenant":
        ensure_same_org(db, Tenant, entity_id, org_id, "Tenant")
    elif entity_type == "staff":
        ensure_same_org(db, Users, entity_id, org_id, "User")


def _day_of_week(at: datetime) -> int:
    # Sunday is day 0
    return (at.weekday() + 1) % 7


def is_valid(permission: AccessPermission, at: Optional[datetime] = None) -> bool:
    at = at or utc_now()
    if permission.access_level == "denied":
        return False
    if permission.valid_from and at < permission.valid_from:
        return False
    if permission.valid_until and at > permission.valid_until:
        return False
    return True


def is_allowed_at_time(permission: AccessPermission, at: Optional[datetime] = None) -> bool:
    at = at or utc_now()
    if not is_valid(permission, at):
        return False
    if permission.access_level == "full":
        return True

    windows = (permission.restrictions or {}).get("time_windows")
    if not windows:
        return True
    day = _day_of_week(at)
    minute = at.hour * 60 + at.minute
    return any(
        w.get("day_of_week") == day
        and _minutes(w["start_time"]) <= minute <= _minutes(w["end_time"])
        for w in windows
    )


def find_by_entity(db: Session, building_id, entity_type: str, entity_id: str,
                   org_id: UUID) -> Optional[AccessPermission]:
    return db.query(AccessPermission).filter(
        AccessPermission.org_id == org_id,
        AccessPermission.building_id == parse_id(building_id),
        AccessPermission.entity_type == entity_type,
        AccessPermission.entity_id == str(entity_id),
    ).first()


def check_access(db: Session, org_id: UUID, building_id, entity_type: str, entity_id: str,
                 at: Optional[datetime] = None) -> dict:
    at = at or utc_now()
    permission = find_by_entity(db, building_id, entity_type, entity_id, org_id)
    if not permission:
        return {"allowed": False, "reason": "No access permission found"}

    if permission.access_level == "denied":
        return {"allowed": False, "reason": "Access denied for this entity"}
    if not is_valid(permission, at):
        return {"allowed": False, "reason": "Access permission is not valid at this time"}
    if not is_allowed_at_time(permission, at):
        return {"allowed": False, "reason": "Outside of allowed time windows"}
    return {"allowed": True, "reason": "Access granted"}


def get_list(db: Session, org_id: UUID, params: AccessPermissionRequest):
    query = db.query(AccessPermission).filter(AccessPermission.org_id == org_id)
    if params.building_id:
        query = query.filter(AccessPermission.building_id == parse_id(params.building_id))
    if params.entity_type:
        query = query.filter(AccessPermission.entity_type == params.entity_type)
    if params.entity_id:
        query = query.filter(AccessPermission.entity_id == params.entity_id)
    if params.access_level:
        query = query.filter(AccessPermission.access_level == params.access_level)

    rows, total = paginate(query.order_by(AccessPermission.created_at.desc()), params)
    return {"access_permissions": [AccessPermissionOut.model_validate(p) for p in rows],
            "total": total}


def get_by_id(db: Session, permission_id, org_id: Optional[UUID] = None) -> Optional[AccessPermission]:
    return get_scoped(db, AccessPermission, permission_id, org_id)


def create(db: Session, org_id: UUID, payload: AccessPermissionCreate,
           user_id: Optional[str] = None) -> AccessPermission:
    data = json_ready(payload, payload.model_dump(), ("restrictions",))
    ensure_same_org(db, Building, data["building_id"], org_id, "Building")
    validate_entity(db, data["entity_type"], data["entity_id"], org_id)
    validate_restrictions(data.get("restrictions"))
    validate_period(data.get("valid_from"), data.get("valid_until"))

    if find_by_entity(db, data["building_id"], data["entity_type"], data["entity_id"], org_id):
        raise ValueError("Access permission already exists for this entity in this building")

    permission = AccessPermission(**data, org_id=org_id, created_by=parse_id(user_id))
    db.add(permission)
    db.commit()
    db.refresh(permission)
    logger.info(f"Access permission {permission.id} created for "
                f"{permission.entity_type} {permission.entity_id}")
    return permission


def update(db: Session, permission_id, org_id: UUID,
           payload: AccessPermissionUpdate) -> Optional[AccessPermission]:
    permission = get_by_id(db, permission_id, org_id)
    if not permission:
        return None

    data = json_ready(payload, payload.model_dump(exclude_unset=True), ("restrictions",))
    if "restrictions" in data:
        validate_restrictions(data["restrictions"])
    validate_period(data.get("valid_from", permission.valid_from),
                    data.get("valid_until", permission.valid_until))

    apply_updates(permission, data)
    db.commit()
    db.refresh(permission)
    return permission


def delete(db: Session, permission_id, org_id: UUID) -> bool:
    permission = get_by_id(db, permission_id, org_id)
    if not permission:
        return False
    db.delete(permission)
    db.commit()
    return True
