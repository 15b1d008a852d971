import hashlib
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id

from ...models.system.feature_flags import FeatureFlag
from ...schemas.system.feature_flags_schemas import (
    FeatureFlagCreate, FeatureFlagOut, FeatureFlagUpdate
)
from ..common.references import apply_updates, get_scoped

GLOBAL_SCOPE_VALUES = ("null", "global")


def rollout_bucket(key: str, subject: str) -> int:
    """Deterministic 0-99 bucket for a subject within a flag."""
    digest = hashlib.sha256(f"{key}:{subject}".encode("utf-8")).hexdigest()
    return int(digest, 16) % 100


def get_list(db: Session, organization_id: Optional[str] = None):
    query = db.query(FeatureFlag)
    if organization_id:
        if organization_id.lower() in GLOBAL_SCOPE_VALUES:
            query = query.filter(FeatureFlag.org_id.is_(None))
        else:
            org_id = parse_id(organization_id)
            if not org_id:
                raise ValueError("Invalid organizationId")
            query = query.filter(FeatureFlag.org_id == org_id)

    rows = query.order_by(FeatureFlag.key.asc()).all()
    return {"feature_flags": [FeatureFlagOut.model_validate(f) for f in rows], "total": len(rows)}


def get_by_id(db: Session, flag_id) -> Optional[FeatureFlag]:
    return get_scoped(db, FeatureFlag, flag_id)


def find_flag(db: Session, key: str, org_id: Optional[UUID] = None) -> Optional[FeatureFlag]:
    query = db.query(FeatureFlag).filter(FeatureFlag.key == key)
    if org_id:
        query = query.filter(FeatureFlag.org_id == org_id)
    else:
        query = query.filter(FeatureFlag.org_id.is_(None))
    return query.first()


def create(db: Session, payload: FeatureFlagCreate) -> FeatureFlag:
    data = payload.model_dump()
    org_id = data.pop("organization_id", None)
    if not data.get("key") or not data.get("name"):
        raise ValueError("key and name are required")
    if find_flag(db, data["key"], org_id):
        raise ValueError("Feature flag with this key already exists")

    flag = FeatureFlag(**data, org_id=org_id)
    db.add(flag)
    db.commit()
    db.refresh(flag)
    return flag


def update(db: Session, flag_id, payload: FeatureFlagUpdate) -> Optional[FeatureFlag]:
    flag = get_by_id(db, flag_id)
    if not flag:
        return None
    apply_updates(flag, payload.model_dump(exclude_unset=True),
                  immutable=("id", "key", "org_id", "created_at", "updated_at"))
    db.commit()
    db.refresh(flag)
    return flag


def delete(db: Session, flag_id) -> bool:
    flag = get_by_id(db, flag_id)
    if not flag:
        return False
    db.delete(flag)
    db.commit()
    return True


def is_enabled(db: Session, key: str, org_id: Optional[UUID] = None,
               subject: Optional[str] = None) -> bool:
    """Organization flags override the global flag of the same key."""
    flag = (find_flag(db, key, org_id) if org_id else None) or find_flag(db, key)
    if not flag or not flag.enabled:
        return False
    if flag.rollout_percentage >= 100:
        return True
    if flag.rollout_percentage <= 0:
        return False
    subject = subject or (str(org_id) if org_id else "global")
    return rollout_bucket(key, subject) < flag.rollout_percentage
