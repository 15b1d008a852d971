from typing import Iterable, Optional, Type
from uuid import UUID

from pydantic.alias_generators import to_camel
from sqlalchemy import inspect
from sqlalchemy.orm import Session

from shared.core.database import parse_id

IMMUTABLE_FIELDS = ("id", "org_id", "created_at", "updated_at")


def get_scoped(db: Session, model: Type, record_id, org_id: Optional[UUID] = None):
    """Fetch a record by id, hidden when it belongs to another organization."""
    rid = parse_id(record_id)
    if not rid:
        return None
    query = db.query(model).filter(model.id == rid)
    if org_id is not None:
        query = query.filter(model.org_id == org_id)
    return query.first()


def ensure_same_org(db: Session, model: Type, record_id, org_id: UUID, label: str):
    """Validate a cross-reference at write time and return the referenced record."""
    rid = parse_id(record_id)
    record = db.query(model).filter(model.id == rid).first() if rid else None
    if not record:
        raise ValueError(f"{label} not found")
    if record.org_id != org_id:
        raise ValueError(f"{label} does not belong to the same organization")
    return record


def apply_updates(record, data: dict, immutable: Iterable[str] = IMMUTABLE_FIELDS):
    """Copy a partial update onto a record; explicit nulls on required columns are rejected."""
    columns = inspect(record).mapper.columns
    for key, value in data.items():
        if key in immutable:
            continue
        column = columns.get(key)
        if value is None and column is not None and not column.nullable:
            raise ValueError(f"{to_camel(key)} cannot be empty")
        setattr(record, key, value)
    return record


def paginate(query, params):
    total = query.count()
    if params.skip:
        query = query.offset(params.skip)
    if params.limit:
        query = query.limit(params.limit)
    return query.all(), total


def json_ready(payload, data: dict, fields: Iterable[str], exclude_unset: bool = False) -> dict:
    """Re-dump nested models bound for JSON columns so dates become ISO strings."""
    for key in fields:
        value = getattr(payload, key, None)
        if key in data and value is not None:
            if isinstance(value, list):
                data[key] = [v.model_dump(mode="json", exclude_unset=exclude_unset)
                             if hasattr(v, "model_dump") else v for v in value]
            elif hasattr(value, "model_dump"):
                data[key] = value.model_dump(mode="json", exclude_unset=exclude_unset)
    return data
