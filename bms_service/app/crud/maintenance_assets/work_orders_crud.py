import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now

from ...models.maintenance_assets.assets import Asset
from ...models.maintenance_assets.work_orders import WorkOrder
from ...models.space_sites.buildings import Building
from ...models.space_sites.units import Unit
from ...schemas.maintenance_assets.work_orders_schemas import (
    WorkOrderCreate, WorkOrderOut, WorkOrderRequest, WorkOrderUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate

logger = logging.getLogger(__name__)


def _check_references(db: Session, org_id: UUID, data: dict):
    if data.get("building_id"):
        ensure_same_org(db, Building, data["building_id"], org_id, "Building")
    if data.get("unit_id"):
        ensure_same_org(db, Unit, data["unit_id"], org_id, "Unit")
    if data.get("asset_id"):
        ensure_same_org(db, Asset, data["asset_id"], org_id, "Asset")


def _apply_status(order: WorkOrder, status: str, assigned_to: Optional[UUID] = None):
    if assigned_to:
        order.assigned_to = assigned_to
        if order.status == "open" and status in (None, "open"):
            status = "assigned"

    if not status or status == order.status:
        return
    if status == "in_progress" and not order.started_at:
        order.started_at = utc_now()
    if status == "completed":
        order.completed_at = order.completed_at or utc_now()
    elif order.status == "completed":
        order.completed_at = None
    order.status = status


def get_list(db: Session, org_id: UUID, params: WorkOrderRequest):
    query = db.query(WorkOrder).filter(WorkOrder.org_id == org_id)
    if params.building_id:
        query = query.filter(WorkOrder.building_id == parse_id(params.building_id))
    if params.status:
        query = query.filter(WorkOrder.status == params.status)
    if params.priority:
        query = query.filter(WorkOrder.priority == params.priority)
    if params.category:
        query = query.filter(WorkOrder.category == params.category)
    if params.assigned_to:
        query = query.filter(WorkOrder.assigned_to == parse_id(params.assigned_to))
    if params.search:
        query = query.filter(WorkOrder.title.ilike(f"%{params.search}%"))

    rows, total = paginate(query.order_by(WorkOrder.created_at.desc()), params)
    return {"work_orders": [WorkOrderOut.model_validate(w) for w in rows], "total": total}


def get_by_id(db: Session, order_id, org_id: Optional[UUID] = None) -> Optional[WorkOrder]:
    return get_scoped(db, WorkOrder, order_id, org_id)


def find_by_building(db: Session, building_id, org_id: UUID) -> List[WorkOrder]:
    return (
        db.query(WorkOrder)
        .filter(WorkOrder.org_id == org_id, WorkOrder.building_id == parse_id(building_id))
        .order_by(WorkOrder.created_at.desc())
        .all()
    )


def find_by_technician(db: Session, user_id, org_id: UUID,
                       status: Optional[str] = None) -> List[WorkOrder]:
    query = db.query(WorkOrder).filter(WorkOrder.org_id == org_id,
                                       WorkOrder.assigned_to == parse_id(user_id))
    if status:
        query = query.filter(WorkOrder.status == status)
    return query.order_by(WorkOrder.scheduled_date.asc()).all()


def create(db: Session, org_id: UUID, payload: WorkOrderCreate,
           user_id: Optional[str] = None) -> WorkOrder:
    data = payload.model_dump()
    if not data.get("title") or not data.get("description") or not data.get("category"):
        raise ValueError("title, description, and category are required")
    _check_references(db, org_id, data)

    order = WorkOrder(**data, org_id=org_id, created_by=parse_id(user_id))
    order.status = "assigned" if order.assigned_to else "open"
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def update(db: Session, order_id, org_id: UUID, payload: WorkOrderUpdate) -> Optional[WorkOrder]:
    order = get_by_id(db, order_id, org_id)
    if not order:
        return None

    data = payload.model_dump(exclude_unset=True)
    for key in ("title", "description", "category"):
        if key in data and not data[key]:
            raise ValueError("title, description, and category are required")
    _check_references(db, org_id, data)

    status = data.pop("status", None)
    assigned_to = data.pop("assigned_to", None)
    apply_updates(order, data)
    _apply_status(order, status, assigned_to)
    db.commit()
    db.refresh(order)
    return order


def update_status(db: Session, order_id, org_id: UUID, status: str,
                  assigned_to: Optional[UUID] = None) -> Optional[WorkOrder]:
    order = get_by_id(db, order_id, org_id)
    if not order:
        return None
    _apply_status(order, status, assigned_to)
    db.commit()
    db.refresh(order)
    return order


def complete(db: Session, order_id, org_id: UUID, actual_cost: Optional[float] = None,
             notes: Optional[str] = None) -> Optional[WorkOrder]:
    order = get_by_id(db, order_id, org_id)
    if not order:
        return None
    if order.status == "cancelled":
        raise ValueError("Cancelled work orders cannot be completed")

    if actual_cost is not None:
        order.actual_cost = actual_cost
    if notes:
        order.notes = notes
    _apply_status(order, "completed")
    db.commit()
    db.refresh(order)
    logger.info(f"Work order {order.id} completed")
    return order


def delete(db: Session, order_id, org_id: UUID) -> bool:
    order = get_by_id(db, order_id, org_id)
    if not order:
        return False
    db.delete(order)
    db.commit()
    return True


def work_orders_overview(db: Session, org_id: UUID):
    rows = (
        db.query(WorkOrder.status, func.count(WorkOrder.id))
        .filter(WorkOrder.org_id == org_id)
        .group_by(WorkOrder.status)
        .all()
    )
    by_status = {status: count for status, count in rows}
    return {
        "totalWorkOrders": sum(by_status.values()),
        "openWorkOrders": by_status.get("open", 0) + by_status.get("assigned", 0),
        "inProgressWorkOrders": by_status.get("in_progress", 0),
        "completedWorkOrders": by_status.get("completed", 0),
    }
