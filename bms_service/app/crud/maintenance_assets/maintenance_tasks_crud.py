import logging
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now

from ...models.maintenance_assets.assets import Asset
from ...models.maintenance_assets.maintenance_tasks import MaintenanceTask
from ...models.maintenance_assets.work_orders import WorkOrder
from ...models.space_sites.buildings import Building
from ...schemas.maintenance_assets.maintenance_tasks_schemas import (
    MaintenanceTaskCreate, MaintenanceTaskOut, MaintenanceTaskRequest, MaintenanceTaskUpdate
)
from ..common.references import apply_updates, ensure_same_org, get_scoped, json_ready, paginate

logger = logging.getLogger(__name__)

DUE_WINDOW_DAYS = 7
FINAL_STATUSES = ("completed", "cancelled")
OPEN_WORK_ORDER_STATUSES = ("open", "assigned", "in_progress")

FREQUENCY_STEPS = {
    "hours": lambda n: relativedelta(hours=n),
    "days": lambda n: relativedelta(days=n),
    "weeks": lambda n: relativedelta(weeks=n),
    "months": lambda n: relativedelta(months=n),
}


def advance_due_date(start: datetime, frequency: Optional[dict]) -> Optional[datetime]:
    if not frequency:
        return None
    step = FREQUENCY_STEPS.get(frequency.get("unit"))
    if not step:
        return None
    return start + step(int(frequency.get("interval") or 1))


def compute_status(task: MaintenanceTask, now: Optional[datetime] = None) -> str:
    if task.status in FINAL_STATUSES:
        return task.status
    if not task.next_due_date:
        return "pending"
    now = now or utc_now()
    if task.next_due_date < now:
        return "overdue"
    if task.next_due_date <= now + timedelta(days=DUE_WINDOW_DAYS):
        return "due"
    return "pending"


def _validate(data: dict):
    if not data.get("task_name") or not data.get("description") or not data.get("schedule_type"):
        raise ValueError("taskName, description, and scheduleType are required")
    if data["schedule_type"] == "time-based" and not data.get("frequency"):
        raise ValueError("frequency is required for time-based schedules")
    if data["schedule_type"] == "usage-based" and not data.get("usage_threshold"):
        raise ValueError("usageThreshold is required for usage-based schedules")


def _check_references(db: Session, org_id: UUID, data: dict):
    if data.get("asset_id"):
        ensure_same_org(db, Asset, data["asset_id"], org_id, "Asset")
    if data.get("building_id"):
        ensure_same_org(db, Building, data["building_id"], org_id, "Building")


def refresh_statuses(db: Session, org_id: UUID, now: Optional[datetime] = None) -> int:
    """Persist due/overdue statuses that have changed with the passage of time."""
    changed = 0
    tasks = db.query(MaintenanceTask).filter(
        MaintenanceTask.org_id == org_id,
        MaintenanceTask.status.notin_(FINAL_STATUSES),
    ).all()
    for task in tasks:
        status = compute_status(task, now)
        if status != task.status:
            task.status = status
            changed += 1
    if changed:
        db.commit()
    return changed


def get_list(db: Session, org_id: UUID, params: MaintenanceTaskRequest):
    refresh_statuses(db, org_id)
    query = db.query(MaintenanceTask).filter(MaintenanceTask.org_id == org_id)
    if params.asset_id:
        query = query.filter(MaintenanceTask.asset_id == parse_id(params.asset_id))
    if params.building_id:
        query = query.filter(MaintenanceTask.building_id == parse_id(params.building_id))
    if params.status:
        query = query.filter(MaintenanceTask.status == params.status)
    if params.schedule_type:
        query = query.filter(MaintenanceTask.schedule_type == params.schedule_type)
    if params.search:
        query = query.filter(MaintenanceTask.task_name.ilike(f"%{params.search}%"))

    rows, total = paginate(query.order_by(MaintenanceTask.next_due_date.asc()), params)
    return {"maintenance_tasks": [MaintenanceTaskOut.model_validate(t) for t in rows],
            "total": total}


def get_by_id(db: Session, task_id, org_id: Optional[UUID] = None) -> Optional[MaintenanceTask]:
    return get_scoped(db, MaintenanceTask, task_id, org_id)


def create(db: Session, org_id: UUID, payload: MaintenanceTaskCreate) -> MaintenanceTask:
    data = json_ready(payload, payload.model_dump(), ("frequency",))
    _validate(data)
    _check_references(db, org_id, data)

    task = MaintenanceTask(**data, org_id=org_id)
    if task.schedule_type == "time-based" and not task.next_due_date:
        task.next_due_date = advance_due_date(task.last_performed or utc_now(), task.frequency)
    task.status = compute_status(task)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update(db: Session, task_id, org_id: UUID, payload: MaintenanceTaskUpdate) -> Optional[MaintenanceTask]:
    task = get_by_id(db, task_id, org_id)
    if not task:
        return None

    data = json_ready(payload, payload.model_dump(exclude_unset=True), ("frequency",))
    merged = {
        "task_name": data.get("task_name", task.task_name),
        "description": data.get("description", task.description),
        "schedule_type": data.get("schedule_type", task.schedule_type),
        "frequency": data.get("frequency", task.frequency),
        "usage_threshold": data.get("usage_threshold", task.usage_threshold),
    }
    _validate(merged)
    _check_references(db, org_id, data)

    apply_updates(task, data)
    if "status" not in data or data["status"] not in FINAL_STATUSES:
        if task.status in FINAL_STATUSES and "next_due_date" in data:
            task.status = "pending"
        task.status = compute_status(task)
    db.commit()
    db.refresh(task)
    return task


def complete(db: Session, task_id, org_id: UUID,
             performed_at: Optional[datetime] = None) -> Optional[MaintenanceTask]:
    task = get_by_id(db, task_id, org_id)
    if not task:
        return None
    if task.status == "cancelled":
        raise ValueError("Cancelled tasks cannot be completed")

    performed_at = performed_at or utc_now()
    task.last_performed = performed_at
    if task.schedule_type == "time-based":
        task.next_due_date = advance_due_date(performed_at, task.frequency)
        task.status = "pending"
        task.status = compute_status(task)
    else:
        task.status = "completed"
    db.commit()
    db.refresh(task)
    logger.info(f"Maintenance task {task.id} completed; next due {task.next_due_date}")
    return task


def find_due(db: Session, org_id: UUID, days_ahead: int = DUE_WINDOW_DAYS) -> List[MaintenanceTask]:
    refresh_statuses(db, org_id)
    horizon = utc_now() + timedelta(days=days_ahead)
    return (
        db.query(MaintenanceTask)
        .filter(MaintenanceTask.org_id == org_id,
                MaintenanceTask.status.notin_(FINAL_STATUSES),
                MaintenanceTask.next_due_date.isnot(None),
                MaintenanceTask.next_due_date <= horizon)
        .order_by(MaintenanceTask.next_due_date.asc())
        .all()
    )


def _has_open_work_order(db: Session, task_id: UUID) -> bool:
    return db.query(WorkOrder.id).filter(
        WorkOrder.maintenance_task_id == task_id,
        WorkOrder.status.in_(OPEN_WORK_ORDER_STATUSES),
    ).first() is not None


def generate_work_orders(db: Session, org_id: UUID, user_id: Optional[str] = None) -> List[WorkOrder]:
    refresh_statuses(db, org_id)
    tasks = db.query(MaintenanceTask).filter(
        MaintenanceTask.org_id == org_id,
        MaintenanceTask.status.in_(("due", "overdue")),
        MaintenanceTask.auto_generate_work_order.is_(True),
    ).all()

    created = []
    for task in tasks:
        if _has_open_work_order(db, task.id):
            continue
        building_id = task.building_id
        if not building_id and task.asset_id:
            asset = db.query(Asset).filter(Asset.id == task.asset_id).first()
            building_id = asset.building_id if asset else None
        if not building_id:
            logger.warning(f"Maintenance task {task.id} has no building; work order skipped")
            continue

        order = WorkOrder(
            org_id=org_id,
            building_id=building_id,
            asset_id=task.asset_id,
            maintenance_task_id=task.id,
            title=f"Scheduled maintenance: {task.task_name}",
            description=task.description,
            category="other",
            priority="high" if task.status == "overdue" else "medium",
            status="open",
            assigned_to=task.assigned_to,
            estimated_cost=task.estimated_cost,
            scheduled_date=task.next_due_date,
            created_by=parse_id(user_id),
        )
        db.add(order)
        created.append(order)

    db.commit()
    for order in created:
        db.refresh(order)
    logger.info(f"Generated {len(created)} work orders from maintenance tasks for org {org_id}")
    return created


def delete(db: Session, task_id, org_id: UUID) -> bool:
    task = get_by_id(db, task_id, org_id)
    if not task:
        return False
    db.delete(task)
    db.commit()
    return True
