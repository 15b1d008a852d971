from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.maintenance_assets import maintenance_tasks_crud as crud
from ...schemas.maintenance_assets.maintenance_tasks_schemas import (
    GeneratedWorkOrders, MaintenanceTaskComplete, MaintenanceTaskCreate, MaintenanceTaskListResponse,
    MaintenanceTaskOut, MaintenanceTaskRequest, MaintenanceTaskUpdate
)

router = APIRouter(
    prefix="/api/maintenance-tasks",
    tags=["maintenance-tasks"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=MaintenanceTaskListResponse)
def list_tasks(
    params: MaintenanceTaskRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.get("/due", response_model=MaintenanceTaskListResponse)
def list_due_tasks(
    days_ahead: int = Query(crud.DUE_WINDOW_DAYS, alias="daysAhead", ge=0),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "list", "read"))
):
    tasks = crud.find_due(db, resolve_org_id(current_user), days_ahead)
    return {"maintenance_tasks": tasks, "total": len(tasks)}


@router.post("/generate-work-orders", response_model=GeneratedWorkOrders)
def generate_work_orders(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "create"))
):
    orders = crud.generate_work_orders(db, resolve_org_id(current_user), current_user.user_id)
    return {"created": len(orders), "work_order_ids": [o.id for o in orders]}


@router.post("", response_model=MaintenanceTaskOut, status_code=201)
def create_task(
    payload: MaintenanceTaskCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "create", "schedule"))
):
    return crud.create(db, resolve_org_id(current_user), payload)


@router.get("/{task_id}", response_model=MaintenanceTaskOut)
def get_task(
    task_id: str,
    params: MaintenanceTaskRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "read"))
):
    task = crud.get_by_id(db, task_id, resolve_org_id(current_user, params.organization_id))
    if not task:
        return not_found("Maintenance task")
    return task


@router.patch("/{task_id}", response_model=MaintenanceTaskOut)
def update_task(
    task_id: str,
    payload: MaintenanceTaskUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "update", "schedule"))
):
    task = crud.update(db, task_id, resolve_org_id(current_user), payload)
    if not task:
        return not_found("Maintenance task")
    return task


@router.post("/{task_id}/complete", response_model=MaintenanceTaskOut)
def complete_task(
    task_id: str,
    payload: MaintenanceTaskComplete,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "complete", "update"))
):
    task = crud.complete(db, task_id, resolve_org_id(current_user), payload.performed_at)
    if not task:
        return not_found("Maintenance task")
    return task


@router.delete("/{task_id}", response_model=MessageOut)
def delete_task(
    task_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "update", "schedule"))
):
    if not crud.delete(db, task_id, resolve_org_id(current_user)):
        return not_found("Maintenance task")
    return {"message": "Maintenance task deleted"}
