from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.maintenance_assets import work_orders_crud as crud
from ...schemas.maintenance_assets.work_orders_schemas import (
    WorkOrderComplete, WorkOrderCreate, WorkOrderListResponse, WorkOrderOut, WorkOrderRequest,
    WorkOrderStatusUpdate, WorkOrderUpdate
)

router = APIRouter(
    prefix="/api/work-orders",
    tags=["work-orders"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=WorkOrderListResponse)
def list_work_orders(
    params: WorkOrderRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.get("/overview")
def get_work_orders_overview(
    params: WorkOrderRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "list", "read"))
):
    return crud.work_orders_overview(db, resolve_org_id(current_user, params.organization_id))


@router.post("", response_model=WorkOrderOut, status_code=201)
def create_work_order(
    payload: WorkOrderCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "create"))
):
    return crud.create(db, resolve_org_id(current_user), payload, current_user.user_id)


@router.get("/{order_id}", response_model=WorkOrderOut)
def get_work_order(
    order_id: str,
    params: WorkOrderRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "read"))
):
    order = crud.get_by_id(db, order_id, resolve_org_id(current_user, params.organization_id))
    if not order:
        return not_found("Work order")
    return order


@router.patch("/{order_id}", response_model=WorkOrderOut)
def update_work_order(
    order_id: str,
    payload: WorkOrderUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "update"))
):
    order = crud.update(db, order_id, resolve_org_id(current_user), payload)
    if not order:
        return not_found("Work order")
    return order


@router.patch("/{order_id}/status", response_model=WorkOrderOut)
def update_work_order_status(
    order_id: str,
    payload: WorkOrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "update", "assign"))
):
    order = crud.update_status(db, order_id, resolve_org_id(current_user),
                               payload.status, payload.assigned_to)
    if not order:
        return not_found("Work order")
    return order


@router.post("/{order_id}/complete", response_model=WorkOrderOut)
def complete_work_order(
    order_id: str,
    payload: WorkOrderComplete,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "complete", "update"))
):
    order = crud.complete(db, order_id, resolve_org_id(current_user),
                          payload.actual_cost, payload.notes)
    if not order:
        return not_found("Work order")
    return order


@router.delete("/{order_id}", response_model=MessageOut)
def delete_work_order(
    order_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "update"))
):
    if not crud.delete(db, order_id, resolve_org_id(current_user)):
        return not_found("Work order")
    return {"message": "Work order deleted"}
