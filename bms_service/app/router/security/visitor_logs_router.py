from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.security import visitor_logs_crud as crud
from ...schemas.security.visitor_logs_schemas import (
    VisitorExitRequest, VisitorLogCreate, VisitorLogListResponse, VisitorLogOut,
    VisitorLogRequest, VisitorLogUpdate
)

router = APIRouter(
    prefix="/api/visitor-logs",
    tags=["visitor-logs"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=VisitorLogListResponse)
def list_visitor_logs(
    params: VisitorLogRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.get("/active", response_model=VisitorLogListResponse)
def list_active_visitors(
    building_id: Optional[str] = Query(None, alias="buildingId"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "list", "read"))
):
    logs = crud.find_active(db, resolve_org_id(current_user), building_id)
    return {"visitor_logs": logs, "total": len(logs)}


@router.post("", response_model=VisitorLogOut, status_code=201)
def log_entry(
    payload: VisitorLogCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "log_entry", "update"))
):
    return crud.create(db, resolve_org_id(current_user), payload, current_user.user_id)


@router.get("/{log_id}", response_model=VisitorLogOut)
def get_visitor_log(
    log_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "read"))
):
    log = crud.get_by_id(db, log_id, resolve_org_id(current_user))
    if not log:
        return not_found("Visitor log")
    return log


@router.patch("/{log_id}", response_model=VisitorLogOut)
def update_visitor_log(
    log_id: str,
    payload: VisitorLogUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "update"))
):
    log = crud.update(db, log_id, resolve_org_id(current_user), payload)
    if not log:
        return not_found("Visitor log")
    return log


@router.post("/{log_id}/exit", response_model=VisitorLogOut)
def log_exit(
    log_id: str,
    payload: VisitorExitRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "log_exit", "update"))
):
    log = crud.log_exit(db, log_id, resolve_org_id(current_user), payload.exit_time)
    if not log:
        return not_found("Visitor log")
    return log


@router.delete("/{log_id}", response_model=MessageOut)
def delete_visitor_log(
    log_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "update"))
):
    if not crud.delete(db, log_id, resolve_org_id(current_user)):
        return not_found("Visitor log")
    return {"message": "Visitor log deleted"}
