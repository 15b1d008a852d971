from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.leasing_tenants import leases_crud as crud
from ...schemas.leasing_tenants.leases_schemas import (
    LeaseCreate, LeaseListResponse, LeaseOut, LeaseRequest, LeaseTerminateRequest, LeaseUpdate
)

router = APIRouter(
    prefix="/api/leases",
    tags=["leases"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=LeaseListResponse)
def list_leases(
    params: LeaseRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("leases", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.post("", response_model=LeaseOut, status_code=201)
def create_lease(
    payload: LeaseCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("leases", "create"))
):
    return crud.create(db, resolve_org_id(current_user), payload)


@router.get("/{lease_id}", response_model=LeaseOut)
def get_lease(
    lease_id: str,
    params: LeaseRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("leases", "read"))
):
    lease = crud.get_by_id(db, lease_id, resolve_org_id(current_user, params.organization_id))
    if not lease:
        return not_found("Lease")
    return lease


@router.patch("/{lease_id}", response_model=LeaseOut)
def update_lease(
    lease_id: str,
    payload: LeaseUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("leases", "update"))
):
    lease = crud.update(db, lease_id, resolve_org_id(current_user), payload)
    if not lease:
        return not_found("Lease")
    return lease


@router.post("/{lease_id}/terminate", response_model=LeaseOut)
def terminate_lease(
    lease_id: str,
    payload: LeaseTerminateRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("leases", "terminate", "update"))
):
    lease = crud.terminate(db, lease_id, resolve_org_id(current_user), payload.reason)
    if not lease:
        return not_found("Lease")
    return lease


@router.delete("/{lease_id}", response_model=MessageOut)
def delete_lease(
    lease_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("leases", "delete"))
):
    if not crud.delete(db, lease_id, resolve_org_id(current_user)):
        return not_found("Lease")
    return {"message": "Lease deleted"}
