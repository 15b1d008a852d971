from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.maintenance_assets import complaints_crud as crud
from ...schemas.maintenance_assets.complaints_schemas import (
    ComplaintCreate, ComplaintListResponse, ComplaintOut, ComplaintRequest, ComplaintUpdate,
    ConvertToWorkOrderRequest, ConvertToWorkOrderResponse
)

router = APIRouter(
    prefix="/api/complaints",
    tags=["complaints"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=ComplaintListResponse)
def list_complaints(
    params: ComplaintRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(
        require_permission("complaints", "list", "list_own", "list_all"))
):
    org_id = resolve_org_id(current_user, params.organization_id)
    tenant_id = crud.own_tenant_id(db, org_id, current_user, "list")
    return crud.get_list(db, org_id, params, tenant_id)


@router.post("", response_model=ComplaintOut, status_code=201)
def create_complaint(
    payload: ComplaintCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("complaints", "create", "update"))
):
    org_id = resolve_org_id(current_user)
    return crud.create(db, org_id, payload, crud.own_tenant_id(db, org_id, current_user, "list"))


@router.get("/{complaint_id}", response_model=ComplaintOut)
def get_complaint(
    complaint_id: str,
    params: ComplaintRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(
        require_permission("complaints", "read", "read_own", "read_all"))
):
    org_id = resolve_org_id(current_user, params.organization_id)
    complaint = crud.get_by_id(db, complaint_id, org_id,
                               crud.own_tenant_id(db, org_id, current_user, "read"))
    if not complaint:
        return not_found("Complaint")
    return complaint


@router.patch("/{complaint_id}", response_model=ComplaintOut)
def update_complaint(
    complaint_id: str,
    payload: ComplaintUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("complaints", "update", "update_own"))
):
    org_id = resolve_org_id(current_user)
    complaint = crud.update(db, complaint_id, org_id, payload,
                            crud.own_tenant_id(db, org_id, current_user, "update"))
    if not complaint:
        return not_found("Complaint")
    return complaint


@router.post("/{complaint_id}/convert-to-work-order",
             response_model=ConvertToWorkOrderResponse, status_code=201)
def convert_complaint_to_work_order(
    complaint_id: str,
    payload: ConvertToWorkOrderRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("maintenance", "create"))
):
    result = crud.convert_to_work_order(db, complaint_id, resolve_org_id(current_user),
                                        payload, current_user.user_id)
    if not result:
        return not_found("Complaint")
    return result
