from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.security import security_staff_crud as crud
from ...schemas.security.security_staff_schemas import (
    SecurityStaffCreate, SecurityStaffListResponse, SecurityStaffOut, SecurityStaffRequest,
    SecurityStaffUpdate
)

router = APIRouter(
    prefix="/api/security-staff",
    tags=["security-staff"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=SecurityStaffListResponse)
def list_security_staff(
    params: SecurityStaffRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.post("", response_model=SecurityStaffOut, status_code=201)
def create_security_staff(
    payload: SecurityStaffCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "create"))
):
    return crud.create(db, resolve_org_id(current_user), payload)


@router.get("/{staff_id}", response_model=SecurityStaffOut)
def get_security_staff(
    staff_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "read"))
):
    staff = crud.get_by_id(db, staff_id, resolve_org_id(current_user))
    if not staff:
        return not_found("Security staff")
    return staff


@router.patch("/{staff_id}", response_model=SecurityStaffOut)
def update_security_staff(
    staff_id: str,
    payload: SecurityStaffUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "update"))
):
    staff = crud.update(db, staff_id, resolve_org_id(current_user), payload)
    if not staff:
        return not_found("Security staff")
    return staff


@router.delete("/{staff_id}", response_model=MessageOut)
def delete_security_staff(
    staff_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "delete"))
):
    if not crud.delete(db, staff_id, resolve_org_id(current_user)):
        return not_found("Security staff")
    return {"message": "Security staff deleted"}
