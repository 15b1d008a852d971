from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_roles, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.security import access_permissions_crud as crud
from ...schemas.security.access_permissions_schemas import (
    AccessCheckOut, AccessCheckRequest, AccessPermissionCreate, AccessPermissionListResponse,
    AccessPermissionOut, AccessPermissionRequest, AccessPermissionUpdate
)

router = APIRouter(
    prefix="/api/access-control",
    tags=["access-control"],
    dependencies=[Depends(validate_current_token)]
)

access_managers = require_roles("ORG_ADMIN", "BUILDING_MANAGER")


@router.get("", response_model=AccessPermissionListResponse)
def list_permissions(
    params: AccessPermissionRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(access_managers)
):
    return crud.get_list(db, resolve_org_id(current_user), params)


@router.get("/check", response_model=AccessCheckOut)
def check_access(
    params: AccessCheckRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(access_managers)
):
    return crud.check_access(db, resolve_org_id(current_user), params.building_id,
                             params.entity_type, params.entity_id, params.at)


@router.post("", response_model=AccessPermissionOut, status_code=201)
def create_permission(
    payload: AccessPermissionCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(access_managers)
):
    return crud.create(db, resolve_org_id(current_user), payload, current_user.user_id)


@router.get("/{permission_id}", response_model=AccessPermissionOut)
def get_permission(
    permission_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(access_managers)
):
    permission = crud.get_by_id(db, permission_id, resolve_org_id(current_user))
    if not permission:
        return not_found("Access permission")
    return permission


@router.patch("/{permission_id}", response_model=AccessPermissionOut)
def update_permission(
    permission_id: str,
    payload: AccessPermissionUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(access_managers)
):
    permission = crud.update(db, permission_id, resolve_org_id(current_user), payload)
    if not permission:
        return not_found("Access permission")
    return permission


@router.delete("/{permission_id}", response_model=MessageOut)
def delete_permission(
    permission_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(access_managers)
):
    if not crud.delete(db, permission_id, resolve_org_id(current_user)):
        return not_found("Access permission")
    return {"message": "Access permission deleted"}
