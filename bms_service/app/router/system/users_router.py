from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import error_response, not_found

from ...crud.system import users_crud as crud
from ...schemas.system.users_schemas import (
    UserCreate, UserListResponse, UserOut, UserRequest, UserUpdate
)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(validate_current_token)]
)


def _scope(current_user: UserToken, requested=None):
    # super admins see every organization unless they narrow it
    if current_user.is_super_admin and not requested:
        return None
    return resolve_org_id(current_user, requested)


@router.get("", response_model=UserListResponse)
def list_users(
    params: UserRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "list", "read"))
):
    return crud.get_list(db, _scope(current_user, params.organization_id), params)


@router.post("", response_model=UserOut, status_code=201)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "create", "create_org_admin"))
):
    if "SUPER_ADMIN" in payload.roles and not current_user.is_super_admin:
        return error_response("Access denied: only a super admin can grant SUPER_ADMIN", 403)
    org_id = payload.organization_id if current_user.is_super_admin else current_user.org_id
    return crud.create(db, org_id, payload)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "read"))
):
    user = crud.get_by_id(db, user_id, _scope(current_user))
    if not user:
        return not_found("User")
    return user


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "update", "create_org_admin"))
):
    if payload.roles and "SUPER_ADMIN" in payload.roles and not current_user.is_super_admin:
        return error_response("Access denied: only a super admin can grant SUPER_ADMIN", 403)
    user = crud.update(db, user_id, _scope(current_user), payload)
    if not user:
        return not_found("User")
    return user


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("users", "delete", "create_org_admin"))
):
    if not crud.delete(db, user_id, _scope(current_user)):
        return not_found("User")
    return {"message": "User deactivated"}
