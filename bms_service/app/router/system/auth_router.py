from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from shared.core.auth import (
    clear_session_cookie, create_session_token, set_session_cookie, validate_current_token
)
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import error_response, not_found

from ...crud.system import users_crud as crud
from ...schemas.system.users_schemas import LoginRequest, LoginResponse, UserOut

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    user = crud.authenticate(db, payload.email, payload.password)
    if not user:
        return error_response("Invalid email or password", 401)
    if user.status != "active":
        return error_response("Access denied: user is not active", 403)

    token = create_session_token(db, user, request)
    crud.record_login(db, user)
    set_session_cookie(response, token)
    return {"user": user, "access_token": token}


@router.post("/logout", response_model=MessageOut)
def logout(
    response: Response,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    crud.end_session(db, current_user.session_id)
    clear_session_cookie(response)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserOut)
def me(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    user = crud.get_by_id(db, current_user.user_id)
    if not user:
        return not_found("User")
    return user
