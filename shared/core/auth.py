from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request, Response, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import get_db, parse_id
from shared.core.permissions import has_any_role_permission
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.models.user_login_session import UserLoginSession
from shared.models.users import Users

security = HTTPBearer(auto_error=False)


def create_access_token(data: dict) -> str:
    payload = data.copy()
    expires = datetime.now(timezone.utc) + \
        timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload["exp"] = expires
    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def create_session_token(db: Session, user: Users, request: Optional[Request] = None) -> str:
    """Open a login session for the user and sign a token bound to it."""
    session = UserLoginSession(
        user_id=user.id,
        ip_address=request.client.host if request and request.client else None,
        user_agent=request.headers.get("user-agent") if request else None,
    )
    db.add(session)
    db.commit()
    db.refresh(session)

    return create_access_token({
        "user_id": str(user.id),
        "session_id": str(session.id),
        "org_id": str(user.org_id) if user.org_id else None,
        "name": user.name,
        "email": user.email,
        "roles": list(user.roles or []),
    })


def set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
    )


def clear_session_cookie(response: Response):
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


def verify_token(db: Session, token: str) -> UserToken:
    """Verify and decode a JWT token against its login session."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        user = UserToken(**payload)
    except (JWTError, ValueError):
        return error_response("Invalid or expired token",
                              http_status=status.HTTP_401_UNAUTHORIZED)

    session = db.query(UserLoginSession).filter(
        UserLoginSession.id == parse_id(user.session_id),
        UserLoginSession.user_id == parse_id(user.user_id)
    ).first()

    if not session or not session.is_active:
        return error_response("Session has been logged out or is inactive",
                              http_status=status.HTTP_401_UNAUTHORIZED)

    return user


def extract_token(request: Request,
                  credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials:
        return credentials.credentials
    return None


def validate_current_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> UserToken:
    token = extract_token(request, credentials)
    if not token:
        return error_response("Authentication required",
                              http_status=status.HTTP_401_UNAUTHORIZED)

    user_data = verify_token(db, token)

    user = db.query(Users).filter(
        Users.id == parse_id(user_data.user_id)).first()
    if not user:
        return error_response("Authentication required: user not found",
                              http_status=status.HTTP_401_UNAUTHORIZED)

    if user.status != "active":
        return error_response("Access denied: user is not active",
                              http_status=status.HTTP_403_FORBIDDEN)

    # roles and org may change after login
    user_data.roles = list(user.roles or [])
    user_data.org_id = user.org_id
    user_data.status = user.status
    return user_data


def require_permission(module: str, *actions: str):
    """Dependency factory: the caller needs any one of `actions` on `module`."""

    def checker(current_user: UserToken = Depends(validate_current_token)) -> UserToken:
        if not any(has_any_role_permission(current_user.roles, module, a) for a in actions):
            return error_response(
                f"Access denied: {module}.{'|'.join(actions)} permission required",
                http_status=status.HTTP_403_FORBIDDEN)
        return current_user

    return checker


def require_roles(*roles: str):

    def checker(current_user: UserToken = Depends(validate_current_token)) -> UserToken:
        if not any(r in current_user.roles for r in roles):
            return error_response(
                f"Access denied: requires one of {', '.join(roles)}",
                http_status=status.HTTP_403_FORBIDDEN)
        return current_user

    return checker


def allow_super_admin(current_user: UserToken = Depends(validate_current_token)) -> UserToken:
    if not current_user.is_super_admin:
        return error_response("Access denied: super admin only",
                              http_status=status.HTTP_403_FORBIDDEN)
    return current_user


def resolve_org_id(current_user: UserToken, requested: Optional[str] = None) -> UUID:
    """Organization the request acts in; only a super admin may pick one."""
    if current_user.is_super_admin and requested:
        org_id = parse_id(requested)
        if not org_id:
            return error_response("Invalid organizationId")
        return org_id
    if not current_user.org_id:
        return error_response("Organization context is required")
    return current_user.org_id
