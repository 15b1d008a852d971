import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now
from shared.models.user_login_session import UserLoginSession
from shared.models.users import Users

from ...schemas.system.users_schemas import UserCreate, UserOut, UserRequest, UserUpdate
from ..common.references import get_scoped

logger = logging.getLogger(__name__)

LAST_ORG_ADMIN_MESSAGE = "Cannot remove last ORG_ADMIN in organization"


def get_list(db: Session, org_id: Optional[UUID], params: UserRequest):
    query = db.query(Users)
    if org_id:
        query = query.filter(Users.org_id == org_id)
    if params.status:
        query = query.filter(Users.status == params.status)
    if params.search:
        pattern = f"%{params.search}%"
        query = query.filter(Users.name.ilike(pattern) | Users.email.ilike(pattern))

    users = query.order_by(Users.created_at.desc()).all()
    # roles live in a JSON list
    if params.role:
        users = [u for u in users if u.has_role(params.role)]
    total = len(users)
    start = params.skip or 0
    users = users[start:start + params.limit] if params.limit else users[start:]
    return {"users": [UserOut.model_validate(u) for u in users], "total": total}


def get_by_id(db: Session, user_id, org_id: Optional[UUID] = None) -> Optional[Users]:
    return get_scoped(db, Users, user_id, org_id)


def get_by_email(db: Session, email: str) -> Optional[Users]:
    return db.query(Users).filter(Users.email == email.strip().lower()).first()


def authenticate(db: Session, email: str, password: str) -> Optional[Users]:
    user = get_by_email(db, email)
    if not user or not user.verify_password(password):
        return None
    return user


def record_login(db: Session, user: Users):
    user.last_login_at = utc_now()
    db.commit()


def end_session(db: Session, session_id):
    session = db.query(UserLoginSession).filter(UserLoginSession.id == parse_id(session_id)).first()
    if session and session.is_active:
        session.is_active = False
        db.commit()


def count_active_org_admins(db: Session, org_id: UUID, exclude_id: Optional[UUID] = None) -> int:
    query = db.query(Users).filter(Users.org_id == org_id, Users.status == "active")
    if exclude_id:
        query = query.filter(Users.id != exclude_id)
    return sum(1 for u in query.all() if u.has_role("ORG_ADMIN"))


def _guard_last_org_admin(db: Session, user: Users, roles=None, status: Optional[str] = None):
    if not user.org_id or not user.has_role("ORG_ADMIN") or user.status != "active":
        return
    loses_role = roles is not None and "ORG_ADMIN" not in roles
    loses_status = status is not None and status != "active"
    if (loses_role or loses_status) and count_active_org_admins(db, user.org_id, user.id) == 0:
        raise ValueError(LAST_ORG_ADMIN_MESSAGE)


def create(db: Session, org_id: Optional[UUID], payload: UserCreate) -> Users:
    data = payload.model_dump()
    data.pop("organization_id", None)
    email = data["email"].strip().lower()
    if get_by_email(db, email):
        raise ValueError("User with this email already exists")
    if "SUPER_ADMIN" not in data["roles"] and not org_id:
        raise ValueError("Organization context is required")

    user = Users(
        org_id=None if "SUPER_ADMIN" in data["roles"] else org_id,
        name=data["name"],
        email=email,
        phone=data.get("phone"),
        roles=list(data["roles"]),
        status=data["status"],
    )
    user.set_password(data["password"])
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.email} created with roles {user.roles}")
    return user


def update(db: Session, user_id, org_id: Optional[UUID], payload: UserUpdate) -> Optional[Users]:
    user = get_by_id(db, user_id, org_id)
    if not user:
        return None

    data = payload.model_dump(exclude_unset=True)
    _guard_last_org_admin(db, user, roles=data.get("roles"), status=data.get("status"))

    password = data.pop("password", None)
    if password:
        user.set_password(password)
    for key in ("name", "phone", "status"):
        if key in data:
            setattr(user, key, data[key])
    if data.get("roles") is not None:
        user.roles = list(data["roles"])

    db.commit()
    db.refresh(user)
    return user


def delete(db: Session, user_id, org_id: Optional[UUID]) -> bool:
    user = get_by_id(db, user_id, org_id)
    if not user:
        return False
    if user.has_role("SUPER_ADMIN"):
        raise ValueError("Cannot delete SUPER_ADMIN user")
    _guard_last_org_admin(db, user, status="inactive")

    user.status = "inactive"
    db.commit()
    return True
