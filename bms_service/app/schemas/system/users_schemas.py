from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import EmailStr, Field

from shared.core.schemas import CommonQueryParams
from shared.utils.enums import UserRole, UserStatus
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class UserCreate(EmptyStringModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    password: str = Field(min_length=8)
    roles: List[UserRole] = Field(min_length=1)
    status: UserStatus = UserStatus.active
    # only honoured for SUPER_ADMIN callers
    organization_id: Optional[UUID] = None


class UserUpdate(EmptyStringModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    roles: Optional[List[UserRole]] = None
    status: Optional[UserStatus] = None
    password: Optional[str] = Field(default=None, min_length=8)


class UserOut(EmptyStringModel):
    id: UUID
    org_id: Optional[UUID] = None
    name: str
    email: str
    phone: Optional[str] = None
    roles: List[str] = []
    status: str
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserListResponse(EmptyStringModel):
    users: List[UserOut]
    total: int


class UserRequest(CommonQueryParams):
    role: Optional[str] = None
    status: Optional[str] = None


class LoginRequest(EmptyStringModel):
    email: EmailStr
    password: str


class LoginResponse(EmptyStringModel):
    user: UserOut
    access_token: str
    token_type: str = "bearer"
