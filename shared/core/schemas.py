from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class UserToken(BaseModel):
    user_id: str
    session_id: str
    org_id: Optional[UUID] = None
    name: Optional[str] = None
    email: Optional[str] = None
    roles: List[str] = []
    status: Optional[str] = None
    exp: Optional[int] = None

    @property
    def is_super_admin(self) -> bool:
        return "SUPER_ADMIN" in self.roles


class CommonQueryParams(EmptyStringModel):
    search: Optional[str] = None
    skip: Optional[int] = 0
    limit: Optional[int] = None
    organization_id: Optional[str] = None


class MessageOut(EmptyStringModel):
    message: str


class RecordOut(EmptyStringModel):
    id: UUID
    org_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
