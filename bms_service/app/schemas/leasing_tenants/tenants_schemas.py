from typing import Any, Dict, List, Optional
from pydantic import EmailStr

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.leasing_tenants_enum import TenantLanguage, TenantStatus


class EmergencyContact(EmptyStringModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    relationship: Optional[str] = None


class TenantBase(EmptyStringModel):
    first_name: str
    last_name: str
    primary_phone: str
    email: Optional[EmailStr] = None
    national_id: Optional[str] = None
    language: TenantLanguage = TenantLanguage.en
    status: TenantStatus = TenantStatus.active
    emergency_contact: Optional[EmergencyContact] = None
    notes: Optional[str] = None
    notification_preferences: Optional[Dict[str, Any]] = None


class TenantCreate(TenantBase):
    pass


class TenantUpdate(EmptyStringModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    primary_phone: Optional[str] = None
    email: Optional[EmailStr] = None
    national_id: Optional[str] = None
    language: Optional[TenantLanguage] = None
    status: Optional[TenantStatus] = None
    emergency_contact: Optional[EmergencyContact] = None
    notes: Optional[str] = None
    notification_preferences: Optional[Dict[str, Any]] = None


class TenantOut(RecordOut):
    first_name: str
    last_name: str
    primary_phone: str
    email: Optional[str] = None
    national_id: Optional[str] = None
    language: str
    status: str
    emergency_contact: Optional[EmergencyContact] = None
    notes: Optional[str] = None
    notification_preferences: Optional[Dict[str, Any]] = None


class TenantListResponse(EmptyStringModel):
    tenants: List[TenantOut]
    total: int


class TenantRequest(CommonQueryParams):
    status: Optional[str] = None
