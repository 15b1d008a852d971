from typing import Any, Dict, List, Optional
from pydantic import EmailStr

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.space_sites_enum import OrganizationStatus


class ContactInfo(EmptyStringModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class OrganizationBase(EmptyStringModel):
    name: str
    code: str
    contact_info: Optional[ContactInfo] = None
    settings: Optional[Dict[str, Any]] = None
    status: OrganizationStatus = OrganizationStatus.active
    domain: Optional[str] = None
    subdomain: Optional[str] = None
    branding: Optional[Dict[str, Any]] = None
    payment_reminder_settings: Optional[Dict[str, Any]] = None


class OrganizationCreate(OrganizationBase):
    pass


class OrganizationUpdate(EmptyStringModel):
    name: Optional[str] = None
    code: Optional[str] = None
    contact_info: Optional[ContactInfo] = None
    settings: Optional[Dict[str, Any]] = None
    status: Optional[OrganizationStatus] = None
    domain: Optional[str] = None
    subdomain: Optional[str] = None
    branding: Optional[Dict[str, Any]] = None
    payment_reminder_settings: Optional[Dict[str, Any]] = None


class OrganizationOut(RecordOut):
    name: str
    code: str
    contact_info: Optional[ContactInfo] = None
    settings: Optional[Dict[str, Any]] = None
    status: str
    domain: Optional[str] = None
    subdomain: Optional[str] = None
    branding: Optional[Dict[str, Any]] = None
    payment_reminder_settings: Optional[Dict[str, Any]] = None


class OrganizationListResponse(EmptyStringModel):
    organizations: List[OrganizationOut]
    total: int


class OrganizationRequest(CommonQueryParams):
    status: Optional[str] = None


class OrganizationSettingsUpdate(EmptyStringModel):
    settings: Dict[str, Any]
