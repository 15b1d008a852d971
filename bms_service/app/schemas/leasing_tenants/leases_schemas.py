from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.leasing_tenants_enum import BillingCycle, LeaseStatus


class AdditionalCharge(EmptyStringModel):
    name: str
    amount: float = Field(ge=0)
    frequency: BillingCycle = BillingCycle.monthly


class LeaseBase(EmptyStringModel):
    tenant_id: UUID
    unit_id: UUID
    start_date: datetime
    end_date: Optional[datetime] = None
    rent_amount: float = Field(ge=0)
    deposit_amount: Optional[float] = Field(default=None, ge=0)
    billing_cycle: BillingCycle = BillingCycle.monthly
    due_day: int = 1
    additional_charges: Optional[List[AdditionalCharge]] = None
    status: LeaseStatus = LeaseStatus.active


class LeaseCreate(LeaseBase):
    pass


class LeaseUpdate(EmptyStringModel):
    tenant_id: Optional[UUID] = None
    unit_id: Optional[UUID] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    rent_amount: Optional[float] = Field(default=None, ge=0)
    deposit_amount: Optional[float] = Field(default=None, ge=0)
    billing_cycle: Optional[BillingCycle] = None
    due_day: Optional[int] = None
    additional_charges: Optional[List[AdditionalCharge]] = None
    status: Optional[LeaseStatus] = None


class LeaseTerminateRequest(EmptyStringModel):
    reason: Optional[str] = None


class LeaseOut(RecordOut):
    tenant_id: UUID
    unit_id: UUID
    start_date: datetime
    end_date: Optional[datetime] = None
    rent_amount: float
    deposit_amount: Optional[float] = None
    billing_cycle: str
    due_day: int
    additional_charges: Optional[List[AdditionalCharge]] = None
    status: str
    termination_date: Optional[datetime] = None
    termination_reason: Optional[str] = None
    rent_breakdown: Optional[Dict[str, Any]] = None


class LeaseListResponse(EmptyStringModel):
    leases: List[LeaseOut]
    total: int


class LeaseRequest(CommonQueryParams):
    status: Optional[str] = None
    tenant_id: Optional[str] = None
    unit_id: Optional[str] = None
