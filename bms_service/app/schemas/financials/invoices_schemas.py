from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.financials_enum import InvoiceItemType, InvoiceStatus


class InvoiceItem(EmptyStringModel):
    description: str
    amount: float
    type: InvoiceItemType = InvoiceItemType.other


class InvoiceBase(EmptyStringModel):
    lease_id: UUID
    tenant_id: UUID
    unit_id: UUID
    issue_date: Optional[datetime] = None
    due_date: datetime
    period_start: datetime
    period_end: datetime
    items: List[InvoiceItem] = []
    vat_rate: Optional[float] = Field(default=None, ge=0, le=100)
    tax: Optional[float] = Field(default=None, ge=0)
    status: InvoiceStatus = InvoiceStatus.draft
    notes: Optional[str] = None


class InvoiceCreate(InvoiceBase):
    invoice_number: Optional[str] = None


class InvoiceUpdate(EmptyStringModel):
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    items: Optional[List[InvoiceItem]] = None
    vat_rate: Optional[float] = Field(default=None, ge=0, le=100)
    tax: Optional[float] = Field(default=None, ge=0)
    status: Optional[InvoiceStatus] = None
    notes: Optional[str] = None


class InvoiceStatusUpdate(EmptyStringModel):
    status: InvoiceStatus


class InvoiceOut(RecordOut):
    lease_id: UUID
    tenant_id: UUID
    unit_id: UUID
    invoice_number: str
    issue_date: datetime
    due_date: datetime
    period_start: datetime
    period_end: datetime
    items: List[InvoiceItem] = []
    subtotal: float
    vat_rate: Optional[float] = None
    tax: float
    total: float
    status: str
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None


class InvoiceListResponse(EmptyStringModel):
    invoices: List[InvoiceOut]
    total: int


class InvoiceRequest(CommonQueryParams):
    status: Optional[str] = None
    tenant_id: Optional[str] = None
    lease_id: Optional[str] = None
    unit_id: Optional[str] = None
    due_before: Optional[datetime] = None
