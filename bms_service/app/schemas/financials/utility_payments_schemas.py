from datetime import datetime
from typing import List, Optional
from uuid import UUID

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.financials_enum import PaymentMethod, UtilityType


class UtilityPaymentBase(EmptyStringModel):
    meter_id: UUID
    utility_type: UtilityType
    period_start: datetime
    period_end: datetime
    amount: float
    payment_date: Optional[datetime] = None
    payment_method: PaymentMethod
    receipt_url: Optional[str] = None
    receipt_file_name: Optional[str] = None
    notes: Optional[str] = None


class UtilityPaymentCreate(UtilityPaymentBase):
    pass


class UtilityPaymentUpdate(EmptyStringModel):
    utility_type: Optional[UtilityType] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    amount: Optional[float] = None
    payment_date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    receipt_url: Optional[str] = None
    receipt_file_name: Optional[str] = None
    notes: Optional[str] = None


class UtilityPaymentOut(RecordOut):
    meter_id: UUID
    utility_type: str
    period_start: datetime
    period_end: datetime
    amount: float
    payment_date: datetime
    payment_method: str
    receipt_url: Optional[str] = None
    receipt_file_name: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[UUID] = None


class UtilityPaymentListResponse(EmptyStringModel):
    utility_payments: List[UtilityPaymentOut]
    total: int


class UtilityPaymentRequest(CommonQueryParams):
    meter_id: Optional[str] = None
    utility_type: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ReceiptUploadOut(EmptyStringModel):
    url: str
    file_name: str
    size: int
    content_type: str
