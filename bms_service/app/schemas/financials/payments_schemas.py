from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import Field

from shared.core.schemas import CommonQueryParams, RecordOut
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

from ...enum.financials_enum import PaymentMethod, PaymentStatus, ReconciliationStatus


class PaymentBase(EmptyStringModel):
    invoice_id: Optional[UUID] = None
    tenant_id: UUID
    amount: float
    payment_method: PaymentMethod
    payment_date: Optional[datetime] = None
    reference_number: Optional[str] = None
    status: PaymentStatus = PaymentStatus.completed
    provider_response: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    currency: str = "ETB"
    exchange_rate: Optional[float] = Field(default=None, gt=0)
    provider_transaction_id: Optional[str] = None
    receipt_url: Optional[str] = None


class PaymentCreate(PaymentBase):
    pass


class PaymentUpdate(EmptyStringModel):
    amount: Optional[float] = None
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[datetime] = None
    reference_number: Optional[str] = None
    status: Optional[PaymentStatus] = None
    provider_response: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    provider_transaction_id: Optional[str] = None
    failure_reason: Optional[str] = None
    receipt_url: Optional[str] = None


class PaymentRefundRequest(EmptyStringModel):
    reason: Optional[str] = None


class PaymentOut(RecordOut):
    invoice_id: Optional[UUID] = None
    tenant_id: UUID
    amount: float
    payment_method: str
    payment_date: datetime
    reference_number: Optional[str] = None
    status: str
    provider_response: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    created_by: Optional[UUID] = None
    currency: str
    exchange_rate: Optional[float] = None
    provider_transaction_id: Optional[str] = None
    reconciliation_status: str
    failure_reason: Optional[str] = None
    retry_attempts: int = 0
    receipt_url: Optional[str] = None


class PaymentListResponse(EmptyStringModel):
    payments: List[PaymentOut]
    total: int


class PaymentRequest(CommonQueryParams):
    status: Optional[str] = None
    tenant_id: Optional[str] = None
    invoice_id: Optional[str] = None
    payment_method: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ReconciliationRequest(CommonQueryParams):
    reconciliation_status: ReconciliationStatus = ReconciliationStatus.pending
    payment_method: Optional[str] = None


class BulkReconcileRequest(EmptyStringModel):
    payment_ids: List[str]
    bank_statement_reference: Optional[str] = None
    reconciliation_notes: Optional[str] = None


class ReconcileResult(EmptyStringModel):
    payment_id: str
    success: bool
    error: Optional[str] = None


class ReconcileSummary(EmptyStringModel):
    total: int
    succeeded: int
    failed: int


class BulkReconcileResponse(EmptyStringModel):
    results: List[ReconcileResult]
    summary: ReconcileSummary


class ReconcileUpdate(EmptyStringModel):
    reconciliation_status: ReconciliationStatus
    notes: Optional[str] = None


class ChapaInitiateRequest(EmptyStringModel):
    invoice_id: UUID
    return_url: Optional[str] = None
    amount: Optional[float] = Field(default=None, gt=0)


class ChapaInitiateResponse(EmptyStringModel):
    payment_id: UUID
    tx_ref: str
    checkout_url: str
    test_mode: bool = False


class ChapaVerifyResponse(EmptyStringModel):
    tx_ref: str
    verified: bool
    payment: PaymentOut
