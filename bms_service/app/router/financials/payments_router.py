from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.financials import payments_crud as crud
from ...schemas.financials.payments_schemas import (
    BulkReconcileRequest, BulkReconcileResponse, ChapaInitiateRequest, ChapaInitiateResponse,
    ChapaVerifyResponse, PaymentCreate, PaymentListResponse, PaymentOut, PaymentRefundRequest,
    PaymentRequest, PaymentUpdate, ReconcileUpdate, ReconciliationRequest
)

router = APIRouter(
    prefix="/api/payments",
    tags=["payments"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=PaymentListResponse)
def list_payments(
    params: PaymentRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.post("", response_model=PaymentOut, status_code=201)
def create_payment(
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "create", "record"))
):
    return crud.create(db, resolve_org_id(current_user), payload, current_user.user_id)


# ---------------- Reconciliation ----------------
@router.get("/reconciliation", response_model=PaymentListResponse)
def list_reconciliation(
    params: ReconciliationRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "reconcile"))
):
    payments = crud.list_for_reconciliation(
        db, resolve_org_id(current_user, params.organization_id), params)
    return {"payments": payments, "total": len(payments)}


@router.post("/reconciliation", response_model=BulkReconcileResponse)
def bulk_reconcile(
    payload: BulkReconcileRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "reconcile"))
):
    return crud.bulk_reconcile(db, resolve_org_id(current_user), payload, current_user.user_id)


# ---------------- Chapa ----------------
@router.post("/chapa/initiate", response_model=ChapaInitiateResponse)
def initiate_chapa_payment(
    payload: ChapaInitiateRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "create", "record", "create_own"))
):
    return crud.initiate_chapa(db, resolve_org_id(current_user), payload, current_user.user_id)


@router.get("/chapa/verify/{tx_ref}", response_model=ChapaVerifyResponse)
def verify_chapa_payment(
    tx_ref: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    result = crud.verify_chapa(db, resolve_org_id(current_user), tx_ref)
    if not result:
        return not_found("Payment")
    return result


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(
    payment_id: str,
    params: PaymentRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "read"))
):
    payment = crud.get_by_id(db, payment_id, resolve_org_id(current_user, params.organization_id))
    if not payment:
        return not_found("Payment")
    return payment


@router.patch("/{payment_id}", response_model=PaymentOut)
def update_payment(
    payment_id: str,
    payload: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "update", "record"))
):
    payment = crud.update(db, payment_id, resolve_org_id(current_user), payload)
    if not payment:
        return not_found("Payment")
    return payment


@router.patch("/{payment_id}/reconcile", response_model=PaymentOut)
def reconcile_payment(
    payment_id: str,
    payload: ReconcileUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "reconcile"))
):
    payment = crud.reconcile(db, payment_id, resolve_org_id(current_user),
                             payload.reconciliation_status, current_user.user_id, payload.notes)
    if not payment:
        return not_found("Payment")
    return payment


@router.post("/{payment_id}/refund", response_model=PaymentOut)
def refund_payment(
    payment_id: str,
    payload: PaymentRefundRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "reconcile", "update"))
):
    payment = crud.refund(db, payment_id, resolve_org_id(current_user), payload.reason)
    if not payment:
        return not_found("Payment")
    return payment


@router.delete("/{payment_id}", response_model=MessageOut)
def delete_payment(
    payment_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("payments", "reconcile"))
):
    if not crud.refund(db, payment_id, resolve_org_id(current_user)):
        return not_found("Payment")
    return {"message": "Payment refunded successfully"}
