import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import parse_id, utc_now
from shared.helpers.email_helper import notify_payment_received
from shared.utils.chapa_client import ChapaClient

from ...models.financials.invoices import Invoice
from ...models.financials.payments import Payment
from ...models.leasing_tenants.tenants import Tenant
from ...schemas.financials.payments_schemas import (
    BulkReconcileRequest, ChapaInitiateRequest, PaymentCreate, PaymentOut,
    PaymentRequest, PaymentUpdate, ReconciliationRequest
)
from . import invoices_crud
from ..common.references import apply_updates, ensure_same_org, get_scoped, paginate

logger = logging.getLogger(__name__)

BULK_RECONCILIATION_PREFIX = "[Bulk Reconciliation] "


def total_paid_for_invoice(db: Session, invoice_id: UUID) -> float:
    total = (
        db.query(func.coalesce(func.sum(Payment.amount), 0))
        .filter(Payment.invoice_id == invoice_id, Payment.status == "completed")
        .scalar()
    )
    return round(float(total or 0), 2)


def _check_reference(db: Session, org_id: UUID, reference: Optional[str],
                     exclude_id: Optional[UUID] = None):
    if not reference:
        return
    query = db.query(Payment.id).filter(Payment.org_id == org_id,
                                        Payment.reference_number == reference)
    if exclude_id:
        query = query.filter(Payment.id != exclude_id)
    if query.first():
        raise ValueError("Payment with this reference number already exists")


def _sync_invoice_after_completion(db: Session, payment: Payment):
    """Mark the invoice paid once completed payments cover it. Never fails the payment."""
    if not payment.invoice_id:
        return
    try:
        invoice = db.query(Invoice).filter(Invoice.id == payment.invoice_id).first()
        if not invoice or invoice.status in ("paid", "cancelled"):
            return
        if total_paid_for_invoice(db, invoice.id) >= invoice.total:
            invoices_crud.update_status(db, invoice.id, invoice.org_id, "paid")
            logger.info(f"Invoice {invoice.invoice_number} marked paid")
    except Exception:
        logger.exception(f"Failed to update invoice status after payment {payment.id}")


def _notify_received(db: Session, payment: Payment):
    try:
        tenant = db.query(Tenant).filter(Tenant.id == payment.tenant_id).first()
        invoice = db.query(Invoice).filter(Invoice.id == payment.invoice_id).first() \
            if payment.invoice_id else None
        if tenant:
            notify_payment_received(tenant, payment, invoice)
    except Exception:
        logger.exception(f"Payment notification failed for {payment.id}")


def _after_completed(db: Session, payment: Payment):
    _sync_invoice_after_completion(db, payment)
    _notify_received(db, payment)


def get_list(db: Session, org_id: UUID, params: PaymentRequest):
    query = db.query(Payment).filter(Payment.org_id == org_id)
    if params.status:
        query = query.filter(Payment.status == params.status)
    if params.tenant_id:
        query = query.filter(Payment.tenant_id == parse_id(params.tenant_id))
    if params.invoice_id:
        query = query.filter(Payment.invoice_id == parse_id(params.invoice_id))
    if params.payment_method:
        query = query.filter(Payment.payment_method == params.payment_method)
    if params.start_date:
        query = query.filter(Payment.payment_date >= params.start_date)
    if params.end_date:
        query = query.filter(Payment.payment_date <= params.end_date)
    if params.search:
        query = query.filter(Payment.reference_number.ilike(f"%{params.search}%"))

    rows, total = paginate(query.order_by(Payment.payment_date.desc()), params)
    return {"payments": [PaymentOut.model_validate(p) for p in rows], "total": total}


def get_by_id(db: Session, payment_id, org_id: Optional[UUID] = None) -> Optional[Payment]:
    return get_scoped(db, Payment, payment_id, org_id)


def find_by_reference(db: Session, reference: str, org_id: Optional[UUID] = None) -> Optional[Payment]:
    query = db.query(Payment).filter(Payment.reference_number == reference)
    if org_id:
        query = query.filter(Payment.org_id == org_id)
    return query.first()


def find_by_invoice(db: Session, invoice_id, org_id: Optional[UUID] = None) -> List[Payment]:
    query = db.query(Payment).filter(Payment.invoice_id == parse_id(invoice_id))
    if org_id:
        query = query.filter(Payment.org_id == org_id)
    return query.order_by(Payment.payment_date.desc()).all()


def find_by_tenant(db: Session, tenant_id, org_id: Optional[UUID] = None) -> List[Payment]:
    query = db.query(Payment).filter(Payment.tenant_id == parse_id(tenant_id))
    if org_id:
        query = query.filter(Payment.org_id == org_id)
    return query.order_by(Payment.payment_date.desc()).all()


def create(db: Session, org_id: UUID, payload: PaymentCreate,
           user_id: Optional[str] = None) -> Payment:
    data = payload.model_dump()

    tenant = ensure_same_org(db, Tenant, data["tenant_id"], org_id, "Tenant")
    if data.get("invoice_id"):
        invoice = ensure_same_org(db, Invoice, data["invoice_id"], org_id, "Invoice")
        if invoice.tenant_id != tenant.id:
            raise ValueError("Invoice does not belong to this tenant")
        if invoice.status == "cancelled":
            raise ValueError("Cannot record a payment against a cancelled invoice")

    if data["amount"] is None or data["amount"] <= 0:
        raise ValueError("Payment amount must be greater than zero")
    _check_reference(db, org_id, data.get("reference_number"))

    data["payment_date"] = data.get("payment_date") or utc_now()
    payment = Payment(**data, org_id=org_id, created_by=parse_id(user_id))
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(f"Payment {payment.id} recorded: {payment.amount} {payment.currency} ({payment.status})")

    if payment.status == "completed":
        _after_completed(db, payment)
        db.refresh(payment)
    return payment


def update(db: Session, payment_id, org_id: UUID, payload: PaymentUpdate) -> Optional[Payment]:
    payment = get_by_id(db, payment_id, org_id)
    if not payment:
        return None

    data = payload.model_dump(exclude_unset=True)
    new_status = data.get("status")
    if payment.status != "pending" and new_status not in ("completed", "failed"):
        raise ValueError("Only pending payments can be modified")
    if payment.status == "refunded":
        raise ValueError("Refunded payments cannot be modified")
    if "amount" in data and (data["amount"] is None or data["amount"] <= 0):
        raise ValueError("Payment amount must be greater than zero")
    if data.get("reference_number") and data["reference_number"] != payment.reference_number:
        _check_reference(db, org_id, data["reference_number"], exclude_id=payment.id)

    became_completed = new_status == "completed" and payment.status != "completed"
    apply_updates(payment, data)
    db.commit()
    db.refresh(payment)

    if became_completed:
        _after_completed(db, payment)
        db.refresh(payment)
    return payment


def refund(db: Session, payment_id, org_id: UUID, reason: Optional[str] = None) -> Optional[Payment]:
    payment = get_by_id(db, payment_id, org_id)
    if not payment:
        return None
    if payment.status != "completed":
        raise ValueError("Only completed payments can be refunded")

    payment.status = "refunded"
    if reason:
        payment.notes = f"{payment.notes}\nRefund: {reason}" if payment.notes else f"Refund: {reason}"
    db.commit()
    db.refresh(payment)
    logger.info(f"Payment {payment.id} refunded")

    if payment.invoice_id:
        try:
            invoice = db.query(Invoice).filter(Invoice.id == payment.invoice_id).first()
            if invoice and invoice.status == "paid" and \
                    total_paid_for_invoice(db, invoice.id) < invoice.total:
                invoices_crud.update_status(db, invoice.id, invoice.org_id, "sent")
        except Exception:
            logger.exception(f"Failed to revert invoice status after refund {payment.id}")
    return payment


# ----------------------------------------------------------------- reconciliation

def list_for_reconciliation(db: Session, org_id: UUID, params: ReconciliationRequest) -> List[Payment]:
    query = db.query(Payment).filter(
        Payment.org_id == org_id,
        Payment.status == "completed",
        Payment.reconciliation_status == params.reconciliation_status,
    )
    if params.payment_method:
        query = query.filter(Payment.payment_method == params.payment_method)
    return query.order_by(Payment.payment_date.desc()).limit(params.limit or 50).all()


def reconcile(db: Session, payment_id, org_id: UUID, status: str, user_id: Optional[str] = None,
              notes: Optional[str] = None, bank_statement_reference: Optional[str] = None,
              note_prefix: str = "") -> Optional[Payment]:
    payment = get_by_id(db, payment_id, org_id)
    if not payment:
        return None
    if payment.status != "completed":
        raise ValueError("Only completed payments can be reconciled")

    response = dict(payment.provider_response or {})
    response.update({
        "reconciledAt": utc_now().isoformat(),
        "reconciledBy": user_id,
    })
    if bank_statement_reference:
        response["bankStatementReference"] = bank_statement_reference

    payment.provider_response = response
    payment.reconciliation_status = status
    if notes:
        payment.notes = f"{note_prefix}{notes}"
    db.commit()
    db.refresh(payment)
    return payment


def bulk_reconcile(db: Session, org_id: UUID, payload: BulkReconcileRequest,
                   user_id: Optional[str] = None):
    if not payload.payment_ids:
        raise ValueError("paymentIds must be a non-empty list")

    results = []
    for payment_id in payload.payment_ids:
        try:
            payment = reconcile(
                db, payment_id, org_id, "reconciled", user_id=user_id,
                notes=payload.reconciliation_notes,
                bank_statement_reference=payload.bank_statement_reference,
                note_prefix=BULK_RECONCILIATION_PREFIX,
            )
            if payment:
                results.append({"payment_id": payment_id, "success": True})
            else:
                results.append({"payment_id": payment_id, "success": False,
                                "error": "Payment not found"})
        except ValueError as e:
            db.rollback()
            results.append({"payment_id": payment_id, "success": False, "error": str(e)})

    succeeded = sum(1 for r in results if r["success"])
    logger.info(f"Bulk reconciliation for org {org_id}: {succeeded}/{len(results)} succeeded")
    return {
        "results": results,
        "summary": {"total": len(results), "succeeded": succeeded,
                    "failed": len(results) - succeeded},
    }


# ----------------------------------------------------------------- Chapa checkout

def initiate_chapa(db: Session, org_id: UUID, payload: ChapaInitiateRequest,
                   user_id: Optional[str] = None, client: Optional[ChapaClient] = None):
    invoice = ensure_same_org(db, Invoice, payload.invoice_id, org_id, "Invoice")
    if invoice.status in ("paid", "cancelled"):
        raise ValueError(f"Invoice is already {invoice.status}")
    tenant = db.query(Tenant).filter(Tenant.id == invoice.tenant_id).first()

    outstanding = round(invoice.total - total_paid_for_invoice(db, invoice.id), 2)
    amount = payload.amount or outstanding
    if amount <= 0:
        raise ValueError("Invoice has no outstanding balance")

    client = client or ChapaClient()
    tx_ref = client.build_tx_ref(str(invoice.id))
    checkout = client.initialize(
        amount=amount,
        currency="ETB",
        tx_ref=tx_ref,
        email=tenant.email if tenant else None,
        first_name=tenant.first_name if tenant else "",
        last_name=tenant.last_name if tenant else "",
        return_url=payload.return_url or settings.CHAPA_RETURN_URL,
        callback_url=settings.CHAPA_CALLBACK_URL,
        description=f"Invoice {invoice.invoice_number}",
        meta={"invoiceId": str(invoice.id), "organizationId": str(org_id)},
    )

    payment = Payment(
        org_id=org_id,
        invoice_id=invoice.id,
        tenant_id=invoice.tenant_id,
        amount=amount,
        payment_method="chapa",
        payment_date=utc_now(),
        reference_number=tx_ref,
        status="pending",
        provider_response={"checkoutUrl": checkout["checkout_url"],
                           "testMode": checkout["test_mode"]},
        created_by=parse_id(user_id),
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(f"Chapa payment {payment.id} initiated for invoice {invoice.invoice_number}")
    return {
        "payment_id": payment.id,
        "tx_ref": tx_ref,
        "checkout_url": checkout["checkout_url"],
        "test_mode": checkout["test_mode"],
    }


def verify_chapa(db: Session, org_id: UUID, tx_ref: str, client: Optional[ChapaClient] = None):
    payment = find_by_reference(db, tx_ref, org_id)
    if not payment:
        return None
    if payment.status == "completed":
        return {"tx_ref": tx_ref, "verified": True, "payment": payment}

    client = client or ChapaClient()
    result = client.verify(tx_ref)
    response = {**(payment.provider_response or {}), "verification": result.get("data")}

    if result["success"]:
        payment.status = "completed"
        payment.provider_transaction_id = (result.get("data") or {}).get("reference")
        payment.provider_response = response
        db.commit()
        db.refresh(payment)
        _after_completed(db, payment)
        db.refresh(payment)
    else:
        payment.status = "failed"
        payment.failure_reason = result.get("message") or f"Provider status: {result.get('status')}"
        payment.retry_attempts = (payment.retry_attempts or 0) + 1
        payment.provider_response = response
        db.commit()
        db.refresh(payment)
    return {"tx_ref": tx_ref, "verified": result["success"], "payment": payment}
