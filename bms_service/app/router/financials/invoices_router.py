from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.exporthelper import attachment_headers
from shared.helpers.json_response_helper import not_found

from ...crud.financials import invoices_crud as crud
from ...schemas.financials.invoices_schemas import (
    InvoiceCreate, InvoiceListResponse, InvoiceOut, InvoiceRequest, InvoiceStatusUpdate, InvoiceUpdate
)

router = APIRouter(
    prefix="/api/invoices",
    tags=["invoices"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=InvoiceListResponse)
def list_invoices(
    params: InvoiceRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("invoices", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.get("/overview")
def get_invoices_overview(
    params: InvoiceRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("invoices", "list", "read"))
):
    return crud.invoices_overview(db, resolve_org_id(current_user, params.organization_id))


@router.post("/mark-overdue")
def mark_overdue_invoices(
    as_of: Optional[datetime] = Query(None, alias="asOf"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("invoices", "update"))
):
    return {"updated": crud.mark_overdue(db, resolve_org_id(current_user), as_of)}


@router.post("", response_model=InvoiceOut, status_code=201)
def create_invoice(
    payload: InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("invoices", "create"))
):
    return crud.create(db, resolve_org_id(current_user), payload)


@router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(
    invoice_id: str,
    params: InvoiceRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("invoices", "read"))
):
    invoice = crud.get_by_id(db, invoice_id, resolve_org_id(current_user, params.organization_id))
    if not invoice:
        return not_found("Invoice")
    return invoice


@router.get("/{invoice_id}/pdf")
def download_invoice_pdf(
    invoice_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("invoices", "read"))
):
    rendered = crud.render_pdf(db, invoice_id, resolve_org_id(current_user))
    if not rendered:
        return not_found("Invoice")
    filename, content = rendered
    return Response(content=content, media_type="application/pdf",
                    headers=attachment_headers(filename))


@router.patch("/{invoice_id}", response_model=InvoiceOut)
def update_invoice(
    invoice_id: str,
    payload: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("invoices", "update"))
):
    invoice = crud.update(db, invoice_id, resolve_org_id(current_user), payload)
    if not invoice:
        return not_found("Invoice")
    return invoice


@router.patch("/{invoice_id}/status", response_model=InvoiceOut)
def update_invoice_status(
    invoice_id: str,
    payload: InvoiceStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("invoices", "update", "send"))
):
    invoice = crud.update_status(db, invoice_id, resolve_org_id(current_user), payload.status)
    if not invoice:
        return not_found("Invoice")
    return invoice


@router.delete("/{invoice_id}", response_model=MessageOut)
def delete_invoice(
    invoice_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("invoices", "delete"))
):
    if not crud.delete(db, invoice_id, resolve_org_id(current_user)):
        return not_found("Invoice")
    return {"message": "Invoice deleted"}
