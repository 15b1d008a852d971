from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.financials import utility_payments_crud as crud
from ...schemas.financials.utility_payments_schemas import (
    ReceiptUploadOut, UtilityPaymentCreate, UtilityPaymentListResponse, UtilityPaymentOut,
    UtilityPaymentRequest, UtilityPaymentUpdate
)

router = APIRouter(
    prefix="/api/utility-payments",
    tags=["utility-payments"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=UtilityPaymentListResponse)
def list_utility_payments(
    params: UtilityPaymentRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.post("/upload", response_model=ReceiptUploadOut, status_code=201)
async def upload_receipt(
    file: UploadFile = File(None),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    return await crud.save_receipt(file)


@router.post("", response_model=UtilityPaymentOut, status_code=201)
def create_utility_payment(
    payload: UtilityPaymentCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    return crud.create(db, resolve_org_id(current_user), payload, current_user.user_id)


@router.get("/{payment_id}", response_model=UtilityPaymentOut)
def get_utility_payment(
    payment_id: str,
    params: UtilityPaymentRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "read"))
):
    record = crud.get_by_id(db, payment_id, resolve_org_id(current_user, params.organization_id))
    if not record:
        return not_found("Utility payment")
    return record


@router.patch("/{payment_id}", response_model=UtilityPaymentOut)
def update_utility_payment(
    payment_id: str,
    payload: UtilityPaymentUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    record = crud.update(db, payment_id, resolve_org_id(current_user), payload)
    if not record:
        return not_found("Utility payment")
    return record


@router.delete("/{payment_id}", response_model=MessageOut)
def delete_utility_payment(
    payment_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    if not crud.delete(db, payment_id, resolve_org_id(current_user)):
        return not_found("Utility payment")
    return {"message": "Utility payment deleted"}
