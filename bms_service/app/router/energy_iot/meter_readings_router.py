from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.energy_iot import meter_readings_crud as crud
from ...schemas.energy_iot.meter_readings_schemas import (
    MeterReadingCreate, MeterReadingListResponse, MeterReadingOut, MeterReadingRequest, MeterReadingUpdate
)

router = APIRouter(
    prefix="/api/meter-readings",
    tags=["meter-readings"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=MeterReadingListResponse)
def list_readings(
    params: MeterReadingRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.post("", response_model=MeterReadingOut, status_code=201)
def create_reading(
    payload: MeterReadingCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    return crud.create(db, resolve_org_id(current_user), payload, current_user.user_id)


@router.get("/{reading_id}", response_model=MeterReadingOut)
def get_reading(
    reading_id: str,
    params: MeterReadingRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "read"))
):
    reading = crud.get_by_id(db, reading_id, resolve_org_id(current_user, params.organization_id))
    if not reading:
        return not_found("Meter reading")
    return reading


@router.patch("/{reading_id}", response_model=MeterReadingOut)
def update_reading(
    reading_id: str,
    payload: MeterReadingUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    reading = crud.update(db, reading_id, resolve_org_id(current_user), payload)
    if not reading:
        return not_found("Meter reading")
    return reading


@router.delete("/{reading_id}", response_model=MessageOut)
def delete_reading(
    reading_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    if not crud.delete(db, reading_id, resolve_org_id(current_user)):
        return not_found("Meter reading")
    return {"message": "Meter reading deleted"}
