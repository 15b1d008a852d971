from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import error_response, not_found

from ...crud.energy_iot import meter_readings_crud, meters_crud as crud
from ...schemas.energy_iot.meter_readings_schemas import ConsumptionOut
from ...schemas.energy_iot.meters_schemas import (
    MeterCreate, MeterListResponse, MeterOut, MeterRequest, MeterUpdate
)

router = APIRouter(
    prefix="/api/meters",
    tags=["meters"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=MeterListResponse)
def list_meters(
    params: MeterRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.post("", response_model=MeterOut, status_code=201)
def create_meter(
    payload: MeterCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    return crud.create(db, resolve_org_id(current_user), payload)


@router.get("/{meter_id}", response_model=MeterOut)
def get_meter(
    meter_id: str,
    params: MeterRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "read"))
):
    meter = crud.get_by_id(db, meter_id, resolve_org_id(current_user, params.organization_id))
    if not meter:
        return not_found("Meter")
    return meter


@router.get("/{meter_id}/consumption", response_model=ConsumptionOut)
def get_meter_consumption(
    meter_id: str,
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "read"))
):
    if end_date < start_date:
        return error_response("endDate must be after startDate")
    meter = crud.get_by_id(db, meter_id, resolve_org_id(current_user))
    if not meter:
        return not_found("Meter")
    consumption = meter_readings_crud.calculate_consumption(db, meter.id, start_date, end_date)
    return {
        "meter_id": meter.id,
        "start_date": start_date,
        "end_date": end_date,
        "consumption": consumption,
        "unit": meter.unit,
    }


@router.patch("/{meter_id}", response_model=MeterOut)
def update_meter(
    meter_id: str,
    payload: MeterUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    meter = crud.update(db, meter_id, resolve_org_id(current_user), payload)
    if not meter:
        return not_found("Meter")
    return meter


@router.delete("/{meter_id}", response_model=MessageOut)
def delete_meter(
    meter_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("utilities", "update"))
):
    if not crud.delete(db, meter_id, resolve_org_id(current_user)):
        return not_found("Meter")
    return {"message": "Meter deleted"}
