from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.space_sites import units_crud as crud
from ...schemas.space_sites.units_schemas import (
    UnitCreate, UnitListResponse, UnitOut, UnitRequest, UnitUpdate
)

router = APIRouter(
    prefix="/api/units",
    tags=["units"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=UnitListResponse)
def list_units(
    params: UnitRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("units", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.post("", response_model=UnitOut, status_code=201)
def create_unit(
    payload: UnitCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("units", "create"))
):
    return crud.create(db, resolve_org_id(current_user), payload)


@router.get("/{unit_id}", response_model=UnitOut)
def get_unit(
    unit_id: str,
    params: UnitRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("units", "read"))
):
    unit = crud.get_by_id(db, unit_id, resolve_org_id(current_user, params.organization_id))
    if not unit:
        return not_found("Unit")
    return unit


@router.patch("/{unit_id}", response_model=UnitOut)
def update_unit(
    unit_id: str,
    payload: UnitUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("units", "update"))
):
    unit = crud.update(db, unit_id, resolve_org_id(current_user), payload)
    if not unit:
        return not_found("Unit")
    return unit


@router.delete("/{unit_id}", response_model=UnitOut)
def delete_unit(
    unit_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("units", "delete"))
):
    unit = crud.delete(db, unit_id, resolve_org_id(current_user))
    if not unit:
        return not_found("Unit")
    return unit
