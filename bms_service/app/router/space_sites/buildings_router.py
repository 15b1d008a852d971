from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.space_sites import buildings_crud as crud
from ...schemas.space_sites.buildings_schemas import (
    BuildingCreate, BuildingListResponse, BuildingOut, BuildingRequest, BuildingUpdate
)

router = APIRouter(
    prefix="/api/buildings",
    tags=["buildings"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=BuildingListResponse)
def list_buildings(
    params: BuildingRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("buildings", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.get("/overview")
def get_buildings_overview(
    params: BuildingRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("buildings", "read"))
):
    return crud.buildings_overview(db, resolve_org_id(current_user, params.organization_id))


@router.post("", response_model=BuildingOut, status_code=201)
def create_building(
    payload: BuildingCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("buildings", "create"))
):
    return crud.create(db, resolve_org_id(current_user), payload)


@router.get("/{building_id}", response_model=BuildingOut)
def get_building(
    building_id: str,
    params: BuildingRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("buildings", "read"))
):
    building = crud.get_by_id(db, building_id, resolve_org_id(current_user, params.organization_id))
    if not building:
        return not_found("Building")
    return building


@router.patch("/{building_id}", response_model=BuildingOut)
def update_building(
    building_id: str,
    payload: BuildingUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("buildings", "update"))
):
    building = crud.update(db, building_id, resolve_org_id(current_user), payload)
    if not building:
        return not_found("Building")
    return building


@router.delete("/{building_id}", response_model=BuildingOut)
def delete_building(
    building_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("buildings", "delete"))
):
    building = crud.delete(db, building_id, resolve_org_id(current_user))
    if not building:
        return not_found("Building")
    return building
