from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.maintenance_assets import assets_crud as crud
from ...schemas.maintenance_assets.assets_schemas import (
    AssetCreate, AssetListResponse, AssetOut, AssetRequest, AssetUpdate, DepreciationOut, ReliabilityOut
)
from ...schemas.maintenance_assets.maintenance_history_schemas import (
    MaintenanceHistoryCreate, MaintenanceHistoryListResponse, MaintenanceHistoryOut
)

router = APIRouter(
    prefix="/api/assets",
    tags=["assets"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=AssetListResponse)
def list_assets(
    params: AssetRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("assets", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.post("", response_model=AssetOut, status_code=201)
def create_asset(
    payload: AssetCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("assets", "create"))
):
    return crud.create(db, resolve_org_id(current_user), payload)


@router.get("/{asset_id}", response_model=AssetOut)
def get_asset(
    asset_id: str,
    params: AssetRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("assets", "read"))
):
    asset = crud.get_by_id(db, asset_id, resolve_org_id(current_user, params.organization_id))
    if not asset:
        return not_found("Asset")
    return asset


@router.patch("/{asset_id}", response_model=AssetOut)
def update_asset(
    asset_id: str,
    payload: AssetUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("assets", "update"))
):
    asset = crud.update(db, asset_id, resolve_org_id(current_user), payload)
    if not asset:
        return not_found("Asset")
    return asset


@router.delete("/{asset_id}", response_model=MessageOut)
def delete_asset(
    asset_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("assets", "delete"))
):
    if not crud.delete(db, asset_id, resolve_org_id(current_user)):
        return not_found("Asset")
    return {"message": "Asset disposed"}


@router.get("/{asset_id}/depreciation", response_model=DepreciationOut)
def get_asset_depreciation(
    asset_id: str,
    as_of: Optional[datetime] = Query(None, alias="asOf"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("assets", "read"))
):
    asset = crud.get_by_id(db, asset_id, resolve_org_id(current_user))
    if not asset:
        return not_found("Asset")
    return crud.calculate_depreciation(asset, as_of)


@router.get("/{asset_id}/history", response_model=MaintenanceHistoryListResponse)
def get_asset_history(
    asset_id: str,
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("assets", "read"))
):
    org_id = resolve_org_id(current_user)
    if not crud.get_by_id(db, asset_id, org_id):
        return not_found("Asset")
    return crud.list_history(db, asset_id, org_id, limit)


@router.post("/{asset_id}/history", response_model=MaintenanceHistoryOut, status_code=201)
def add_asset_history(
    asset_id: str,
    payload: MaintenanceHistoryCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("assets", "update"))
):
    entry = crud.add_history(db, asset_id, resolve_org_id(current_user), payload)
    if not entry:
        return not_found("Asset")
    return entry


@router.get("/{asset_id}/reliability", response_model=ReliabilityOut)
def get_asset_reliability(
    asset_id: str,
    period_months: int = Query(12, alias="periodMonths", ge=1),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("assets", "read"))
):
    result = crud.calculate_reliability(db, asset_id, resolve_org_id(current_user), period_months)
    if not result:
        return not_found("Asset")
    return result
