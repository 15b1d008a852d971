from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.system import feature_flags_crud as crud
from ...schemas.system.feature_flags_schemas import (
    FeatureFlagCreate, FeatureFlagEvaluation, FeatureFlagListResponse, FeatureFlagOut, FeatureFlagUpdate
)

router = APIRouter(
    prefix="/api/feature-flags",
    tags=["feature-flags"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=FeatureFlagListResponse)
def list_flags(
    organization_id: Optional[str] = Query(None, alias="organizationId"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    return crud.get_list(db, organization_id)


@router.get("/evaluate/{key}", response_model=FeatureFlagEvaluation)
def evaluate_flag(
    key: str,
    subject: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return {"key": key, "enabled": crud.is_enabled(db, key, current_user.org_id, subject)}


@router.post("", response_model=FeatureFlagOut, status_code=201)
def create_flag(
    payload: FeatureFlagCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    return crud.create(db, payload)


@router.get("/{flag_id}", response_model=FeatureFlagOut)
def get_flag(
    flag_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    flag = crud.get_by_id(db, flag_id)
    if not flag:
        return not_found("Feature flag")
    return flag


@router.patch("/{flag_id}", response_model=FeatureFlagOut)
def update_flag(
    flag_id: str,
    payload: FeatureFlagUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    flag = crud.update(db, flag_id, payload)
    if not flag:
        return not_found("Feature flag")
    return flag


@router.delete("/{flag_id}", response_model=MessageOut)
def delete_flag(
    flag_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    if not crud.delete(db, flag_id):
        return not_found("Feature flag")
    return {"message": "Feature flag deleted"}
