from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin, require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.space_sites import organizations_crud
from ...crud.system import system_settings_crud
from ...schemas.space_sites.organizations_schemas import OrganizationOut, OrganizationSettingsUpdate
from ...schemas.system.system_settings_schemas import SystemSettingsOut, SystemSettingsUpdate

router = APIRouter(
    prefix="/api/settings",
    tags=["settings"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/organization", response_model=OrganizationOut)
def get_organization_settings(
    organization_id: Optional[str] = Query(None, alias="organizationId"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("organizations", "read"))
):
    org = organizations_crud.get_by_id(db, resolve_org_id(current_user, organization_id))
    if not org:
        return not_found("Organization")
    return org


@router.patch("/organization", response_model=OrganizationOut)
def update_organization_settings(
    payload: OrganizationSettingsUpdate,
    organization_id: Optional[str] = Query(None, alias="organizationId"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("organizations", "update"))
):
    org = organizations_crud.update_settings(
        db, resolve_org_id(current_user, organization_id), payload.settings)
    if not org:
        return not_found("Organization")
    return org


@router.get("/system", response_model=SystemSettingsOut)
def get_system_settings(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    return system_settings_crud.get_or_create(db)


@router.patch("/system", response_model=SystemSettingsOut)
def update_system_settings(
    payload: SystemSettingsUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    return system_settings_crud.update(db, payload, current_user.user_id)
