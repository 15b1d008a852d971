from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_super_admin, require_permission, validate_current_token
from shared.core.database import get_db, parse_id
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.space_sites import organizations_crud as crud
from ...schemas.space_sites.organizations_schemas import (
    OrganizationCreate, OrganizationListResponse, OrganizationOut, OrganizationRequest, OrganizationUpdate
)

router = APIRouter(
    prefix="/api/organizations",
    tags=["organizations"],
    dependencies=[Depends(validate_current_token)]
)


def _visible(current_user: UserToken, organization_id: str) -> bool:
    return current_user.is_super_admin or parse_id(organization_id) == current_user.org_id


@router.get("", response_model=OrganizationListResponse)
def list_organizations(
    params: OrganizationRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("organizations", "read"))
):
    org_id = None if current_user.is_super_admin else current_user.org_id
    return crud.get_list(db, params, org_id)


@router.post("", response_model=OrganizationOut, status_code=201)
def create_organization(
    payload: OrganizationCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_super_admin)
):
    return crud.create(db, payload)


@router.get("/{organization_id}", response_model=OrganizationOut)
def get_organization(
    organization_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("organizations", "read"))
):
    org = crud.get_by_id(db, organization_id) if _visible(current_user, organization_id) else None
    if not org:
        return not_found("Organization")
    return org


@router.patch("/{organization_id}", response_model=OrganizationOut)
def update_organization(
    organization_id: str,
    payload: OrganizationUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("organizations", "update"))
):
    org = crud.update(db, organization_id, payload) if _visible(current_user, organization_id) else None
    if not org:
        return not_found("Organization")
    return org


@router.delete("/{organization_id}", response_model=OrganizationOut)
def delete_organization(
    organization_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("organizations", "deactivate"))
):
    org = crud.delete(db, organization_id)
    if not org:
        return not_found("Organization")
    return org
