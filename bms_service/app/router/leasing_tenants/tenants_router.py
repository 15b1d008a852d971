from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.leasing_tenants import tenants_crud as crud
from ...schemas.leasing_tenants.tenants_schemas import (
    TenantCreate, TenantListResponse, TenantOut, TenantRequest, TenantUpdate
)

router = APIRouter(
    prefix="/api/tenants",
    tags=["tenants"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=TenantListResponse)
def list_tenants(
    params: TenantRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("tenants", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.get("/overview")
def get_tenants_overview(
    params: TenantRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("tenants", "list", "read"))
):
    return crud.tenants_overview(db, resolve_org_id(current_user, params.organization_id))


@router.post("", response_model=TenantOut, status_code=201)
def create_tenant(
    payload: TenantCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("tenants", "create"))
):
    return crud.create(db, resolve_org_id(current_user), payload)


@router.get("/{tenant_id}", response_model=TenantOut)
def get_tenant(
    tenant_id: str,
    params: TenantRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("tenants", "read"))
):
    tenant = crud.get_by_id(db, tenant_id, resolve_org_id(current_user, params.organization_id))
    if not tenant:
        return not_found("Tenant")
    return tenant


@router.patch("/{tenant_id}", response_model=TenantOut)
def update_tenant(
    tenant_id: str,
    payload: TenantUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("tenants", "update"))
):
    tenant = crud.update(db, tenant_id, resolve_org_id(current_user), payload)
    if not tenant:
        return not_found("Tenant")
    return tenant


@router.delete("/{tenant_id}", response_model=TenantOut)
def delete_tenant(
    tenant_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("tenants", "delete"))
):
    tenant = crud.delete(db, tenant_id, resolve_org_id(current_user))
    if not tenant:
        return not_found("Tenant")
    return tenant
