from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import MessageOut, UserToken
from shared.helpers.json_response_helper import not_found

from ...crud.security import security_incidents_crud as crud
from ...schemas.security.security_incidents_schemas import (
    SecurityIncidentCreate, SecurityIncidentListResponse, SecurityIncidentOut,
    SecurityIncidentRequest, SecurityIncidentUpdate
)

router = APIRouter(
    prefix="/api/security-incidents",
    tags=["security-incidents"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("", response_model=SecurityIncidentListResponse)
def list_incidents(
    params: SecurityIncidentRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "list", "read"))
):
    return crud.get_list(db, resolve_org_id(current_user, params.organization_id), params)


@router.post("", response_model=SecurityIncidentOut, status_code=201)
def create_incident(
    payload: SecurityIncidentCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "create", "update"))
):
    return crud.create(db, resolve_org_id(current_user), payload, current_user.user_id)


@router.get("/{incident_id}", response_model=SecurityIncidentOut)
def get_incident(
    incident_id: str,
    params: SecurityIncidentRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "read"))
):
    incident = crud.get_by_id(db, incident_id, resolve_org_id(current_user, params.organization_id))
    if not incident:
        return not_found("Security incident")
    return incident


@router.patch("/{incident_id}", response_model=SecurityIncidentOut)
def update_incident(
    incident_id: str,
    payload: SecurityIncidentUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "update"))
):
    incident = crud.update(db, incident_id, resolve_org_id(current_user), payload,
                           current_user.user_id)
    if not incident:
        return not_found("Security incident")
    return incident


@router.delete("/{incident_id}", response_model=MessageOut)
def delete_incident(
    incident_id: str,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("security", "update"))
):
    if not crud.delete(db, incident_id, resolve_org_id(current_user)):
        return not_found("Security incident")
    return {"message": "Security incident deleted"}
