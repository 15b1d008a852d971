from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken

from ...crud.financials import reports_crud as crud
from ...schemas.financials.reports_schemas import (
    AgingReport, AgingRequest, FinancialReport, FinancialRequest, OccupancyReport
)

router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
    dependencies=[Depends(validate_current_token)]
)

FINANCIAL_VIEWS = ("view_financial", "view_org", "view_all", "view_cross_org")
OCCUPANCY_VIEWS = ("view_org", "view_building", "view_facility", "view_all", "view_cross_org")


@router.get("/aging", response_model=AgingReport)
def get_aging_report(
    params: AgingRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("reporting", *FINANCIAL_VIEWS))
):
    return crud.aging_report(db, resolve_org_id(current_user, params.organization_id),
                             params.as_of, params.building_id, params.tenant_id)


@router.get("/financial", response_model=FinancialReport)
def get_financial_report(
    params: FinancialRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("reporting", *FINANCIAL_VIEWS))
):
    return crud.financial_report(db, resolve_org_id(current_user, params.organization_id),
                                 params.start_date, params.end_date, params.building_id)


@router.get("/occupancy", response_model=OccupancyReport)
def get_occupancy_report(
    building_id: Optional[str] = Query(None, alias="buildingId"),
    organization_id: Optional[str] = Query(None, alias="organizationId"),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("reporting", *OCCUPANCY_VIEWS))
):
    return crud.occupancy_report(db, resolve_org_id(current_user, organization_id), building_id)

