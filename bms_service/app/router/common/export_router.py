from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken

from ...crud.common import export_crud as crud
from ...schemas.financials.reports_schemas import ExportRequest

router = APIRouter(
    prefix="/api/reports/export",
    tags=["export"],
    dependencies=[Depends(validate_current_token)]
)


@router.get(
    "/{report}",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}, "application/pdf": {}},
                     "description": "Report file download"}},
)
def export_report(
        report: str,
        params: ExportRequest = Depends(),
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(require_permission("reporting", "export"))):
    return crud.export_report(db, resolve_org_id(current_user, params.organization_id), report, params)
