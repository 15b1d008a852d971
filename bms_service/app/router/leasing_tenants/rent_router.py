from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import require_permission, resolve_org_id, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken

from ...crud.leasing_tenants import rent_crud as crud
from ...schemas.leasing_tenants.rent_schemas import RentBulkUpdateRequest, RentBulkUpdateResponse

router = APIRouter(
    prefix="/api/rent",
    tags=["rent"],
    dependencies=[Depends(validate_current_token)]
)


@router.post("/bulk-update", response_model=RentBulkUpdateResponse)
def bulk_update_rent(
    payload: RentBulkUpdateRequest,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(require_permission("leases", "update"))
):
    return crud.bulk_update(db, resolve_org_id(current_user), payload)
