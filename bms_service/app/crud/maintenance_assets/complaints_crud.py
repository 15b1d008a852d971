import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now
from shared.core.permissions import has_any_role_permission
from shared.core.schemas import UserToken

from ...models.leasing_tenants.tenants import Tenant
from ...models.maintenance_assets.complaints import Complaint
from ...models.space_sites.units import Unit
from ...schemas.maintenance_assets.complaints_schemas import (
    ComplaintCreate, ComplaintOut, ComplaintRequest, ComplaintUpdate, ConvertToWorkOrderRequest
)
from ...schemas.maintenance_assets.work_orders_schemas import WorkOrderCreate, WorkOrderOut
from ..common.references import apply_updates, ensure_same_org, get_scoped, json_ready, paginate
from . import work_orders_crud

logger = logging.getLogger(__name__)

RESOLVED_STATUSES = ("resolved", "closed")
JSON_FIELDS = ("preferred_time_window",)
# fields a tenant may change on their own complaint
TENANT_EDITABLE = {"title", "description", "photos", "unit_id", "category",
                   "maintenance_category", "urgency", "preferred_time_window"}

MAINTENANCE_TO_WORK_ORDER = {
    "plumbing": "plumbing",
    "electrical": "electrical",
    "hvac": "hvac",
}
CATEGORY_TO_WORK_ORDER = {
    "security": "security",
    "cleanliness": "cleaning",
}
URGENCY_TO_PRIORITY = {
    "emergency": "urgent",
    "high": "high",
    "medium": "medium",
    "low": "low",
}


def work_order_category(complaint: Complaint) -> str:
    if complaint.maintenance_category:
        return MAINTENANCE_TO_WORK_ORDER.get(complaint.maintenance_category, "other")
    return CATEGORY_TO_WORK_ORDER.get(complaint.category, "other")


def work_order_priority(complaint: Complaint) -> str:
    if complaint.urgency:
        return URGENCY_TO_PRIORITY[complaint.urgency]
    return complaint.priority or "medium"


def own_tenant_id(db: Session, org_id: UUID, current_user: UserToken, action: str) -> Optional[UUID]:
    """
    Tenant id the caller is limited to, or None when the role grants `action`
    across the organization.
    """
    if current_user.is_super_admin or \
            has_any_role_permission(current_user.roles, "complaints", action):
        return None
    tenant = db.query(Tenant).filter(Tenant.org_id == org_id,
                                     Tenant.user_id == parse_id(current_user.user_id)).first()
    if not tenant:
        raise ValueError("Tenant not found. Please contact your building manager.")
    return tenant.id


def _check_window(window: Optional[dict]):
    if window and window["end"] <= window["start"]:
        raise ValueError("Preferred time window end must be after start")


def _apply_status(complaint: Complaint, status: Optional[str], assigned_to: Optional[UUID] = None):
    if assigned_to:
        complaint.assigned_to = assigned_to
        if complaint.status == "open" and status in (None, "open"):
            status = "assigned"

    if not status or status == complaint.status:
        return
    if status in RESOLVED_STATUSES:
        complaint.resolved_at = complaint.resolved_at or utc_now()
    else:
        complaint.resolved_at = None
    complaint.status = status


def get_list(db: Session, org_id: UUID, params: ComplaintRequest,
             tenant_id: Optional[UUID] = None):
    query = db.query(Complaint).filter(Complaint.org_id == org_id)
    if tenant_id:
        query = query.filter(Complaint.tenant_id == tenant_id)
    elif params.tenant_id:
        query = query.filter(Complaint.tenant_id == parse_id(params.tenant_id))
    if params.unit_id:
        query = query.filter(Complaint.unit_id == parse_id(params.unit_id))
    if params.status:
        query = query.filter(Complaint.status == params.status)
    if params.priority:
        query = query.filter(Complaint.priority == params.priority)
    if params.category:
        query = query.filter(Complaint.category == params.category)
    if params.type:
        query = query.filter(Complaint.type == params.type)
    if params.assigned_to:
        query = query.filter(Complaint.assigned_to == parse_id(params.assigned_to))
    if params.search:
        term = f"%{params.search}%"
        query = query.filter(or_(Complaint.title.ilike(term), Complaint.description.ilike(term)))

    rows, total = paginate(query.order_by(Complaint.created_at.desc()), params)
    return {"complaints": [ComplaintOut.model_validate(c) for c in rows], "total": total}


def get_by_id(db: Session, complaint_id, org_id: Optional[UUID] = None,
              tenant_id: Optional[UUID] = None) -> Optional[Complaint]:
    complaint = get_scoped(db, Complaint, complaint_id, org_id)
    if complaint and tenant_id and complaint.tenant_id != tenant_id:
        return None
    return complaint


def find_by_tenant(db: Session, tenant_id, org_id: UUID) -> List[Complaint]:
    return (
        db.query(Complaint)
        .filter(Complaint.org_id == org_id, Complaint.tenant_id == parse_id(tenant_id))
        .order_by(Complaint.created_at.desc())
        .all()
    )


def find_by_status(db: Session, org_id: UUID, status: str) -> List[Complaint]:
    return (
        db.query(Complaint)
        .filter(Complaint.org_id == org_id, Complaint.status == status)
        .order_by(Complaint.priority.asc(), Complaint.created_at.desc())
        .all()
    )


def create(db: Session, org_id: UUID, payload: ComplaintCreate,
           tenant_id: Optional[UUID] = None) -> Complaint:
    data = json_ready(payload, payload.model_dump(), JSON_FIELDS)
    if tenant_id:
        data["tenant_id"] = tenant_id
    if not data.get("tenant_id") or not data.get("title") or \
            not data.get("description") or not data.get("category"):
        raise ValueError("tenantId, title, description, and category are required")
    _check_window(payload.model_dump().get("preferred_time_window"))

    ensure_same_org(db, Tenant, data["tenant_id"], org_id, "Tenant")
    if data.get("unit_id"):
        ensure_same_org(db, Unit, data["unit_id"], org_id, "Unit")

    complaint = Complaint(**data, org_id=org_id, status="open")
    db.add(complaint)
    db.commit()
    db.refresh(complaint)
    logger.info(f"Complaint {complaint.id} filed for tenant {complaint.tenant_id}")
    return complaint


def update(db: Session, complaint_id, org_id: UUID, payload: ComplaintUpdate,
           tenant_id: Optional[UUID] = None) -> Optional[Complaint]:
    complaint = get_by_id(db, complaint_id, org_id, tenant_id)
    if not complaint:
        return None

    data = json_ready(payload, payload.model_dump(exclude_unset=True), JSON_FIELDS,
                      exclude_unset=True)
    if tenant_id and set(data) - TENANT_EDITABLE:
        raise ValueError("Access denied: tenants cannot change status, assignment or resolution")
    _check_window(payload.model_dump(exclude_unset=True).get("preferred_time_window"))
    if data.get("unit_id"):
        ensure_same_org(db, Unit, data["unit_id"], org_id, "Unit")

    status = data.pop("status", None)
    assigned_to = data.pop("assigned_to", None)
    apply_updates(complaint, data)
    _apply_status(complaint, status, assigned_to)
    db.commit()
    db.refresh(complaint)
    return complaint


def convert_to_work_order(db: Session, complaint_id, org_id: UUID,
                          payload: ConvertToWorkOrderRequest, user_id: Optional[str] = None):
    complaint = get_by_id(db, complaint_id, org_id)
    if not complaint:
        return None
    if complaint.linked_work_order_id:
        raise ValueError("Complaint already has a linked work order")
    if complaint.status in RESOLVED_STATUSES:
        raise ValueError("Cannot convert closed or resolved complaint to work order")
    if not complaint.unit_id:
        raise ValueError("Complaint must be associated with a unit to create work order")
    unit = ensure_same_org(db, Unit, complaint.unit_id, org_id, "Unit")

    scheduled_date = payload.scheduled_date
    if not scheduled_date and complaint.preferred_time_window:
        scheduled_date = complaint.preferred_time_window.get("start")

    order = work_orders_crud.create(db, org_id, WorkOrderCreate(
        building_id=payload.building_id or unit.building_id,
        complaint_id=complaint.id,
        unit_id=complaint.unit_id,
        title=complaint.title,
        description=complaint.description,
        category=payload.category or work_order_category(complaint),
        priority=payload.priority or work_order_priority(complaint),
        assigned_to=payload.assigned_to,
        scheduled_date=scheduled_date,
        photos=complaint.photos,
    ), user_id)

    complaint.linked_work_order_id = order.id
    complaint.status = "in_progress" if payload.assigned_to else "assigned"
    db.commit()
    logger.info(f"Complaint {complaint.id} converted to work order {order.id}")
    return {
        "message": "Work order created successfully from complaint",
        "work_order": WorkOrderOut.model_validate(order),
    }
