from uuid import UUID

from sqlalchemy.orm import Session

from shared.core.database import parse_id, utc_now
from shared.exporthelper import export_to_csv, export_to_pdf

from ...models.financials.invoices import Invoice
from ...models.financials.payments import Payment
from ...models.maintenance_assets.work_orders import WorkOrder
from ...models.security.security_incidents import SecurityIncident
from ...schemas.financials.reports_schemas import ExportRequest
from ..financials import reports_crud

REPORT_TITLES = {
    "aging": "Accounts Receivable Aging",
    "financial": "Financial Summary",
    "payments": "Payments",
    "invoices": "Invoices",
    "work-orders": "Work Orders",
    "incidents": "Security Incidents",
}


def _fmt_date(value) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _aging_rows(db: Session, org_id: UUID, params: ExportRequest):
    report = reports_crud.aging_report(db, org_id, params.as_of, params.building_id, params.tenant_id)
    rows = []
    for bucket in report["buckets"]:
        for inv in bucket["invoices"]:
            rows.append({
                "bucket": bucket["label"],
                "invoice_number": inv["invoice_number"],
                "tenant_id": str(inv["tenant_id"]),
                "due_date": _fmt_date(inv["due_date"]),
                "days_overdue": inv["days_overdue"],
                "amount": inv["amount"],
            })
    column_map = {
        "bucket": "Bucket",
        "invoice_number": "Invoice",
        "tenant_id": "Tenant",
        "due_date": "Due Date",
        "days_overdue": "Days Overdue",
        "amount": "Outstanding",
    }
    summary = {
        "Total receivables": f"{report['total_receivables']:,.2f}",
        "Invoices": str(report["total_invoice_count"]),
    }
    return rows, column_map, summary


def _financial_rows(db: Session, org_id: UUID, params: ExportRequest):
    report = reports_crud.financial_report(db, org_id, params.start_date, params.end_date,
                                           params.building_id)
    rows = [
        {"metric": "Total invoiced", "value": report["total_invoiced"]},
        {"metric": "Total collected", "value": report["total_collected"]},
        {"metric": "Outstanding", "value": report["outstanding"]},
        {"metric": "Collection rate (%)", "value": report["collection_rate"]},
    ]
    rows += [{"metric": f"Payments via {method}", "value": amount}
             for method, amount in report["payments_by_method"].items()]
    rows += [{"metric": f"Invoices {status}", "value": count}
             for status, count in report["invoices_by_status"].items()]
    return rows, {"metric": "Metric", "value": "Value"}, None


def _payment_rows(db: Session, org_id: UUID, params: ExportRequest):
    query = db.query(Payment).filter(Payment.org_id == org_id)
    if params.start_date:
        query = query.filter(Payment.payment_date >= params.start_date)
    if params.end_date:
        query = query.filter(Payment.payment_date <= params.end_date)
    if params.tenant_id:
        query = query.filter(Payment.tenant_id == parse_id(params.tenant_id))
    if params.status:
        query = query.filter(Payment.status == params.status)
    rows = [{
        "payment_date": _fmt_date(p.payment_date),
        "reference_number": p.reference_number,
        "payment_method": p.payment_method,
        "amount": p.amount,
        "currency": p.currency,
        "status": p.status,
        "reconciliation_status": p.reconciliation_status,
    } for p in query.order_by(Payment.payment_date.desc()).all()]
    column_map = {
        "payment_date": "Date",
        "reference_number": "Reference",
        "payment_method": "Method",
        "amount": "Amount",
        "currency": "Currency",
        "status": "Status",
        "reconciliation_status": "Reconciliation",
    }
    return rows, column_map, {"Total": f"{sum(r['amount'] for r in rows):,.2f}"}


def _invoice_rows(db: Session, org_id: UUID, params: ExportRequest):
    query = db.query(Invoice).filter(Invoice.org_id == org_id)
    if params.start_date:
        query = query.filter(Invoice.issue_date >= params.start_date)
    if params.end_date:
        query = query.filter(Invoice.issue_date <= params.end_date)
    if params.tenant_id:
        query = query.filter(Invoice.tenant_id == parse_id(params.tenant_id))
    if params.status:
        query = query.filter(Invoice.status == params.status)
    rows = [{
        "invoice_number": i.invoice_number,
        "issue_date": _fmt_date(i.issue_date),
        "due_date": _fmt_date(i.due_date),
        "subtotal": i.subtotal,
        "tax": i.tax,
        "total": i.total,
        "status": i.status,
    } for i in query.order_by(Invoice.issue_date.desc()).all()]
    column_map = {
        "invoice_number": "Invoice",
        "issue_date": "Issued",
        "due_date": "Due",
        "subtotal": "Subtotal",
        "tax": "Tax",
        "total": "Total",
        "status": "Status",
    }
    return rows, column_map, {"Total": f"{sum(r['total'] for r in rows):,.2f}"}


def _work_order_rows(db: Session, org_id: UUID, params: ExportRequest):
    query = db.query(WorkOrder).filter(WorkOrder.org_id == org_id)
    if params.building_id:
        query = query.filter(WorkOrder.building_id == parse_id(params.building_id))
    if params.status:
        query = query.filter(WorkOrder.status == params.status)
    if params.start_date:
        query = query.filter(WorkOrder.created_at >= params.start_date)
    if params.end_date:
        query = query.filter(WorkOrder.created_at <= params.end_date)
    rows = [{
        "title": w.title,
        "category": w.category,
        "priority": w.priority,
        "status": w.status,
        "scheduled_date": _fmt_date(w.scheduled_date),
        "completed_at": _fmt_date(w.completed_at),
        "actual_cost": w.actual_cost,
    } for w in query.order_by(WorkOrder.created_at.desc()).all()]
    column_map = {
        "title": "Title",
        "category": "Category",
        "priority": "Priority",
        "status": "Status",
        "scheduled_date": "Scheduled",
        "completed_at": "Completed",
        "actual_cost": "Actual Cost",
    }
    return rows, column_map, None


def _incident_rows(db: Session, org_id: UUID, params: ExportRequest):
    query = db.query(SecurityIncident).filter(SecurityIncident.org_id == org_id)
    if params.building_id:
        query = query.filter(SecurityIncident.building_id == parse_id(params.building_id))
    if params.status:
        query = query.filter(SecurityIncident.status == params.status)
    if params.start_date:
        query = query.filter(SecurityIncident.reported_at >= params.start_date)
    if params.end_date:
        query = query.filter(SecurityIncident.reported_at <= params.end_date)
    rows = [{
        "reported_at": _fmt_date(i.reported_at),
        "title": i.title,
        "incident_type": i.incident_type,
        "severity": i.severity,
        "status": i.status,
        "resolved_at": _fmt_date(i.resolved_at),
    } for i in query.order_by(SecurityIncident.reported_at.desc()).all()]
    column_map = {
        "reported_at": "Reported",
        "title": "Title",
        "incident_type": "Type",
        "severity": "Severity",
        "status": "Status",
        "resolved_at": "Resolved",
    }
    return rows, column_map, None


REPORT_BUILDERS = {
    "aging": _aging_rows,
    "financial": _financial_rows,
    "payments": _payment_rows,
    "invoices": _invoice_rows,
    "work-orders": _work_order_rows,
    "incidents": _incident_rows,
}


def export_report(db: Session, org_id: UUID, report: str, params: ExportRequest):
    builder = REPORT_BUILDERS.get(report)
    if not builder:
        raise ValueError(f"Unknown report: {report}")
    fmt = (params.format or "csv").lower()
    if fmt not in ("csv", "pdf"):
        raise ValueError(f"Unsupported export format: {params.format}")

    rows, column_map, summary = builder(db, org_id, params)
    filename = f"{report}_report_{utc_now().strftime('%Y%m%d_%H%M%S')}.{fmt}"
    if fmt == "pdf":
        return export_to_pdf(rows, filename, REPORT_TITLES[report], column_map, summary)
    return export_to_csv(rows, filename, column_map)
