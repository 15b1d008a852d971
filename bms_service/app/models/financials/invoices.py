import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, JSONType, utc_now


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    lease_id = Column(Uuid, ForeignKey("leases.id"), nullable=False)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=False)
    unit_id = Column(Uuid, ForeignKey("units.id"), nullable=False)
    invoice_number = Column(String(32), nullable=False)
    issue_date = Column(DateTime, nullable=False, default=utc_now)
    due_date = Column(DateTime, nullable=False)
    period_start = Column(DateTime, nullable=False)
    period_end = Column(DateTime, nullable=False)
    items = Column(JSONType, nullable=False, default=list)  # [{description, amount, type}]
    subtotal = Column(Float, nullable=False, default=0)
    vat_rate = Column(Float, nullable=True)
    tax = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False, default=0)
    status = Column(String(16), nullable=False, default="draft")
    paid_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("org_id", "invoice_number",
                         name="uq_invoices_org_number"),
        Index("ix_invoices_org_status_due", "org_id", "status", "due_date"),
        Index("ix_invoices_tenant", "tenant_id"),
        Index("ix_invoices_lease", "lease_id"),
    )

    tenant = relationship("Tenant")
    lease = relationship("Lease")
