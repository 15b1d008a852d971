import uuid
from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from shared.core.database import Base, JSONType, utc_now


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"),
                    nullable=False, index=True)
    invoice_id = Column(Uuid, ForeignKey("invoices.id"), nullable=True)
    tenant_id = Column(Uuid, ForeignKey("tenants.id"), nullable=False)
    amount = Column(Float, nullable=False)
    payment_method = Column(String(24), nullable=False)
    payment_date = Column(DateTime, nullable=False, default=utc_now)
    # null values are distinct, so the constraint only binds references that are set
    reference_number = Column(String(128), nullable=True)
    status = Column(String(16), nullable=False, default="completed")
    provider_response = Column(JSONType, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Uuid, nullable=True)
    currency = Column(String(8), nullable=False, default="ETB")
    exchange_rate = Column(Float, nullable=True)
    provider_transaction_id = Column(String(128), nullable=True)
    reconciliation_status = Column(String(16), nullable=False, default="pending")
    failure_reason = Column(Text, nullable=True)
    retry_attempts = Column(Integer, nullable=False, default=0)
    receipt_url = Column(String(512), nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now,
                        onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("org_id", "reference_number",
                         name="uq_payments_org_reference"),
        Index("ix_payments_invoice_status", "invoice_id", "status"),
        Index("ix_payments_tenant", "tenant_id"),
        Index("ix_payments_org_reconciliation", "org_id", "reconciliation_status"),
    )

    invoice = relationship("Invoice")
    tenant = relationship("Tenant")
