import logging
from typing import List, Optional

from ..utils.email_client import EmailClient
from ..core.config import settings

logger = logging.getLogger(__name__)


class EmailHelper:
    """Sends notification emails. Delivery failures never reach the caller."""

    def __init__(self):
        self.mailer = None
        if settings.SMTP_HOST:
            self.mailer = EmailClient(
                smtp_host=settings.SMTP_HOST,
                smtp_port=settings.SMTP_PORT,
                username=settings.SMTP_USERNAME,
                password=settings.SMTP_PASSWORD,
                use_ssl=settings.SMTP_USE_SSL,
            )

    def send(self, recipients: List[Optional[str]], subject: str, text_body: str,
             html_body: Optional[str] = None) -> bool:
        recipients = [r for r in recipients if r]
        if not recipients:
            logger.info(f"No recipients for '{subject}', skipping")
            return False
        if not self.mailer:
            logger.info(f"SMTP not configured, skipping '{subject}'")
            return False
        try:
            self.mailer.send_email(
                settings.EMAIL_SENDER, recipients, subject, text_body, html_body)
            return True
        except Exception:
            logger.exception(f"Failed to send '{subject}'")
            return False


def notify_payment_received(tenant, payment, invoice=None) -> bool:
    invoice_no = invoice.invoice_number if invoice else "-"
    body = (
        f"Dear {tenant.first_name},\n\n"
        f"We received your payment of {payment.amount:.2f} {payment.currency} "
        f"for invoice {invoice_no}.\n\nThank you."
    )
    return EmailHelper().send([tenant.email], f"Payment received for {invoice_no}", body)


def notify_rent_change(tenant, old_rent: float, new_rent: float, effective_from=None) -> bool:
    when = effective_from.isoformat() if effective_from else "the next billing cycle"
    body = (
        f"Dear {tenant.first_name},\n\n"
        f"Your monthly rent changes from {old_rent:.2f} to {new_rent:.2f} "
        f"effective {when}."
    )
    return EmailHelper().send([tenant.email], "Rent update notice", body)


def notify_invoice_sent(tenant, invoice) -> bool:
    body = (
        f"Dear {tenant.first_name},\n\n"
        f"Invoice {invoice.invoice_number} for {invoice.total:.2f} is due on "
        f"{invoice.due_date.date().isoformat() if invoice.due_date else '-'}."
    )
    return EmailHelper().send([tenant.email], f"Invoice {invoice.invoice_number}", body)
