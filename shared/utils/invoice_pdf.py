from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Table, TableStyle, Spacer
)


def _fmt_date(value):
    return value.strftime("%Y-%m-%d") if value else "-"


def generate_invoice_pdf(invoice, organization_name: str, tenant_name: str = "",
                         currency: str = "ETB") -> bytes:
    styles = getSampleStyleSheet()
    story = []

    story.append(Paragraph(f"<b>{organization_name}</b>", styles["Title"]))
    story.append(Spacer(1, 10))

    story.append(
        Paragraph(f"Invoice No: {invoice.invoice_number}", styles["Normal"]))
    story.append(Paragraph(f"Tenant: {tenant_name}", styles["Normal"]))
    story.append(
        Paragraph(f"Issue date: {_fmt_date(invoice.issue_date)}", styles["Normal"]))
    story.append(
        Paragraph(f"Due date: {_fmt_date(invoice.due_date)}", styles["Normal"]))
    story.append(Paragraph(
        f"Period: {_fmt_date(invoice.period_start)} - {_fmt_date(invoice.period_end)}",
        styles["Normal"]))
    story.append(Paragraph(f"Status: {invoice.status}", styles["Normal"]))
    story.append(Spacer(1, 20))

    data = [["Description", "Type", f"Amount ({currency})"]]
    for item in invoice.items or []:
        data.append([item.get("description"), item.get("type", "other"),
                     f"{float(item.get('amount', 0)):.2f}"])

    data.append(["Subtotal", "", f"{invoice.subtotal:.2f}"])
    data.append(["VAT", "", f"{invoice.tax:.2f}"])
    data.append(["Total", "", f"{invoice.total:.2f}"])

    table = Table(data, colWidths=[260, 90, 120])
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.black),
        ("LINEABOVE", (0, -3), (-1, -3), 0.5, colors.black),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("ALIGN", (2, 0), (2, -1), "RIGHT"),
    ]))
    story.append(table)

    if invoice.notes:
        story.append(Spacer(1, 20))
        story.append(Paragraph(invoice.notes, styles["Normal"]))

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4)
    doc.build(story)
    return buffer.getvalue()
