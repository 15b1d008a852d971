from datetime import datetime
from io import BytesIO
from typing import Dict, List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Table, TableStyle, Spacer
)

TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2b2f36")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTSIZE", (0, 0), (-1, -1), 8),
    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f5f7fb")]),
])


def render_table_pdf(title: str, headers: List[str], rows: List[List[str]],
                     summary: Optional[Dict[str, str]] = None) -> bytes:
    """Render a titled table report and return the PDF bytes."""
    styles = getSampleStyleSheet()
    story = [
        Paragraph(f"<b>{title}</b>", styles["Title"]),
        Paragraph(f"Generated: {datetime.utcnow():%Y-%m-%d %H:%M} UTC", styles["Normal"]),
        Spacer(1, 12),
    ]

    if summary:
        for label, value in summary.items():
            story.append(Paragraph(f"{label}: <b>{value}</b>", styles["Normal"]))
        story.append(Spacer(1, 12))

    table = Table([headers] + rows, repeatRows=1)
    table.setStyle(TABLE_STYLE)
    story.append(table)

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=landscape(A4))
    doc.build(story)
    return buffer.getvalue()
