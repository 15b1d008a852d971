from io import StringIO
from typing import Dict, List

import pandas as pd
from fastapi.responses import Response

from shared.utils.report_pdf import render_table_pdf


def build_frame(data: List[Dict], column_map: Dict[str, str] | None = None) -> pd.DataFrame:
    """
    Build a DataFrame with friendly headers and safe handling of missing keys.

    Args:
        data: List of dictionaries (each dict = row)
        column_map: Mapping of data keys -> friendly column names
    """
    rows = [dict(row) for row in data]

    if column_map:
        for row in rows:
            for key in column_map.keys():
                row.setdefault(key, None)

    df = pd.DataFrame(rows, columns=list(column_map.keys()) if column_map else None)

    if column_map:
        df = df.rename(columns=column_map)
    return df


def attachment_headers(filename: str) -> Dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def export_to_csv(data: List[Dict], filename: str, column_map: Dict[str, str] | None = None) -> Response:
    df = build_frame(data, column_map)
    output = StringIO()
    df.to_csv(output, index=False)
    return Response(
        content=output.getvalue(),
        media_type="text/csv",
        headers=attachment_headers(filename),
    )


def export_to_pdf(data: List[Dict], filename: str, title: str,
                  column_map: Dict[str, str] | None = None,
                  summary: Dict[str, str] | None = None) -> Response:
    df = build_frame(data, column_map)
    rows = df.where(pd.notnull(df), "").astype(str).values.tolist()
    content = render_table_pdf(title, list(df.columns), rows, summary=summary)
    return Response(
        content=content,
        media_type="application/pdf",
        headers=attachment_headers(filename),
    )
