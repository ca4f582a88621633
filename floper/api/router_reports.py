"""
Report endpoints — per-kind summary as JSON or Excel download.
"""
from __future__ import annotations

import os
import tempfile

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, JSONResponse
from starlette.background import BackgroundTask

from floper.analytics.common import sanitize_for_json
from floper.api.dependencies import get_view
from floper.data.store import RecordView
from floper.reports import records_report

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _safe_json(data: dict) -> JSONResponse:
    return JSONResponse(content=sanitize_for_json(data))


@router.get("/{kind}")
def report_json(
    view: RecordView = Depends(get_view),
    q: str = Query(""),
    field: str = Query(""),
    value: str = Query(""),
):
    """KPIs, rankings, and shares over the filtered records."""
    return _safe_json(records_report.generate_json(view, q, field, value))


@router.get("/{kind}/excel")
def report_excel(
    view: RecordView = Depends(get_view),
    q: str = Query(""),
    field: str = Query(""),
    value: str = Query(""),
):
    """Same report as a styled workbook, with the filtered records on their own sheet."""
    fd, out_path = tempfile.mkstemp(prefix="floper_", suffix=".xlsx")
    os.close(fd)
    try:
        records_report.generate_excel(view, out_path, q, field, value)
    except Exception:
        os.remove(out_path)
        raise
    return FileResponse(
        path=out_path,
        filename=f"Floper_{view.kind.label.replace(' ', '_')}_Report.xlsx",
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        # Each request gets its own file, removed once sent
        background=BackgroundTask(os.remove, out_path),
    )
