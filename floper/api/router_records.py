"""
Record endpoints: upload a spreadsheet, (re)load, browse with search/filter, clear.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from floper.analytics.common import sanitize_for_json
from floper.analytics.filters import filter_fields
from floper.api.dependencies import get_view, http_error
from floper.api.response_models import (
    ClearResponse, FieldsResponse, LoadResponse, RecordsResponse, StatusResponse, UploadResponse,
)
from floper.data.errors import FloperError
from floper.data.store import BusyError, RecordView

router = APIRouter(prefix="/api/records", tags=["records"])


@router.get("/{kind}/fields", response_model=FieldsResponse)
def list_fields(view: RecordView = Depends(get_view)):
    """Field names, and which of them a UI may offer as single-field filters."""
    kind = view.kind
    return FieldsResponse(
        kind=kind.name.value,
        fields=kind.fields,
        filter_fields=filter_fields(kind),
        numeric_fields=list(kind.numeric_fields),
    )


@router.post("/{kind}/upload", response_model=UploadResponse)
async def upload_spreadsheet(file: UploadFile = File(...), view: RecordView = Depends(get_view)):
    """Import every row of the first sheet, then reload the collection."""
    if not file.filename:
        raise HTTPException(400, "Missing filename")

    content = await file.read()
    try:
        result = await view.import_file(content, file.filename)
    except (FloperError, BusyError) as exc:
        raise http_error(exc) from exc

    return UploadResponse(
        status="uploaded",
        filename=file.filename,
        rows_parsed=result.rows_parsed,
        rows_inserted=result.rows_inserted,
        total_records=view.row_count(),
    )


@router.post("/{kind}/load", response_model=LoadResponse)
async def load_records(view: RecordView = Depends(get_view)):
    """Re-read the whole collection from the remote table."""
    try:
        await view.load()
    except (FloperError, BusyError) as exc:
        raise http_error(exc) from exc
    return LoadResponse(status="loaded", total_records=view.row_count())


@router.get("/{kind}", response_model=RecordsResponse)
def list_records(
    view: RecordView = Depends(get_view),
    q: str = Query("", description="Free-text search over every field"),
    field: str = Query("", description="Field for the single-field filter"),
    value: str = Query("", description="Substring the field must contain"),
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=5000),
):
    """The filtered collection, one window at a time."""
    df = view.filtered(q, field, value)
    window = df.iloc[offset:offset + limit]
    return RecordsResponse(
        kind=view.kind.name.value,
        total=view.row_count(),
        filtered=len(df),
        offset=offset,
        limit=limit,
        rows=sanitize_for_json(window.to_dict("records")),
    )


@router.delete("/{kind}", response_model=ClearResponse)
async def clear_records(view: RecordView = Depends(get_view)):
    """Delete every record of this kind, remotely and in memory."""
    try:
        await view.clear()
    except (FloperError, BusyError) as exc:
        raise http_error(exc) from exc
    return ClearResponse(status="cleared", kind=view.kind.name.value)


@router.get("/{kind}/status", response_model=StatusResponse)
def operation_status(view: RecordView = Depends(get_view)):
    """Busy flag and progress messages of the running (or last) operation."""
    return StatusResponse(
        kind=view.kind.name.value,
        busy=view.busy,
        loaded=view.is_loaded,
        message=view.last_message,
        messages=list(view.messages),
    )
