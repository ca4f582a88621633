"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    storage_configured: bool
    records: dict[str, int]
    busy: dict[str, bool]


class TablesResponse(BaseModel):
    ok: bool
    tables: dict[str, Optional[str]]  # kind → None (ok) or error message


class FieldsResponse(BaseModel):
    kind: str
    fields: list[str]
    filter_fields: list[str]
    numeric_fields: list[str]


class UploadResponse(BaseModel):
    status: str
    filename: str
    rows_parsed: int
    rows_inserted: int
    total_records: int


class LoadResponse(BaseModel):
    status: str
    total_records: int


class ClearResponse(BaseModel):
    status: str
    kind: str


class StatusResponse(BaseModel):
    kind: str
    busy: bool
    loaded: bool
    message: str
    messages: list[str]


class RecordsResponse(BaseModel):
    kind: str
    total: int
    filtered: int
    offset: int
    limit: int
    rows: list[dict[str, Any]]
