"""
Meta endpoints: health, remote table connectivity.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from floper.api.dependencies import get_workspace, get_workspace_or_none
from floper.api.response_models import HealthResponse, TablesResponse
from floper.data.remote import check_tables
from floper.data.store import Workspace

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(workspace: Workspace | None = Depends(get_workspace_or_none)):
    if workspace is None:
        return HealthResponse(status="ok", storage_configured=False, records={}, busy={})
    return HealthResponse(
        status="ok",
        storage_configured=True,
        records=workspace.counts(),
        busy={name.value: v.busy for name, v in workspace.views.items()},
    )


@router.get("/health/tables", response_model=TablesResponse)
async def health_tables(workspace: Workspace = Depends(get_workspace)):
    """Probe each remote table with a count query."""
    tables = await check_tables(workspace.backend)
    return TablesResponse(ok=all(v is None for v in tables.values()), tables=tables)
