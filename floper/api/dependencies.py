"""
FastAPI dependencies — per-app Workspace lookup, record views, error mapping.
"""
from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from floper.data.errors import FloperError, StorageError
from floper.data.schemas import KindName
from floper.data.store import BusyError, RecordView, Workspace


def get_workspace_or_none(request: Request) -> Workspace | None:
    return getattr(request.app.state, "workspace", None)


def get_workspace(request: Request) -> Workspace:
    workspace = get_workspace_or_none(request)
    if workspace is None:
        raise HTTPException(503, "Storage not configured (set SUPABASE_URL and SUPABASE_KEY)")
    return workspace


def get_view(kind: KindName, workspace: Workspace = Depends(get_workspace)) -> RecordView:
    return workspace.view(kind)


def http_error(exc: Exception) -> HTTPException:
    """Map a pipeline failure to the HTTP error the client sees."""
    if isinstance(exc, BusyError):
        return HTTPException(409, str(exc))
    if isinstance(exc, StorageError):
        return HTTPException(502, exc.message)
    if isinstance(exc, (FloperError, ValueError)):
        return HTTPException(400, str(exc))
    return HTTPException(500, str(exc))
