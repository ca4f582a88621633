"""
Floper — FastAPI app factory with startup connection and data loading.
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from floper.api.router_meta import router as meta_router
from floper.api.router_records import router as records_router
from floper.api.router_reports import router as reports_router
from floper.data.errors import StorageError
from floper.data.remote import Backend, connect, storage_configured
from floper.data.store import Workspace


async def preload(workspace: Workspace) -> None:
    """Load every collection; a failing table is reported and left empty."""
    for name, view in workspace.views.items():
        try:
            await view.load()
            print(f"  {view.kind.label}: {view.row_count():,} records")
        except StorageError as exc:
            print(f"  Warning: could not load {name.value}: {exc.message}")


def create_app(backend: Backend | None = None, load_on_startup: bool | None = None) -> FastAPI:
    """Build the app. Without a backend, one is created from SUPABASE_URL / SUPABASE_KEY."""
    from floper.config import PRELOAD_ON_STARTUP

    if load_on_startup is None:
        load_on_startup = PRELOAD_ON_STARTUP

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store_backend = backend
        if store_backend is None and storage_configured():
            store_backend = await connect()
        if store_backend is None:
            print("\nFloper ready — storage not configured. Set SUPABASE_URL and SUPABASE_KEY.\n")
            app.state.workspace = None
            yield
            return

        workspace = Workspace(store_backend)
        app.state.workspace = workspace
        if load_on_startup:
            print("Loading records...")
            await preload(workspace)
        counts = ", ".join(f"{k} {v:,}" for k, v in workspace.counts().items())
        print(f"\nFloper ready — {counts}\n")
        yield

    app = FastAPI(
        title="Floper API",
        description="Stock, sales, and personnel-sales import and reporting",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(records_router)
    app.include_router(reports_router)

    return app


app = create_app()
