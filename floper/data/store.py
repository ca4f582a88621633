"""
Session state — one in-memory record collection per kind, owned by a Workspace.

A Workspace is created per app (API) or per command (CLI) and passed around
explicitly; aggregation and filtering receive the view's frame as a parameter.
"""
from __future__ import annotations

from collections import deque
from contextlib import asynccontextmanager
from typing import AsyncIterator

import pandas as pd

from floper.analytics.filters import filter_records
from floper.data.normalize import empty_frame
from floper.data.remote import Backend
from floper.data.schemas import KINDS, KindName, RecordKind, get_kind
from floper.data.service import ImportResult, RecordService


class BusyError(RuntimeError):
    """An import / load / clear is already running for this view."""


class RecordView:
    """Loaded records of one kind, with its busy flag and progress messages."""

    MAX_MESSAGES = 20

    def __init__(self, service: RecordService) -> None:
        self.service = service
        self.kind: RecordKind = service.kind
        self.df: pd.DataFrame = empty_frame(self.kind)
        self.busy = False
        self._loaded = False
        self.messages: deque[str] = deque(maxlen=self.MAX_MESSAGES)

    # ------------------------------------------------------------------
    # Progress channel
    # ------------------------------------------------------------------

    def report(self, message: str) -> None:
        self.messages.append(message)

    @property
    def last_message(self) -> str:
        return self.messages[-1] if self.messages else ""

    @asynccontextmanager
    async def _operation(self) -> AsyncIterator[None]:
        if self.busy:
            raise BusyError(f"{self.kind.label} data is busy with another operation")
        self.busy = True
        self.messages.clear()
        try:
            yield
        finally:
            self.busy = False

    # ------------------------------------------------------------------
    # Remote operations
    # ------------------------------------------------------------------

    async def load(self) -> pd.DataFrame:
        """Replace the collection with everything currently stored remotely."""
        async with self._operation():
            self.report("Connecting to the database...")
            self.df = await self.service.load(self.report)
            self._loaded = True
        return self.df

    async def import_file(self, content: bytes, filename: str) -> ImportResult:
        """Import a spreadsheet, then reload the collection."""
        async with self._operation():
            result = await self.service.import_file(content, filename, self.report)
            self.df = await self.service.load(self.report)
            self._loaded = True
        return result

    async def import_rows(self, rows: list[dict]) -> ImportResult:
        async with self._operation():
            result = await self.service.add_rows(rows, self.report)
            self.df = await self.service.load(self.report)
            self._loaded = True
        return result

    async def clear(self) -> None:
        async with self._operation():
            self.report("Deleting records...")
            await self.service.clear()
            self.df = empty_frame(self.kind)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def filtered(self, query: str = "", field: str = "", value: str = "") -> pd.DataFrame:
        """The subset matching one request's search and field filter; the view is not modified."""
        return filter_records(self.df, query or "", field or "", value or "")

    def row_count(self) -> int:
        return len(self.df)


class Workspace:
    """All record views of one session."""

    def __init__(self, backend: Backend, chunk_size: int | None = None, page_size: int | None = None) -> None:
        self.backend = backend
        self.views: dict[KindName, RecordView] = {}
        for kind in KINDS.values():
            kwargs = {}
            if chunk_size is not None:
                kwargs["chunk_size"] = chunk_size
            if page_size is not None:
                kwargs["page_size"] = page_size
            self.views[kind.name] = RecordView(RecordService(backend, kind, **kwargs))

    def view(self, name: str | KindName) -> RecordView:
        return self.views[get_kind(name).name]

    def counts(self) -> dict[str, int]:
        return {name.value: v.row_count() for name, v in self.views.items()}
