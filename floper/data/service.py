"""
Record service — import, load, and clear one record kind against its remote table.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

import pandas as pd

from floper.config import CHUNK_SIZE, PAGE_SIZE
from floper.data.errors import RemoteDeleteFailure, StorageError
from floper.data.loader import parse_spreadsheet
from floper.data.normalize import normalize_rows, to_storage_rows
from floper.data.reader import read_all
from floper.data.remote import Backend
from floper.data.schemas import RecordKind
from floper.data.writer import insert_in_chunks

Progress = Callable[[str], None]


@dataclass
class ImportResult:
    rows_parsed: int
    rows_inserted: int


class RecordService:
    """Import / load / clear for a single record kind."""

    def __init__(
        self,
        backend: Backend,
        kind: RecordKind,
        chunk_size: int = CHUNK_SIZE,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.kind = kind
        self.table = backend.table(kind.table)
        self.chunk_size = chunk_size
        self.page_size = page_size

    async def add_rows(self, rows: Iterable[dict], progress: Progress | None = None) -> ImportResult:
        """Normalize raw rows and write them in chunks. Raises EmptyInputError before any write."""
        df = normalize_rows(rows, self.kind)
        if progress:
            progress(f"Writing {len(df):,} {self.kind.label.lower()} records...")
        inserted = await insert_in_chunks(
            self.table, to_storage_rows(df, self.kind), self.chunk_size, progress,
        )
        return ImportResult(rows_parsed=len(df), rows_inserted=len(inserted))

    async def import_file(
        self, content: bytes, filename: str, progress: Progress | None = None,
    ) -> ImportResult:
        """Parse an uploaded spreadsheet, then add its rows."""
        if progress:
            progress(f"Reading {filename}...")
        rows = parse_spreadsheet(content, filename)
        return await self.add_rows(rows, progress)

    async def load(self, progress: Progress | None = None) -> pd.DataFrame:
        return await read_all(self.table, self.kind, self.page_size, progress)

    async def clear(self) -> None:
        """Delete every record of this kind. An empty table is not an error."""
        try:
            await self.table.delete_all()
        except StorageError as exc:
            raise RemoteDeleteFailure(exc.message) from exc
