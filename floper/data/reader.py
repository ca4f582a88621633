"""
Paged reader: fetch a whole remote table in fixed-size pages, newest first.
"""
from __future__ import annotations

import math
from typing import Callable

import pandas as pd

from floper.config import PAGE_SIZE, ORDER_COLUMN
from floper.data.errors import RemoteReadFailure, StorageError
from floper.data.normalize import empty_frame, frame_from_storage
from floper.data.remote import RemoteTable
from floper.data.schemas import RecordKind

Progress = Callable[[str], None]


def page_ranges(total: int, page_size: int = PAGE_SIZE) -> list[tuple[int, int]]:
    """(offset, limit) pairs covering total rows."""
    if page_size < 1:
        raise ValueError(f"page_size must be positive (got {page_size})")
    pages = math.ceil(total / page_size)
    return [(page * page_size, page_size) for page in range(pages)]


async def read_all(
    table: RemoteTable,
    kind: RecordKind,
    page_size: int = PAGE_SIZE,
    progress: Progress | None = None,
) -> pd.DataFrame:
    """Read every record of a table into one frame with domain field names.

    Pages are requested in sequence, each ordered by creation time descending.
    The concatenation is globally newest-first only if the store paginates
    stably between calls.

    Any failure raises RemoteReadFailure; rows fetched before it are dropped.
    """
    try:
        total = await table.count()
    except StorageError as exc:
        raise RemoteReadFailure(exc.message) from exc

    if progress:
        progress(f"Total record count in {table.name}: {total:,}")
    if total == 0:
        return empty_frame(kind)

    rows: list[dict] = []
    for page, (offset, limit) in enumerate(page_ranges(total, page_size)):
        try:
            data = await table.select_range(offset, limit, order_by=ORDER_COLUMN, descending=True)
        except StorageError as exc:
            raise RemoteReadFailure(exc.message, page=page) from exc
        rows.extend(data)
        if progress:
            progress(f"Fetched {len(rows):,}/{total:,} records from {table.name}")

    return frame_from_storage(rows, kind)
