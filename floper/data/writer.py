"""
Batch writer: insert records into a remote table in fixed-size chunks.
"""
from __future__ import annotations

from typing import Callable, Sequence

from floper.config import CHUNK_SIZE
from floper.data.errors import RemoteWriteFailure, StorageError
from floper.data.remote import RemoteTable

Progress = Callable[[str], None]


def chunked(rows: Sequence[dict], chunk_size: int) -> list[Sequence[dict]]:
    """Split rows into consecutive chunks of at most chunk_size, keeping order."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive (got {chunk_size})")
    return [rows[i:i + chunk_size] for i in range(0, len(rows), chunk_size)]


async def insert_in_chunks(
    table: RemoteTable,
    rows: Sequence[dict],
    chunk_size: int = CHUNK_SIZE,
    progress: Progress | None = None,
) -> list[dict]:
    """Insert rows chunk by chunk, strictly in sequence.

    Aborts on the first failing chunk with RemoteWriteFailure. Chunks already
    inserted are not rolled back. Returns the inserted rows in chunk order.
    """
    chunks = chunked(rows, chunk_size)
    inserted: list[dict] = []

    for i, chunk in enumerate(chunks):
        try:
            result = await table.insert(list(chunk))
        except StorageError as exc:
            raise RemoteWriteFailure(exc.message, chunk_index=i) from exc
        inserted.extend(result)
        if progress:
            progress(f"Inserted chunk {i + 1}/{len(chunks)} into {table.name} ({len(inserted):,}/{len(rows):,} records)")

    return inserted
