"""
Remote table store — the only I/O surface of the pipeline.

A table exposes four coroutines:

    count()                                      -> int
    insert(rows)                                 -> list[dict]  (inserted rows)
    select_range(offset, limit, order_by, desc)  -> list[dict]
    delete_all()                                 -> None

and raises ``StorageError`` on failure. ``SupabaseTable`` implements it on top
of supabase-py's async client.
"""
from __future__ import annotations

from typing import Protocol

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from floper.config import SUPABASE_URL, SUPABASE_KEY, KEY_COLUMN, ORDER_COLUMN
from floper.data.errors import StorageError
from floper.data.schemas import KINDS


class RemoteTable(Protocol):
    name: str

    async def count(self) -> int: ...

    async def insert(self, rows: list[dict]) -> list[dict]: ...

    async def select_range(
        self, offset: int, limit: int, order_by: str = ORDER_COLUMN, descending: bool = True,
    ) -> list[dict]: ...

    async def delete_all(self) -> None: ...


class Backend(Protocol):
    def table(self, name: str) -> RemoteTable: ...


def _error_message(exc: Exception) -> str:
    msg = getattr(exc, "message", None)
    return str(msg) if msg else str(exc)


class SupabaseTable:
    """One Supabase (PostgREST) table."""

    def __init__(self, client: AsyncClient, name: str) -> None:
        self.client = client
        self.name = name

    async def count(self) -> int:
        try:
            resp = await self.client.table(self.name).select("*", count="exact", head=True).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(_error_message(exc)) from exc
        return int(resp.count or 0)

    async def insert(self, rows: list[dict]) -> list[dict]:
        try:
            resp = await self.client.table(self.name).insert(rows).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(_error_message(exc)) from exc
        return list(resp.data or [])

    async def select_range(
        self, offset: int, limit: int, order_by: str = ORDER_COLUMN, descending: bool = True,
    ) -> list[dict]:
        # PostgREST ranges are inclusive on both ends
        try:
            resp = await (
                self.client.table(self.name)
                .select("*")
                .order(order_by, desc=descending)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(_error_message(exc)) from exc
        return list(resp.data or [])

    async def delete_all(self) -> None:
        # PostgREST refuses an unfiltered DELETE; every row has a positive id
        try:
            await self.client.table(self.name).delete().neq(KEY_COLUMN, 0).execute()
        except (APIError, httpx.HTTPError) as exc:
            raise StorageError(_error_message(exc)) from exc


class SupabaseBackend:
    """Hands out ``SupabaseTable`` objects sharing one async client."""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    def table(self, name: str) -> SupabaseTable:
        return SupabaseTable(self.client, name)


def storage_configured() -> bool:
    return bool(SUPABASE_URL and SUPABASE_KEY)


async def connect(url: str = SUPABASE_URL, key: str = SUPABASE_KEY) -> SupabaseBackend:
    """Create the async Supabase client. Raises StorageError if credentials are missing."""
    if not url or not key:
        raise StorageError("SUPABASE_URL and SUPABASE_KEY must be set")
    client = await acreate_client(url, key)
    return SupabaseBackend(client)


async def check_tables(backend: Backend) -> dict[str, str | None]:
    """Count-probe every kind's table. Maps kind name → None (ok) or the error message."""
    results: dict[str, str | None] = {}
    for kind in KINDS.values():
        try:
            await backend.table(kind.table).count()
            results[kind.name.value] = None
        except StorageError as exc:
            results[kind.name.value] = exc.message
    return results
