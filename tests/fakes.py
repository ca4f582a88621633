"""In-memory stand-ins for the remote table store."""
from __future__ import annotations

from floper.data.errors import StorageError


class FakeTable:
    """Records every call; set the fail_* attributes to make a call raise."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.rows: list[dict] = []
        self._next_id = 1
        self.insert_calls: list[list[dict]] = []
        self.range_calls: list[tuple[int, int]] = []
        self.count_calls = 0
        self.delete_calls = 0
        self.fail_insert_on: int | None = None    # insert call index
        self.fail_select_on: int | None = None    # range call index
        self.fail_count = False
        self.fail_delete = False

    async def count(self) -> int:
        self.count_calls += 1
        if self.fail_count:
            raise StorageError("count refused")
        return len(self.rows)

    async def insert(self, rows: list[dict]) -> list[dict]:
        call = len(self.insert_calls)
        self.insert_calls.append([dict(r) for r in rows])
        if self.fail_insert_on == call:
            raise StorageError("boom")
        inserted = []
        for r in rows:
            stored = dict(r, id=self._next_id, created_at=self._next_id)
            self._next_id += 1
            self.rows.append(stored)
            inserted.append(dict(stored))
        return inserted

    async def select_range(self, offset: int, limit: int, order_by: str = "created_at", descending: bool = True) -> list[dict]:
        call = len(self.range_calls)
        self.range_calls.append((offset, limit))
        if self.fail_select_on == call:
            raise StorageError("timeout")
        ordered = sorted(self.rows, key=lambda r: r[order_by], reverse=descending)
        return [dict(r) for r in ordered[offset:offset + limit]]

    async def delete_all(self) -> None:
        self.delete_calls += 1
        if self.fail_delete:
            raise StorageError("permission denied")
        self.rows.clear()


class FakeBackend:
    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name)
        return self.tables[name]


def stock_storage_row(marka: str, envanter: str, **extra) -> dict:
    row = {
        "marka": marka, "urun_grubu": "", "urun_kodu": "", "renk_kodu": "",
        "beden": "", "envanter": envanter, "barkod": "", "sezon": "",
    }
    row.update(extra)
    return row
