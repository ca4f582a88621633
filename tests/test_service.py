import io
import unittest

from openpyxl import Workbook

from floper.analytics.aggregate import group_sum, total_sum
from floper.data.errors import (
    EmptyInputError, RemoteDeleteFailure, RemoteReadFailure, RemoteWriteFailure, SpreadsheetError,
)
from floper.data.schemas import KindName, STOCK
from floper.data.service import RecordService
from floper.data.store import BusyError, Workspace

from tests.fakes import FakeBackend


STOCK_ROWS = [
    {"Marka": "X", "Envanter": "10"},
    {"Marka": "Y", "Envanter": "5"},
    {"Marka": "X", "Envanter": "3"},
]


def _xlsx(rows: list[list]) -> bytes:
    wb = Workbook()
    for row in rows:
        wb.active.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


class RecordServiceTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.backend = FakeBackend()
        self.service = RecordService(self.backend, STOCK)
        self.table = self.backend.table("stock_items")

    async def test_import_then_load(self) -> None:
        result = await self.service.add_rows(STOCK_ROWS)
        self.assertEqual((result.rows_parsed, result.rows_inserted), (3, 3))
        self.assertEqual(len(self.table.insert_calls), 1)
        self.assertEqual(len(self.table.insert_calls[0]), 3)
        self.assertEqual(self.table.insert_calls[0][0]["marka"], "X")

        df = await self.service.load()
        self.assertEqual(len(self.table.range_calls), 1)
        self.assertEqual(len(df), 3)
        self.assertEqual(total_sum(df, "Envanter"), 18)
        groups = group_sum(df, "Marka", "Envanter").set_index("Marka")["Envanter"]
        self.assertEqual(groups["X"], 13)
        self.assertEqual(groups["Y"], 5)

    async def test_large_import_and_partial_failure(self) -> None:
        service = RecordService(self.backend, STOCK, chunk_size=500)
        self.table.fail_insert_on = 1
        rows = [{"Marka": f"B{i}", "Envanter": "1"} for i in range(1201)]

        with self.assertRaises(RemoteWriteFailure) as ctx:
            await service.add_rows(rows)

        self.assertEqual(ctx.exception.chunk_index, 1)
        self.assertEqual(len(self.table.rows), 500)

    async def test_empty_input_writes_nothing(self) -> None:
        with self.assertRaises(EmptyInputError):
            await self.service.add_rows([])
        self.assertEqual(self.table.insert_calls, [])

    async def test_import_file(self) -> None:
        content = _xlsx([["Marka", "Envanter"], ["X", 10], ["Y", 5]])
        messages: list[str] = []
        result = await self.service.import_file(content, "stok.xlsx", messages.append)
        self.assertEqual(result.rows_inserted, 2)
        self.assertEqual(self.table.rows[0]["envanter"], "10")
        self.assertIn("stok.xlsx", messages[0])

    async def test_unreadable_file_writes_nothing(self) -> None:
        with self.assertRaises(SpreadsheetError):
            await self.service.import_file(b"junk", "stok.pdf")
        self.assertEqual(self.table.insert_calls, [])

    async def test_clear(self) -> None:
        await self.service.add_rows(STOCK_ROWS)
        await self.service.clear()
        self.assertEqual(self.table.rows, [])
        # an already empty table clears without error
        await self.service.clear()
        self.assertEqual(self.table.delete_calls, 2)

    async def test_clear_failure(self) -> None:
        self.table.fail_delete = True
        with self.assertRaises(RemoteDeleteFailure) as ctx:
            await self.service.clear()
        self.assertEqual(str(ctx.exception), "error while deleting data: permission denied")


class RecordViewTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.backend = FakeBackend()
        self.workspace = Workspace(self.backend)
        self.view = self.workspace.view("stock")

    async def test_import_reloads_collection(self) -> None:
        self.assertFalse(self.view.is_loaded)
        await self.view.import_rows(STOCK_ROWS)
        self.assertTrue(self.view.is_loaded)
        self.assertEqual(self.view.row_count(), 3)
        self.assertFalse(self.view.busy)
        self.assertTrue(self.view.last_message)

    async def test_filtered_view(self) -> None:
        await self.view.import_rows(STOCK_ROWS)
        self.assertEqual(len(self.view.filtered(field="Marka", value="x")), 2)
        self.assertEqual(len(self.view.filtered()), 3)
        self.assertEqual(self.view.row_count(), 3)

    async def test_busy_view_rejects_second_operation(self) -> None:
        self.view.busy = True
        with self.assertRaises(BusyError):
            await self.view.load()
        self.assertEqual(self.backend.table("stock_items").count_calls, 0)

    async def test_failed_load_keeps_previous_collection(self) -> None:
        await self.view.import_rows(STOCK_ROWS)
        self.backend.table("stock_items").fail_count = True
        with self.assertRaises(RemoteReadFailure):
            await self.view.load()
        self.assertEqual(self.view.row_count(), 3)
        self.assertFalse(self.view.busy)

    async def test_clear_empties_collection(self) -> None:
        await self.view.import_rows(STOCK_ROWS)
        await self.view.clear()
        self.assertEqual(self.view.row_count(), 0)
        self.assertEqual(self.backend.table("stock_items").rows, [])

    async def test_views_are_independent(self) -> None:
        await self.view.import_rows(STOCK_ROWS)
        self.assertEqual(self.workspace.counts(), {"stock": 3, "sales": 0, "personnel": 0})
        self.assertIs(self.workspace.view(KindName.STOCK), self.view)

    def test_unknown_kind(self) -> None:
        with self.assertRaises(ValueError):
            self.workspace.view("inventory")


if __name__ == "__main__":
    unittest.main()
