import unittest

from floper.data.errors import RemoteWriteFailure
from floper.data.writer import chunked, insert_in_chunks

from tests.fakes import FakeTable


def _rows(n: int) -> list[dict]:
    return [{"marka": f"B{i}"} for i in range(n)]


class ChunkedTests(unittest.TestCase):
    def test_sizes_and_order(self) -> None:
        chunks = chunked(_rows(1201), 500)
        self.assertEqual([len(c) for c in chunks], [500, 500, 201])
        self.assertEqual(chunks[1][0]["marka"], "B500")

    def test_exact_multiple(self) -> None:
        self.assertEqual([len(c) for c in chunked(_rows(1000), 500)], [500, 500])

    def test_empty(self) -> None:
        self.assertEqual(chunked([], 500), [])

    def test_non_positive_chunk_size(self) -> None:
        with self.assertRaises(ValueError):
            chunked(_rows(3), 0)

    def test_chunk_count_matches_ceiling(self) -> None:
        for total, expected in ((1201, 3), (500, 1), (501, 2), (0, 0)):
            self.assertEqual(len(chunked(_rows(total), 500)), expected)


class InsertInChunksTests(unittest.IsolatedAsyncioTestCase):
    async def test_one_call_per_chunk_in_order(self) -> None:
        table = FakeTable("stock_items")
        inserted = await insert_in_chunks(table, _rows(1201), 500)

        self.assertEqual([len(c) for c in table.insert_calls], [500, 500, 201])
        self.assertEqual(len(inserted), 1201)
        self.assertEqual([r["marka"] for r in table.rows], [f"B{i}" for i in range(1201)])

    async def test_small_batch_is_a_single_call(self) -> None:
        table = FakeTable("stock_items")
        await insert_in_chunks(table, _rows(3), 500)
        self.assertEqual(len(table.insert_calls), 1)

    async def test_failure_stops_and_keeps_earlier_chunks(self) -> None:
        table = FakeTable("stock_items")
        table.fail_insert_on = 1

        with self.assertRaises(RemoteWriteFailure) as ctx:
            await insert_in_chunks(table, _rows(1201), 500)

        self.assertEqual(ctx.exception.chunk_index, 1)
        self.assertIn("boom", str(ctx.exception))
        self.assertTrue(str(ctx.exception).startswith("error while inserting data"))
        # third chunk never attempted
        self.assertEqual(len(table.insert_calls), 2)
        self.assertEqual(len(table.rows), 500)

    async def test_progress_reports_each_chunk(self) -> None:
        table = FakeTable("sales_items")
        messages: list[str] = []
        await insert_in_chunks(table, _rows(7), 3, messages.append)
        self.assertEqual(len(messages), 3)
        self.assertIn("3/3", messages[-1])
        self.assertIn("7/7", messages[-1])


if __name__ == "__main__":
    unittest.main()
