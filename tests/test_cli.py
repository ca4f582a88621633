import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

from floper import cli

from tests.fakes import FakeBackend


class ParserTests(unittest.TestCase):
    def test_import_arguments(self) -> None:
        args = cli.build_parser().parse_args(["import", "sales", "satis.xlsx"])
        self.assertEqual((args.kind, args.file), ("sales", "satis.xlsx"))
        self.assertIs(args.func, cli.cmd_import)

    def test_summary_filters(self) -> None:
        args = cli.build_parser().parse_args(["summary", "stock", "--field", "Marka", "--value", "x", "--top", "3"])
        self.assertEqual((args.field, args.value, args.top, args.q), ("Marka", "x", 3, ""))

    def test_unknown_kind_is_rejected(self) -> None:
        with self.assertRaises(SystemExit), redirect_stdout(io.StringIO()), mock.patch("sys.stderr", io.StringIO()):
            cli.build_parser().parse_args(["summary", "inventory"])


class CommandTests(unittest.TestCase):
    def test_pipeline_error_exits_with_status_one(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
            cli.main(["import", "stock", "/nonexistent/stok.xlsx"])
        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("Error: file not found", out.getvalue())

    def test_clear_requires_confirmation(self) -> None:
        backend = FakeBackend()
        out = io.StringIO()
        with mock.patch("floper.cli.connect", mock.AsyncMock(return_value=backend)), redirect_stdout(out):
            cli.main(["clear", "stock"])
        self.assertIn("without --yes", out.getvalue())
        self.assertEqual(backend.tables, {})

    def test_clear_with_confirmation(self) -> None:
        backend = FakeBackend()
        with mock.patch("floper.cli.connect", mock.AsyncMock(return_value=backend)), redirect_stdout(io.StringIO()):
            cli.main(["clear", "personnel", "--yes"])
        self.assertEqual(backend.table("personnel_data").delete_calls, 1)

    def test_check_reports_failing_table(self) -> None:
        backend = FakeBackend()
        backend.table("sales_items").fail_count = True
        out = io.StringIO()
        with mock.patch("floper.cli.connect", mock.AsyncMock(return_value=backend)), \
                redirect_stdout(out), self.assertRaises(SystemExit):
            cli.main(["check"])
        self.assertIn("ERROR: count refused", out.getvalue())

    def test_summary_prints_rankings(self) -> None:
        backend = FakeBackend()
        table = backend.table("stock_items")
        table.rows = [
            {"id": 1, "created_at": 1, "marka": "X", "envanter": "10"},
            {"id": 2, "created_at": 2, "marka": "Y", "envanter": "5"},
        ]
        out = io.StringIO()
        with mock.patch("floper.cli.connect", mock.AsyncMock(return_value=backend)), redirect_stdout(out):
            cli.main(["summary", "stock"])
        self.assertIn("TOP BRANDS", out.getvalue())
        self.assertIn("Records: 2 of 2", out.getvalue())


if __name__ == "__main__":
    unittest.main()
