import tempfile
import unittest
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from openpyxl import load_workbook

from floper.data.schemas import PERSONNEL
from floper.data.store import Workspace
from floper.reports.records_report import generate_excel, generate_json, record_columns

from tests.fakes import FakeBackend


PERSONNEL_ROWS = [
    {"personelAdi": "Ayşe", "marka": "X", "satisAdeti": 2, "satisFiyati": 100},
    {"personelAdi": "Can", "marka": "Y", "satisAdeti": 1, "satisFiyati": 300},
]


class RecordsReportTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.view = Workspace(FakeBackend()).view("personnel")
        await self.view.import_rows(PERSONNEL_ROWS)

    def test_json_reflects_filter(self) -> None:
        data = generate_json(self.view, query="ayşe")
        self.assertEqual(data["total_records"], 2)
        self.assertEqual(data["filtered_records"], 1)
        self.assertEqual(data["filter"], {"q": "ayşe", "field": "", "value": ""})
        self.assertEqual([p["name"] for p in data["summary"]["performance"]], ["Ayşe"])

    def test_json_without_filter_covers_everything(self) -> None:
        generate_json(self.view, query="ayşe")
        data = generate_json(self.view)
        self.assertEqual(data["filtered_records"], 2)

    def test_concurrent_filters_do_not_leak(self) -> None:
        queries = ["ayşe", "can", ""] * 20
        expected = {"ayşe": ["Ayşe"], "can": ["Can"], "": ["Can", "Ayşe"]}

        def names(query: str) -> tuple[str, list[str]]:
            data = generate_json(self.view, query=query)
            return query, [p["name"] for p in data["summary"]["performance"]]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(names, queries))

        for query, got in results:
            self.assertEqual(got, expected[query], query)

    def test_excel_workbook(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = generate_excel(self.view, Path(tmp) / "out" / "report.xlsx")
            wb = load_workbook(path)
            self.assertEqual(wb.sheetnames, [
                "Summary", "Performance", "Top Brands", "Brand Distribution", "Salesperson Brands", "Records",
            ])
            perf = wb["Performance"]
            self.assertEqual(perf.cell(row=1, column=2).value, "Salesperson")
            self.assertEqual(perf.cell(row=2, column=2).value, "Can")
            self.assertEqual(perf.cell(row=4, column=1).value, "TOTAL")
            brands = wb["Top Brands"]
            self.assertEqual(brands.cell(row=2, column=2).value, "X")
            self.assertEqual(brands.cell(row=2, column=6).value, "Ayşe")
            records = wb["Records"]
            self.assertEqual(records.cell(row=1, column=1).value, "personelAdi")
            self.assertEqual(records.max_row, 3)

    def test_excel_records_follow_filter(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = generate_excel(self.view, Path(tmp) / "report.xlsx", field="marka", value="y")
            records = load_workbook(path)["Records"]
            self.assertEqual(records.max_row, 2)
            self.assertEqual(records.cell(row=2, column=1).value, "Can")

    def test_record_columns(self) -> None:
        cols = dict((key, col_type) for key, col_type, _ in record_columns(PERSONNEL))
        self.assertEqual(cols["satisAdeti"], "number")
        self.assertEqual(cols["satisFiyati"], "currency")
        self.assertEqual(cols["marka"], "text")


class PerformanceTotalTests(unittest.IsolatedAsyncioTestCase):
    async def test_average_column_is_not_summed(self) -> None:
        view = Workspace(FakeBackend()).view("personnel")
        await view.import_rows([
            {"personelAdi": "Ayşe", "marka": "X", "satisAdeti": 1, "satisFiyati": 100},
            {"personelAdi": "Can", "marka": "X", "satisAdeti": 2, "satisFiyati": 100},
        ])
        with tempfile.TemporaryDirectory() as tmp:
            perf = load_workbook(generate_excel(view, Path(tmp) / "r.xlsx"))["Performance"]
            total = [perf.cell(row=4, column=c).value for c in range(1, 7)]
        self.assertEqual(total[0], "TOTAL")
        self.assertEqual(total[2], 200)
        self.assertEqual(total[3], 3)
        self.assertIn(total[4], (None, ""))
        self.assertIn(total[5], (None, ""))


if __name__ == "__main__":
    unittest.main()
