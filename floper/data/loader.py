"""
Spreadsheet parsing: uploaded file bytes → loosely-typed row dicts.
"""
from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pandas as pd

from floper.data.errors import SpreadsheetError

EXCEL_SUFFIXES = {".xlsx", ".xlsm"}
CSV_SUFFIXES = {".csv"}


def _frame_to_rows(df: pd.DataFrame) -> list[dict]:
    """Drop blank rows, turn NaN into None."""
    df = df.dropna(how="all")
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict("records")


def _read_excel(content: bytes) -> pd.DataFrame:
    try:
        book = pd.ExcelFile(io.BytesIO(content), engine="openpyxl")
    except (zipfile.BadZipFile, ValueError, OSError, KeyError) as exc:
        raise SpreadsheetError(f"could not read spreadsheet: {exc}") from exc
    with book:
        if not book.sheet_names:
            raise SpreadsheetError("no sheet found")
        # Only the first sheet is imported; cells stay as objects so codes keep their text form
        return book.parse(book.sheet_names[0], dtype=object)


def _read_csv(content: bytes) -> pd.DataFrame:
    try:
        return pd.read_csv(io.BytesIO(content), dtype=object, encoding="utf-8-sig")
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise SpreadsheetError(f"could not read spreadsheet: {exc}") from exc


def parse_spreadsheet(content: bytes, filename: str) -> list[dict]:
    """Parse an uploaded .xlsx/.xlsm/.csv file into row dicts keyed by header."""
    suffix = Path(filename).suffix.lower()
    if suffix in EXCEL_SUFFIXES:
        df = _read_excel(content)
    elif suffix in CSV_SUFFIXES:
        df = _read_csv(content)
    else:
        raise SpreadsheetError(f"unsupported file type: '{filename}' (expected .xlsx or .csv)")
    return _frame_to_rows(df)


def parse_file(path: str | Path) -> list[dict]:
    """Parse a spreadsheet from disk (CLI imports)."""
    path = Path(path)
    if not path.exists():
        raise SpreadsheetError(f"file not found: {path}")
    return parse_spreadsheet(path.read_bytes(), path.name)
