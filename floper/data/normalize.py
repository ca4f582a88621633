"""
Row normalisation: loosely-typed spreadsheet rows → typed record frames.
"""
from __future__ import annotations

import math
from typing import Any, Iterable

import numpy as np
import pandas as pd

from floper.data.errors import EmptyInputError
from floper.data.schemas import RecordKind


# ---------------------------------------------------------------------------
# Cell coercion
# ---------------------------------------------------------------------------

def as_text(value: Any) -> str | None:
    """Render a cell as text; None for absent values.

    Integral floats lose their ".0" so an Excel number cell 10.0 reads "10".
    """
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
        return str(value)
    if not isinstance(value, str) and pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    return str(value)


def _text_series(s: pd.Series) -> pd.Series:
    return s.map(lambda v: as_text(v) or "").astype(object)


def _numeric_series(s: pd.Series) -> pd.Series:
    stripped = s.map(lambda v: v.strip() if isinstance(v, str) else v)
    parsed = pd.to_numeric(stripped, errors="coerce")
    return parsed.replace([np.inf, -np.inf], np.nan).fillna(0)


# ---------------------------------------------------------------------------
# Rows → frame
# ---------------------------------------------------------------------------

def _typed_frame(raw: pd.DataFrame, kind: RecordKind, n: int) -> pd.DataFrame:
    """Coerce each of the kind's fields in raw; absent columns get the field default."""
    out = pd.DataFrame(index=range(n))

    for col in kind.fields:
        src = raw[col] if col in raw.columns else pd.Series([None] * n, dtype=object)
        src = src.reset_index(drop=True)
        if col in kind.int_fields:
            out[col] = _numeric_series(src).astype("int64")
        elif col in kind.float_fields:
            out[col] = _numeric_series(src).astype("float64")
        else:
            out[col] = _text_series(src)

    return out


def normalize_rows(rows: Iterable[dict], kind: RecordKind) -> pd.DataFrame:
    """Coerce every row to the kind's field types.

    Text fields default to "", numeric fields to 0. Malformed values degrade
    to those defaults; only an empty input is rejected.
    """
    rows = list(rows)
    if not rows:
        raise EmptyInputError()
    return _typed_frame(pd.DataFrame.from_records(rows), kind, len(rows))


def to_storage_rows(df: pd.DataFrame, kind: RecordKind) -> list[dict]:
    """Rename domain fields to storage columns, one dict per record."""
    return df[kind.fields].rename(columns=kind.column_map).to_dict("records")


def empty_frame(kind: RecordKind) -> pd.DataFrame:
    """A zero-row frame with the kind's columns."""
    return pd.DataFrame({col: pd.Series(dtype=_dtype_for(kind, col)) for col in kind.fields})


def frame_from_storage(rows: list[dict], kind: RecordKind) -> pd.DataFrame:
    """Map storage rows back to domain fields, typed like freshly imported rows.

    Null cells become "" or 0; storage-only columns (id, created_at) are dropped.
    """
    if not rows:
        return empty_frame(kind)
    raw = pd.DataFrame.from_records(rows).rename(columns=kind.storage_to_domain)
    return _typed_frame(raw, kind, len(rows))


def _dtype_for(kind: RecordKind, col: str) -> str:
    if col in kind.int_fields:
        return "int64"
    if col in kind.float_fields:
        return "float64"
    return "object"
