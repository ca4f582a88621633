"""
Free-text search and single-field filtering over a record frame.
"""
from __future__ import annotations

import pandas as pd

from floper.data.normalize import as_text
from floper.data.schemas import RecordKind


def _lower_text(col: pd.Series) -> pd.Series:
    """Lower-cased cell text; absent values stay NaN so they never match."""
    return col.map(as_text).astype(object).str.lower()


def _contains(col: pd.Series, needle: str) -> pd.Series:
    return _lower_text(col).str.contains(needle.lower(), regex=False, na=False).astype(bool)


def filter_records(
    df: pd.DataFrame,
    query: str = "",
    field: str = "",
    value: str = "",
) -> pd.DataFrame:
    """Rows matching a search query and an optional field filter.

    query: kept if any field's text contains it (case-insensitive).
    field/value: kept if that field's text contains value; applied only when
    both are non-empty. A field the frame does not have matches nothing.

    Always returns a new frame; the input is not modified.
    """
    mask = pd.Series(True, index=df.index)

    if query:
        hit = pd.Series(False, index=df.index)
        for col in df.columns:
            hit |= _contains(df[col], query)
        mask &= hit

    if field and value:
        if field not in df.columns:
            mask &= False
        else:
            mask &= _contains(df[field], value)

    return df[mask].copy()


def filter_fields(kind: RecordKind) -> list[str]:
    """Fields offered as single-field filters."""
    return kind.text_fields
