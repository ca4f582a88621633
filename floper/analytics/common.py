"""
Safe math helpers used across all analytics modules.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def pct_of_total(part: float, total: float) -> float:
    """Percentage of total; 0 when the total is 0."""
    return safe_divide(part, total) * 100


def numeric_column(df: pd.DataFrame, field: str) -> pd.Series:
    """A column parsed as numbers; missing, blank, or non-numeric values count as 0.

    Used for fields stored as text (stock "Envanter") as well as real numbers.
    """
    if field not in df.columns:
        return pd.Series(0.0, index=df.index)
    col = df[field]
    if not pd.api.types.is_numeric_dtype(col):
        col = col.map(lambda v: v.strip() if isinstance(v, str) else v)
    parsed = pd.to_numeric(col, errors="coerce")
    return parsed.replace([np.inf, -np.inf], np.nan).fillna(0)


def key_column(df: pd.DataFrame, field: str) -> pd.Series:
    """A categorical column as text, with absent values as ""."""
    if field not in df.columns:
        return pd.Series("", index=df.index, dtype=object)
    return df[field].map(lambda v: "" if v is None or (isinstance(v, float) and math.isnan(v)) else str(v))


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python for JSON serialization."""
    if isinstance(obj, dict):
        clean = {}
        for k, v in obj.items():
            if k is None:
                continue
            if isinstance(k, float) and (math.isnan(k) or math.isinf(k)):
                continue
            clean[str(k) if not isinstance(k, str) else k] = sanitize_for_json(v)
        return clean
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, pd.DataFrame):
        return sanitize_for_json(obj.to_dict("records"))
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        v = float(obj)
        return 0.0 if (math.isnan(v) or math.isinf(v)) else v
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if isinstance(obj, float):
        return 0.0 if (math.isnan(obj) or math.isinf(obj)) else obj
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    return obj
