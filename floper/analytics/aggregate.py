"""
Aggregations over an in-memory record frame: totals, group sums, and rankings.

Every function is pure: same frame in, same result out. Group order is
encounter order and rankings use a stable sort, so ties keep encounter order.
"""
from __future__ import annotations

import pandas as pd

from floper.analytics.common import key_column, numeric_column, pct_of_total, safe_divide


def total_sum(df: pd.DataFrame, field: str) -> float:
    """Sum of a numeric field over all records."""
    return float(numeric_column(df, field).sum())


def total_count(df: pd.DataFrame, field: str) -> int:
    """Quantity-style sum of a field, as an integer."""
    return int(round(numeric_column(df, field).sum()))


def group_sum(df: pd.DataFrame, key: str, value: str) -> pd.DataFrame:
    """Sum `value` per distinct `key`, groups in encounter order.

    The "" key (absent category) is kept, so the groups add up to total_sum.
    """
    frame = pd.DataFrame({key: key_column(df, key), value: numeric_column(df, value)})
    if frame.empty:
        return pd.DataFrame({key: pd.Series(dtype=object), value: pd.Series(dtype="float64")})
    return frame.groupby(key, sort=False, dropna=False)[value].sum().reset_index()


def group_totals(df: pd.DataFrame, key: str, value: str, quantity: str) -> pd.DataFrame:
    """Per-group value and quantity sums, groups in encounter order."""
    frame = pd.DataFrame({
        key: key_column(df, key),
        value: numeric_column(df, value),
        quantity: numeric_column(df, quantity),
    })
    if frame.empty:
        return pd.DataFrame({
            key: pd.Series(dtype=object),
            value: pd.Series(dtype="float64"),
            quantity: pd.Series(dtype="float64"),
        })
    return frame.groupby(key, sort=False, dropna=False)[[value, quantity]].sum().reset_index()


def rank_groups(groups: pd.DataFrame, key: str, value: str) -> pd.DataFrame:
    """Non-empty groups sorted by value descending; ties keep their order."""
    ranked = groups[groups[key] != ""]
    return ranked.sort_values(value, ascending=False, kind="stable").reset_index(drop=True)


def top_n(groups: pd.DataFrame, key: str, value: str, n: int) -> pd.DataFrame:
    """The first n groups of rank_groups (fewer if there are fewer groups)."""
    return rank_groups(groups, key, value).head(max(n, 0))


def top_group(df: pd.DataFrame, key: str, value: str, default: str = "-") -> str:
    """Key of the highest-ranked non-empty group, or default when there is none."""
    best = top_n(group_sum(df, key, value), key, value, 1)
    return str(best[key].iloc[0]) if len(best) else default


def percentage_share(value: float, total: float) -> float:
    """value / total * 100 to one decimal place; 0.0 when total is 0."""
    return round(pct_of_total(value, total), 1)


def format_percentage(value: float, total: float) -> str:
    return f"{percentage_share(value, total):.1f}%"


def average_per_unit(value: float, quantity: float) -> float:
    """Value per unit sold; 0.0 when no units were sold."""
    return float(safe_divide(value, quantity))
