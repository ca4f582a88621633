"""
Per-kind dashboard summaries — KPIs, distributions, and rankings.
"""
from __future__ import annotations

import pandas as pd

from floper.config import TOP_N_DEFAULT
from floper.analytics.common import key_column, numeric_column
from floper.analytics.aggregate import (
    average_per_unit,
    group_sum,
    group_totals,
    percentage_share,
    rank_groups,
    top_group,
    top_n,
    total_count,
    total_sum,
)
from floper.data.schemas import KindName, RecordKind, STOCK, SALES, PERSONNEL


def _ranking(df: pd.DataFrame, key: str, value: str, n: int, as_int: bool = True) -> list[dict]:
    """Top-n groups with their share of the grand total."""
    groups = group_sum(df, key, value)
    grand = float(groups[value].sum()) if len(groups) else 0.0
    rows = []
    for rank, (name, amount) in enumerate(top_n(groups, key, value, n)[[key, value]].itertuples(index=False), 1):
        rows.append({
            "rank": rank,
            "name": name,
            "value": int(round(amount)) if as_int else round(float(amount), 2),
            "pct": percentage_share(amount, grand),
        })
    return rows


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------

def stock_summary(df: pd.DataFrame, top: int = TOP_N_DEFAULT) -> dict:
    qty = STOCK.quantity_field
    brands = group_sum(df, "Marka", qty)
    return {
        "kpis": {
            "record_count": int(len(df)),
            "total_inventory": total_count(df, qty),
            "brand_count": int((brands["Marka"] != "").sum()),
            "top_brand": top_group(df, "Marka", qty),
        },
        "by_brand": _ranking(df, "Marka", qty, top),
        "by_product_group": _ranking(df, "Ürün Grubu", qty, top),
        "by_season": _ranking(df, "Sezon", qty, top),
    }


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------

def sales_summary(df: pd.DataFrame, top: int = TOP_N_DEFAULT) -> dict:
    qty = SALES.quantity_field
    return {
        "kpis": {
            "record_count": int(len(df)),
            "total_quantity": total_count(df, qty),
            "top_brand": top_group(df, "Marka", qty),
        },
        "by_brand": _ranking(df, "Marka", qty, top),
        "by_product_group": _ranking(df, "Ürün Grubu", qty, top),
    }


# ---------------------------------------------------------------------------
# Personnel
# ---------------------------------------------------------------------------

def brand_distribution(df: pd.DataFrame) -> list[dict]:
    """Quantity per brand (non-empty, > 0), with share of the total quantity."""
    qty = PERSONNEL.quantity_field
    total_qty = total_count(df, qty)
    groups = group_sum(df, "marka", qty)
    groups = groups[(groups["marka"] != "") & (groups[qty] > 0)]
    return [
        {
            "id": name,
            "label": name,
            "value": int(round(count)),
            "pct": percentage_share(count, total_qty),
        }
        for name, count in groups[["marka", qty]].itertuples(index=False)
    ]


def brand_details(df: pd.DataFrame, top: int = 5) -> list[dict]:
    """Best-selling brands by quantity, with revenue and each brand's top salesperson."""
    amount, qty = PERSONNEL.amount_field, PERSONNEL.quantity_field
    total_qty = total_count(df, qty)
    totals = group_totals(df, "marka", amount, qty)
    totals = totals[totals[qty] > 0]
    ranked = top_n(totals, "marka", qty, top)

    sellers = pd.DataFrame({
        "marka": key_column(df, "marka"),
        "personelAdi": key_column(df, "personelAdi"),
        qty: numeric_column(df, qty),
    })
    rows = []
    for rank, (brand, revenue, count) in enumerate(ranked[["marka", amount, qty]].itertuples(index=False), 1):
        best = top_n(group_sum(sellers[sellers["marka"] == brand], "personelAdi", qty), "personelAdi", qty, 1)
        rows.append({
            "rank": rank,
            "brand": brand,
            "quantity": int(round(count)),
            "pct": percentage_share(count, total_qty),
            "revenue": round(float(revenue), 2),
            "top_seller": str(best["personelAdi"].iloc[0]) if len(best) else "-",
            "top_seller_quantity": int(round(best[qty].iloc[0])) if len(best) else 0,
        })
    return rows


def personnel_performance(df: pd.DataFrame) -> list[dict]:
    """Salespeople ranked by sales amount, with quantity, share, and average price per unit."""
    amount, qty = PERSONNEL.amount_field, PERSONNEL.quantity_field
    totals = group_totals(df, "personelAdi", amount, qty)
    totals = totals[(totals[amount] > 0) | (totals[qty] > 0)]
    totals = totals.assign(**{amount: totals[amount].round(2)})
    ranked = rank_groups(totals, "personelAdi", amount)
    grand = float(ranked[amount].sum())

    rows = []
    for rank, (name, sales, count) in enumerate(ranked[["personelAdi", amount, qty]].itertuples(index=False), 1):
        rows.append({
            "rank": rank,
            "name": name,
            "total_sales": float(sales),
            "total_quantity": int(round(count)),
            "pct": percentage_share(sales, grand),
            "avg_per_unit": round(average_per_unit(sales, count), 2),
        })
    return rows


def salesperson_brands(df: pd.DataFrame, performance: list[dict] | None = None) -> list[dict]:
    """Units each ranked salesperson sold per brand.

    Salespeople follow the performance ranking; brands keep encounter order.
    """
    qty = PERSONNEL.quantity_field
    if performance is None:
        performance = personnel_performance(df)
    order = {p["name"]: p["rank"] for p in performance}

    frame = pd.DataFrame({
        "personelAdi": key_column(df, "personelAdi"),
        "marka": key_column(df, "marka"),
        qty: numeric_column(df, qty),
    })
    frame = frame[frame["personelAdi"].isin(list(order)) & (frame["marka"] != "")]
    if frame.empty:
        return []
    groups = frame.groupby(["personelAdi", "marka"], sort=False)[qty].sum().reset_index()
    groups = groups.assign(rank=groups["personelAdi"].map(order))
    groups = groups.sort_values("rank", kind="stable")
    return [
        {"rank": int(rank), "name": name, "brand": brand, "quantity": int(round(count))}
        for name, brand, count, rank in groups[["personelAdi", "marka", qty, "rank"]].itertuples(index=False)
    ]


def personnel_summary(df: pd.DataFrame) -> dict:
    amount, qty = PERSONNEL.amount_field, PERSONNEL.quantity_field
    performance = personnel_performance(df)
    return {
        "kpis": {
            "record_count": int(len(df)),
            "total_sales": round(total_sum(df, amount), 2),
            "total_quantity": total_count(df, qty),
            "top_brand": top_group(df, "marka", qty),
        },
        "brand_distribution": brand_distribution(df),
        "top_brands": brand_details(df),
        "performance": performance,
        "salesperson_brands": salesperson_brands(df, performance),
    }


def summarize(df: pd.DataFrame, kind: RecordKind) -> dict:
    """Dispatch to the kind's summary."""
    if kind.name == KindName.STOCK:
        return stock_summary(df)
    if kind.name == KindName.SALES:
        return sales_summary(df)
    return personnel_summary(df)
