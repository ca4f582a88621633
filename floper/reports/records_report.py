"""
Record report — summary KPIs, rankings, and the filtered record table, as JSON or Excel.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path

from floper.analytics.summaries import summarize
from floper.data.schemas import KindName, RecordKind
from floper.data.store import RecordView
from floper.excel.writer import ColSpec, ExcelWriter


RANKING_COLS = [
    ("rank", "number", "#"),
    ("name", "text", "Name"),
    ("value", "number", "Quantity"),
    ("pct", "percent", "Share %"),
]

PERFORMANCE_COLS = [
    ("rank", "number", "#"),
    ("name", "text", "Salesperson"),
    ("total_sales", "currency", "Sales Amount"),
    ("total_quantity", "number", "Units Sold"),
    ("pct", "percent", "Share %"),
    ("avg_per_unit", "currency", "Avg / Unit"),
]

DISTRIBUTION_COLS = [
    ("label", "text", "Brand"),
    ("value", "number", "Units Sold"),
    ("pct", "percent", "Share %"),
]

TOP_BRAND_COLS = [
    ("rank", "number", "#"),
    ("brand", "text", "Brand"),
    ("quantity", "number", "Units Sold"),
    ("pct", "percent", "Share %"),
    ("revenue", "currency", "Revenue"),
    ("top_seller", "text", "Top Seller"),
    ("top_seller_quantity", "number", "Top Seller Units"),
]

SALESPERSON_BRAND_COLS = [
    ("rank", "number", "#"),
    ("name", "text", "Salesperson"),
    ("brand", "text", "Brand"),
    ("quantity", "number", "Units Sold"),
]

KPI_FORMATS = {
    "total_sales": "currency",
    "top_brand": "text",
}


def record_columns(kind: RecordKind) -> list[ColSpec]:
    cols: list[ColSpec] = []
    for field in kind.fields:
        if field in kind.int_fields:
            cols.append((field, "number", field))
        elif field in kind.float_fields:
            cols.append((field, "currency", field))
        else:
            cols.append((field, "text", field))
    return cols


def _report(view: RecordView, query: str, field: str, value: str):
    df = view.filtered(query, field, value)
    data = {
        "kind": view.kind.name.value,
        "total_records": view.row_count(),
        "filtered_records": int(len(df)),
        "filter": {"q": query, "field": field, "value": value},
        "summary": summarize(df, view.kind),
    }
    return df, data


def generate_json(view: RecordView, query: str = "", field: str = "", value: str = "") -> dict:
    """Summary of the view's records matching the given search and field filter."""
    return _report(view, query, field, value)[1]


def generate_excel(
    view: RecordView,
    output_path: str | Path,
    query: str = "",
    field: str = "",
    value: str = "",
) -> Path:
    kind = view.kind
    df, data = _report(view, query, field, value)
    s = data["summary"]

    ew = ExcelWriter()

    # Summary
    ws = ew.add_sheet("Summary")
    subtitle = f"{kind.label} Report  |  {data['filtered_records']:,} of {data['total_records']:,} records  |  {datetime.now():%Y-%m-%d %H:%M}"
    ew.write_title(ws, "FLOPER", subtitle)

    row = ew.write_section(ws, 4, "OVERVIEW")
    kpis = [
        (kpi, key.replace("_", " ").upper(), KPI_FORMATS.get(key, "number"))
        for key, kpi in s["kpis"].items()
    ]
    row = ew.write_kpi_row(ws, row, kpis)

    # Rankings
    if kind.name == KindName.PERSONNEL:
        ws2 = ew.add_sheet("Performance")
        ew.write_table(ws2, 1, PERFORMANCE_COLS, s["performance"], show_total=True,
                       total_keys={"total_sales", "total_quantity"},
                       highlight_fn=lambda i, r: "gold" if i < 3 else None)
        ws3 = ew.add_sheet("Top Brands")
        ew.write_table(ws3, 1, TOP_BRAND_COLS, s["top_brands"],
                       highlight_fn=lambda i, r: "gold" if i == 0 else None)
        ws4 = ew.add_sheet("Brand Distribution")
        ew.write_table(ws4, 1, DISTRIBUTION_COLS, s["brand_distribution"], show_total=True,
                       total_keys={"value"})
        ws5 = ew.add_sheet("Salesperson Brands")
        ew.write_table(ws5, 1, SALESPERSON_BRAND_COLS, s["salesperson_brands"])
    else:
        for key, title in (("by_brand", "By Brand"), ("by_product_group", "By Product Group"), ("by_season", "By Season")):
            if key not in s:
                continue
            ws_r = ew.add_sheet(title)
            ew.write_table(ws_r, 1, RANKING_COLS, s[key],
                           highlight_fn=lambda i, r: "gold" if i == 0 else None)

    # Records
    ws_rec = ew.add_sheet("Records")
    ew.write_table(ws_rec, 1, record_columns(kind), df)

    return ew.save(output_path)
