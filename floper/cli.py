#!/usr/bin/env python3
"""
Floper CLI — import spreadsheets, print summaries, export reports, run the API server.

USAGE:
  python -m floper.cli import stock stok.xlsx              # Import a spreadsheet
  python -m floper.cli summary personnel                   # KPIs + rankings
  python -m floper.cli summary stock --q acme              # Summary of a filtered view
  python -m floper.cli summary stock --field Marka --value X
  python -m floper.cli export sales --output ./out         # Excel report
  python -m floper.cli clear stock --yes                   # Delete every stock record
  python -m floper.cli check                               # Probe remote tables

  python -m floper.cli serve                               # Start API server
  python -m floper.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import asyncio
import inspect
import os
import sys
from datetime import datetime
from pathlib import Path

from floper.config import REPORTS_FOLDER
from floper.data.errors import FloperError
from floper.data.loader import parse_file
from floper.data.remote import check_tables, connect
from floper.data.schemas import KINDS, KindName
from floper.data.store import Workspace


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  FLOPER — {title}")
    print("=" * 70)


def _progress(message: str) -> None:
    print(f"  {message}")


async def _workspace() -> Workspace:
    return Workspace(await connect())


async def _loaded_view(kind: str):
    workspace = await _workspace()
    view = workspace.view(kind)
    view.df = await view.service.load(_progress)
    return view


async def cmd_import(args):
    """Import a spreadsheet file into a record kind."""
    _banner("IMPORT")
    rows = parse_file(args.file)
    print(f"  {Path(args.file).name}: {len(rows):,} rows")

    workspace = await _workspace()
    service = workspace.view(args.kind).service
    result = await service.add_rows(rows, _progress)
    print(f"\n  Imported {result.rows_inserted:,} {service.kind.label.lower()} records\n")


async def cmd_summary(args):
    """Print KPIs and rankings for a record kind."""
    from floper.reports.records_report import generate_json

    _banner(f"{KINDS[KindName(args.kind)].label.upper()} SUMMARY")
    view = await _loaded_view(args.kind)
    data = generate_json(view, args.q, args.field, args.value)
    s = data["summary"]

    print(f"\n  Records: {data['filtered_records']:,} of {data['total_records']:,}\n")
    for key, value in s["kpis"].items():
        label = key.replace("_", " ").title()
        print(f"  {label:<22}{value:>14,}" if isinstance(value, (int, float)) else f"  {label:<22}{value:>14}")

    if "performance" in s:
        print(f"\n  SALESPEOPLE ({len(s['performance'])}):\n")
        for p in s["performance"][:args.top]:
            print(f"  {p['rank']:<4}{p['name'][:30]:<32}{p['total_sales']:>14,.2f}{p['total_quantity']:>8,}{p['pct']:>7.1f}%")
        print(f"\n  TOP BRANDS:\n")
        for b in s["top_brands"]:
            print(f"  {b['rank']:<4}{b['brand'][:24]:<26}{b['quantity']:>8,}{b['revenue']:>14,.2f}  {b['top_seller']} ({b['top_seller_quantity']:,})")
    else:
        print(f"\n  TOP BRANDS:\n")
        for b in s["by_brand"][:args.top]:
            print(f"  {b['rank']:<4}{b['name'][:30]:<32}{b['value']:>12,}{b['pct']:>7.1f}%")
    print()


async def cmd_export(args):
    """Write the kind's report workbook."""
    from floper.reports.records_report import generate_excel

    _banner("EXCEL EXPORT")
    view = await _loaded_view(args.kind)
    out_dir = Path(args.output) if args.output else REPORTS_FOLDER
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    out = out_dir / f"Floper_{view.kind.label.replace(' ', '_')}_{stamp}.xlsx"
    generate_excel(view, out, args.q, args.field, args.value)
    print(f"\n  Report saved to: {out}\n")


async def cmd_clear(args):
    """Delete every record of a kind."""
    if not args.yes:
        print(f"  Refusing to delete all {args.kind} records without --yes")
        return
    workspace = await _workspace()
    await workspace.view(args.kind).service.clear()
    print(f"  All {args.kind} records deleted")


async def cmd_check(args):
    """Check that every remote table answers a count query."""
    _banner("TABLE CHECK")
    backend = await connect()
    failed = False
    for kind, error in (await check_tables(backend)).items():
        table = KINDS[KindName(kind)].table
        if error is None:
            print(f"  {table:<20}ok")
        else:
            failed = True
            print(f"  {table:<20}ERROR: {error}")
    print()
    if failed:
        sys.exit(1)


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Floper API on port {args.port}...")
    uvicorn.run("floper.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--q", default="", help="Free-text search")
    p.add_argument("--field", default="", help="Field for the single-field filter")
    p.add_argument("--value", default="", help="Substring the field must contain")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Floper — stock, sales, and personnel-sales reporting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")
    kinds = [k.value for k in KindName]

    import_parser = subparsers.add_parser("import", help="Import a spreadsheet")
    import_parser.add_argument("kind", choices=kinds)
    import_parser.add_argument("file", help=".xlsx or .csv file")
    import_parser.set_defaults(func=cmd_import)

    summary_parser = subparsers.add_parser("summary", help="Print KPIs and rankings")
    summary_parser.add_argument("kind", choices=kinds)
    summary_parser.add_argument("--top", type=int, default=10, help="Rows per ranking (default 10)")
    _add_filter_args(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    export_parser = subparsers.add_parser("export", help="Export an Excel report")
    export_parser.add_argument("kind", choices=kinds)
    export_parser.add_argument("--output", help=f"Output directory (default: {REPORTS_FOLDER})")
    _add_filter_args(export_parser)
    export_parser.set_defaults(func=cmd_export)

    clear_parser = subparsers.add_parser("clear", help="Delete all records of a kind")
    clear_parser.add_argument("kind", choices=kinds)
    clear_parser.add_argument("--yes", action="store_true", help="Confirm deletion")
    clear_parser.set_defaults(func=cmd_clear)

    check_parser = subparsers.add_parser("check", help="Check remote tables")
    check_parser.set_defaults(func=cmd_check)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return

    try:
        if inspect.iscoroutinefunction(args.func):
            asyncio.run(args.func(args))
        else:
            args.func(args)
    except FloperError as exc:
        print(f"  Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
