#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Parking fee calculator – CLI

Flow:
- Loads the price tables (YAML/JSON) from --tables-dir.
- --list prints the loaded tables.
- Otherwise picks --table, computes the fee for --entry/--exit and prints
  the breakdown (rich table, or JSON with --json).
- --trace appends the breakdown to a JSONL trace file.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from .config import DEFAULT_LOG_LEVEL, TABLES_DIR, TRACE_FILE
from .errors import ParkingFeeError
from .pricing.calculator import FeeBreakdown, FeeCalculator
from .pricing.timestr import format_minutes, parse_time_to_minutes, parse_time_to_minutes_strict
from .schedule.registry import PriceTableRegistry, build_default_registry
from .utils.trace import build_trace_logger

console = Console()


# --------------------------------------------------------------------
# Argument parsing
# --------------------------------------------------------------------
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="parking-fee",
        description="Compute the parking fee for a stay from a tiered price table.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--tables-dir",
        type=str,
        default=str(TABLES_DIR),
        help="Directory with price table definitions (.yaml/.yml/.json).",
    )
    parser.add_argument("--table", type=str, default=None, help="Id of the price table to apply.")
    parser.add_argument("--list", action="store_true", help="List the loaded price tables and exit.")
    parser.add_argument("--entry", type=str, default=None, help="Entry instant, ISO 8601 (e.g. 2024-05-01T08:00).")
    parser.add_argument(
        "--exit",
        type=str,
        default=None,
        help="Exit instant, ISO 8601. Defaults to now (same timezone kind as --entry).",
    )
    parser.add_argument(
        "--strict-times",
        action="store_true",
        help="Reject malformed HH:MM strings in the price table instead of reading them as 0.",
    )
    parser.add_argument("--json", action="store_true", help="Print the breakdown as JSON.")
    parser.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=DEFAULT_LOG_LEVEL,
        help="Logging level for internal messages.",
    )
    parser.add_argument(
        "--trace",
        nargs="?",
        const=TRACE_FILE,
        default=None,
        help="Append the calculation to a JSONL trace file.",
    )
    return parser.parse_args(argv)


def _parse_instant(value: str, *, name: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ParkingFeeError(f"--{name} is not an ISO 8601 date/time: {value!r}") from None


def _now_like(entry: datetime) -> datetime:
    if entry.tzinfo is None:
        return datetime.now()
    return datetime.now(entry.tzinfo)


def _print_tables(registry: PriceTableRegistry) -> None:
    table = Table(title="Price tables")
    for col in ("id", "name", "tolerance", "until", "recurring", "max charge", "file"):
        table.add_column(col)
    for table_id in registry.ids():
        t = registry.get(table_id)
        table.add_row(
            t.id,
            t.name,
            t.initial_tolerance,
            f"{t.until.time} → {t.until.value}" if t.until else "-",
            f"+{t.recurring.value} / {t.recurring.every} from {t.recurring.start}" if t.recurring else "-",
            f"{t.max_charge.value} within {t.max_charge.period}" if t.max_charge else "-",
            t.source_file,
        )
    console.print(table)


def _print_breakdown(b: FeeBreakdown) -> None:
    table = Table(title=f"Fee – {b.table_id}", show_header=False)
    table.add_column("field")
    table.add_column("value", justify="right")
    table.add_row("tolerance", format_minutes(b.tolerance_minutes))
    table.add_row("billable", format_minutes(b.billable_minutes))
    table.add_row("case", b.case)
    table.add_row("until charge", str(b.until_charge))
    table.add_row("recurring periods", str(b.recurring_periods))
    table.add_row("recurring charge", str(b.recurring_charge))
    table.add_row("max charge applied", "yes" if b.cap_applied else "no")
    table.add_row("[bold]total[/bold]", f"[bold]{b.total}[/bold]")
    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger("parking_fee")
    logger.debug("CLI arguments: %s", args)
    trace_logger = build_trace_logger(args.trace or TRACE_FILE, enabled=bool(args.trace))

    try:
        registry = build_default_registry(args.tables_dir)
        if args.list:
            _print_tables(registry)
            return 0

        if not args.table or not args.entry:
            console.print("[red]--table and --entry are required (or use --list).[/red]")
            return 2

        price_table = registry.get(args.table)
        entry = _parse_instant(args.entry, name="entry")
        exit_ = _parse_instant(args.exit, name="exit") if args.exit else _now_like(entry)

        parse = parse_time_to_minutes_strict if args.strict_times else parse_time_to_minutes
        calculator = FeeCalculator(parse=parse)
        try:
            breakdown = calculator.explain(price_table, entry, exit_)
        except ValueError as ex:
            # strict parser errors are plain ValueErrors
            if isinstance(ex, ParkingFeeError):
                raise
            raise ParkingFeeError(f"Price table '{price_table.id}': {ex}") from ex
    except ParkingFeeError as ex:
        logger.error("Fee calculation failed: %s", ex)
        trace_logger.log_failure(args.table, ex)
        console.print(f"[red]{ex}[/red]")
        return 2

    trace_logger.log_breakdown(breakdown)
    if args.trace:
        logger.info("Appended calculation to trace %s", args.trace)

    if args.json:
        console.print_json(json.dumps(breakdown.to_dict()))
    else:
        _print_breakdown(breakdown)
    return 0


if __name__ == "__main__":
    sys.exit(main())
