"""Price table loader.

Loads YAML/JSON price table definitions from a directory (by default the
one configured in parking_fee.config).

Each file holds one table (a mapping) or several under a `tables:` list.
Tiers may be written nested:

    until: {time: "01:00", value: 5.0}
    recurring: {start: "01:00", every: "00:30", value: 2.0}
    max_charge: {period: "12:00", value: 40.0}

or flat, the way price tables are stored by the parking app
(untilTime/untilValue, fromTime/everyInterval/addValue,
maxChargePeriod/maxChargeValue, snake_case accepted too). A tier is
configured only when all of its fields are present.

PyYAML reads an unquoted 12:00 as the sexagesimal integer 720; integer
times are taken as minutes and written back as "HH:MM".

Bad definitions raise InvalidSchedule with the file and key in the message,
so CI/test runs fail fast.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..config import DEFAULT_TOLERANCE, TABLES_DIR
from ..errors import InvalidSchedule
from ..pricing.calculator import validate_price_table
from ..pricing.timestr import format_minutes
from .schema import MaxChargeTier, PriceTable, RecurringTier, UntilTier

_LOGGER = logging.getLogger(__name__)

_SUFFIXES = (".yaml", ".yml", ".json")


def _first(obj: Dict[str, Any], *keys: str) -> Any:
    for k in keys:
        if obj.get(k) is not None:
            return obj[k]
    return None


def _amount(raw: Any, *, ctx: str) -> Decimal:
    if isinstance(raw, bool):
        raise InvalidSchedule(f"Amount must be a number in {ctx}, got {raw!r}")
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        raise InvalidSchedule(f"Amount must be a number in {ctx}, got {raw!r}") from None
    if not value.is_finite() or value < 0:
        raise InvalidSchedule(f"Amount must be a non-negative number in {ctx}, got {raw!r}")
    return value


def _time(raw: Any) -> str:
    if raw is None:
        return ""
    # unquoted 12:00 in YAML arrives as the base-60 int 720, already minutes
    if isinstance(raw, int) and not isinstance(raw, bool):
        return format_minutes(raw)
    return str(raw).strip()


def _nested(obj: Dict[str, Any], key: str, *, ctx: str) -> Optional[Dict[str, Any]]:
    sub = obj.get(key)
    if sub is None:
        return None
    if not isinstance(sub, dict):
        raise InvalidSchedule(f"'{key}' must be an object in {ctx}")
    return sub


def _parse_until(obj: Dict[str, Any], *, ctx: str) -> Optional[UntilTier]:
    sub = _nested(obj, "until", ctx=ctx)
    if sub is not None:
        time, value = sub.get("time"), sub.get("value")
    else:
        time = _first(obj, "untilTime", "until_time")
        value = _first(obj, "untilValue", "until_value")
    if time is None or value is None:
        return None
    return UntilTier(time=_time(time), value=_amount(value, ctx=f"{ctx}.until"))


def _parse_recurring(obj: Dict[str, Any], *, ctx: str) -> Optional[RecurringTier]:
    sub = _nested(obj, "recurring", ctx=ctx)
    if sub is not None:
        start, every, value = sub.get("start"), sub.get("every"), sub.get("value")
    else:
        start = _first(obj, "fromTime", "from_time")
        every = _first(obj, "everyInterval", "every_interval")
        value = _first(obj, "addValue", "add_value")
    if start is None or every is None or value is None:
        return None
    return RecurringTier(start=_time(start), every=_time(every), value=_amount(value, ctx=f"{ctx}.recurring"))


def _parse_max_charge(obj: Dict[str, Any], *, ctx: str) -> Optional[MaxChargeTier]:
    sub = _nested(obj, "max_charge", ctx=ctx)
    if sub is not None:
        period, value = sub.get("period"), sub.get("value")
    else:
        period = _first(obj, "maxChargePeriod", "max_charge_period")
        value = _first(obj, "maxChargeValue", "max_charge_value")
    if period is None or value is None:
        return None
    return MaxChargeTier(period=_time(period), value=_amount(value, ctx=f"{ctx}.max_charge"))


def parse_price_table(obj: Any, *, ctx: str = "price_table", source_file: str = "") -> PriceTable:
    """Build a PriceTable from one definition mapping."""
    if not isinstance(obj, dict):
        raise InvalidSchedule(f"Price table must be an object in {ctx}")
    if obj.get("id") is None or not str(obj["id"]).strip():
        raise InvalidSchedule(f"Missing required key 'id' in {ctx}")
    table_id = str(obj["id"]).strip()
    tctx = f"{ctx}[{table_id}]"
    tolerance = _first(obj, "initial_tolerance", "initialTolerance")
    table = PriceTable(
        id=table_id,
        name=str(obj.get("name") or table_id),
        initial_tolerance=_time(tolerance) if tolerance is not None else DEFAULT_TOLERANCE,
        until=_parse_until(obj, ctx=tctx),
        recurring=_parse_recurring(obj, ctx=tctx),
        max_charge=_parse_max_charge(obj, ctx=tctx),
        source_file=source_file,
    )
    validate_price_table(table)
    return table


def _load_one(path: Path) -> Any:
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            return yaml.safe_load(raw) or {}
        except yaml.YAMLError as ex:
            raise InvalidSchedule(f"Invalid YAML in {path}: {ex}") from ex
    try:
        return json.loads(raw)
    except json.JSONDecodeError as ex:
        raise InvalidSchedule(f"Invalid JSON in {path}: {ex}") from ex


def load_price_tables(tables_dir: Path | str | None = None) -> List[PriceTable]:
    base = Path(tables_dir) if tables_dir is not None else TABLES_DIR
    if not base.exists():
        _LOGGER.warning("Price table directory %s does not exist", base)
        return []
    if not base.is_dir():
        raise InvalidSchedule(f"Price table path is not a directory: {base}")
    paths = sorted(p for p in base.iterdir() if p.is_file() and p.suffix.lower() in _SUFFIXES)
    out: List[PriceTable] = []
    seen: Dict[str, str] = {}
    for p in paths:
        data = _load_one(p)
        ctx = f"price_tables({p.name})"
        if isinstance(data, dict) and "tables" in data:
            items = data["tables"]
            if not isinstance(items, list):
                raise InvalidSchedule(f"'tables' must be a list in {ctx}")
        else:
            items = [data]
        for i, item in enumerate(items):
            table = parse_price_table(item, ctx=f"{ctx}.tables[{i}]", source_file=p.name)
            if table.id in seen:
                raise InvalidSchedule(
                    f"Duplicate price table id '{table.id}' in {p.name} (already defined in {seen[table.id]})"
                )
            seen[table.id] = p.name
            out.append(table)
        _LOGGER.info("Loaded %d price table(s) from %s", len(items), p)
    return out


__all__ = ["load_price_tables", "parse_price_table"]
