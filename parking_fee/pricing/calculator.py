"""Parking fee calculation.

Given a price table and the entry/exit instants of a stay:

1. The initial tolerance is added to the entry instant. Exits at or before
   that point are free and nothing else is evaluated.
2. The billable duration is the remainder, floored to whole minutes.
3. The "until" tier charges a flat value for stays up to its time. Beyond it,
   the recurring tier (when configured) adds its value per started interval
   of the excess; without a recurring tier the flat value is all that is
   charged.
4. Without an "until" tier, the recurring tier charges per started interval
   of the whole billable duration.
5. The max-charge tier caps the total, but only for billable durations
   within its period. Longer stays are NOT capped. This mirrors the pricing
   rules in production and is kept as-is until the product owners confirm
   the intended direction.

The calculation is pure: no I/O, no shared state. Durations in the table are
read through a single parser function (lenient by default).
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ..config import MS_PER_MINUTE
from ..errors import InvalidSchedule, InvalidTimeRange
from .timestr import TimeParser, parse_time_to_minutes

if TYPE_CHECKING:
    from ..schedule.schema import PriceTable

_LOGGER = logging.getLogger(__name__)

Instant = Union[datetime, int]

_ZERO = Decimal("0")
_ONE_MS = timedelta(milliseconds=1)
_NAIVE_EPOCH = datetime(1970, 1, 1)
_AWARE_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Which branch of the tier algorithm produced the total.
CASE_WITHIN_TOLERANCE = "within_tolerance"
CASE_UNTIL = "until"
CASE_UNTIL_RECURRING = "until_recurring"
CASE_UNTIL_FLAT = "until_flat"
CASE_RECURRING = "recurring"
CASE_NO_TIERS = "no_tiers"


@dataclass(frozen=True)
class FeeBreakdown:
    """Intermediate values of one calculation. `total` is the fee."""

    table_id: str
    entry_ms: int
    exit_ms: int
    tolerance_minutes: int
    billable_minutes: int
    case: str
    until_charge: Decimal = _ZERO
    recurring_periods: int = 0
    recurring_charge: Decimal = _ZERO
    cap_applied: bool = False
    total: Decimal = _ZERO

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        for k, v in out.items():
            if isinstance(v, Decimal):
                out[k] = str(v)
        return out


def to_epoch_millis(value: Instant) -> int:
    """Epoch milliseconds for an int (returned as-is) or a datetime.

    Naive datetimes are measured against a naive epoch, so two naive values
    still give the right difference.
    """
    if isinstance(value, bool):
        raise InvalidTimeRange(f"Unsupported instant type: {type(value).__name__}")
    if isinstance(value, int):
        return value
    if isinstance(value, datetime):
        epoch = _NAIVE_EPOCH if value.tzinfo is None else _AWARE_EPOCH
        return (value - epoch) // _ONE_MS
    raise InvalidTimeRange(f"Unsupported instant type: {type(value).__name__}")


def _check_range(entry: Instant, exit: Instant) -> None:
    if isinstance(entry, datetime) and isinstance(exit, datetime):
        if (entry.tzinfo is None) != (exit.tzinfo is None):
            raise InvalidTimeRange("Cannot mix naive and timezone-aware entry/exit instants")
    elif isinstance(entry, datetime) != isinstance(exit, datetime):
        raise InvalidTimeRange("Entry and exit must both be datetimes or both be epoch milliseconds")


def _ceil_div(minutes: int, interval: int) -> int:
    return (minutes // interval) + (1 if minutes % interval > 0 else 0)


def validate_price_table(table: "PriceTable", parse: TimeParser = parse_time_to_minutes) -> Optional[int]:
    """Raise InvalidSchedule if `table` cannot be used for a calculation.

    Returns the recurring interval in minutes (None without a recurring tier).
    """
    if table.recurring is None:
        return None
    every = parse(table.recurring.every)
    if every <= 0:
        raise InvalidSchedule(
            f"Price table '{table.id}': recurring interval must be positive, "
            f"got {table.recurring.every!r} ({every} minutes)"
        )
    return every


class FeeCalculator:
    """Computes parking fees from price tables.

    `parse` turns the table's "HH:MM" strings into minutes. The default is
    the lenient parser; pass parse_time_to_minutes_strict to reject
    malformed tables instead.
    """

    def __init__(self, parse: TimeParser = parse_time_to_minutes):
        self.parse = parse

    def calculate(self, table: "PriceTable", entry: Instant, exit: Instant) -> Decimal:
        return self.explain(table, entry, exit).total

    def explain(self, table: "PriceTable", entry: Instant, exit: Instant) -> FeeBreakdown:
        every_minutes = validate_price_table(table, self.parse)
        _check_range(entry, exit)

        entry_ms = to_epoch_millis(entry)
        exit_ms = to_epoch_millis(exit)
        if exit_ms < entry_ms:
            raise InvalidTimeRange(f"Exit ({exit}) is earlier than entry ({entry})")

        tolerance = self.parse(table.initial_tolerance)
        entry_with_tolerance = entry_ms + tolerance * MS_PER_MINUTE
        if exit_ms <= entry_with_tolerance:
            _LOGGER.debug("table=%s: exit within %d min tolerance, no charge", table.id, tolerance)
            return FeeBreakdown(
                table_id=table.id,
                entry_ms=entry_ms,
                exit_ms=exit_ms,
                tolerance_minutes=tolerance,
                billable_minutes=0,
                case=CASE_WITHIN_TOLERANCE,
            )

        billable = (exit_ms - entry_with_tolerance) // MS_PER_MINUTE

        until_charge = _ZERO
        periods = 0
        recurring_charge = _ZERO
        until = table.until
        recurring = table.recurring

        if until is not None:
            until_minutes = self.parse(until.time)
            until_charge = until.value
            if billable <= until_minutes:
                case = CASE_UNTIL
            elif recurring is not None:
                case = CASE_UNTIL_RECURRING
                additional = billable - until_minutes
                if additional > 0:
                    periods = _ceil_div(additional, every_minutes)
                    recurring_charge = periods * recurring.value
            else:
                case = CASE_UNTIL_FLAT
        elif recurring is not None:
            case = CASE_RECURRING
            periods = _ceil_div(billable, every_minutes)
            recurring_charge = periods * recurring.value
        else:
            case = CASE_NO_TIERS

        total = until_charge + recurring_charge

        cap_applied = False
        max_charge = table.max_charge
        if max_charge is not None and billable <= self.parse(max_charge.period):
            if max_charge.value < total:
                total = max_charge.value
                cap_applied = True

        _LOGGER.debug(
            "table=%s: billable=%d min case=%s periods=%d cap_applied=%s total=%s",
            table.id,
            billable,
            case,
            periods,
            cap_applied,
            total,
        )
        return FeeBreakdown(
            table_id=table.id,
            entry_ms=entry_ms,
            exit_ms=exit_ms,
            tolerance_minutes=tolerance,
            billable_minutes=billable,
            case=case,
            until_charge=until_charge,
            recurring_periods=periods,
            recurring_charge=recurring_charge,
            cap_applied=cap_applied,
            total=total,
        )


_DEFAULT_CALCULATOR = FeeCalculator()


def calculate_fee(table: "PriceTable", entry: Instant, exit: Instant) -> Decimal:
    """Fee for a stay from `entry` to `exit` under `table` (lenient time parsing)."""
    return _DEFAULT_CALCULATOR.calculate(table, entry, exit)


__all__ = [
    "FeeBreakdown",
    "FeeCalculator",
    "Instant",
    "calculate_fee",
    "to_epoch_millis",
    "validate_price_table",
]
