"""Price table schema.

A price table is a set of optional tiers. Each tier is one record, so
"tier configured" is simply `tier is not None`. Durations stay as the
"HH:MM" strings found in the definition; the calculator parses them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class UntilTier:
    """Flat charge for stays up to `time`."""

    time: str
    value: Decimal


@dataclass(frozen=True)
class RecurringTier:
    """`value` per `every` interval (or fraction). `start` is descriptive only."""

    start: str
    every: str
    value: Decimal


@dataclass(frozen=True)
class MaxChargeTier:
    """Caps the total at `value` for stays within `period`."""

    period: str
    value: Decimal


@dataclass(frozen=True)
class PriceTable:
    id: str
    name: str = ""
    initial_tolerance: str = "00:00"
    until: Optional[UntilTier] = None
    recurring: Optional[RecurringTier] = None
    max_charge: Optional[MaxChargeTier] = None
    source_file: str = ""
