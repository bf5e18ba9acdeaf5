"""Parking fee calculation from tiered price tables."""

from .errors import InvalidSchedule, InvalidTimeRange, ParkingFeeError, PriceTableNotFound
from .pricing import FeeBreakdown, FeeCalculator, calculate_fee, parse_time_to_minutes
from .schedule import (
    MaxChargeTier,
    PriceTable,
    PriceTableRegistry,
    RecurringTier,
    UntilTier,
    build_default_registry,
    load_price_tables,
    parse_price_table,
)

__version__ = "0.1.0"

__all__ = [
    "ParkingFeeError",
    "InvalidSchedule",
    "InvalidTimeRange",
    "PriceTableNotFound",
    "FeeBreakdown",
    "FeeCalculator",
    "calculate_fee",
    "parse_time_to_minutes",
    "PriceTable",
    "UntilTier",
    "RecurringTier",
    "MaxChargeTier",
    "PriceTableRegistry",
    "build_default_registry",
    "load_price_tables",
    "parse_price_table",
]
