from .calculator import FeeBreakdown, FeeCalculator, calculate_fee, to_epoch_millis, validate_price_table
from .timestr import format_minutes, parse_time_to_minutes, parse_time_to_minutes_strict

__all__ = [
    "FeeBreakdown",
    "FeeCalculator",
    "calculate_fee",
    "to_epoch_millis",
    "validate_price_table",
    "format_minutes",
    "parse_time_to_minutes",
    "parse_time_to_minutes_strict",
]
