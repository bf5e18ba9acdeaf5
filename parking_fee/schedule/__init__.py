from .loader import load_price_tables, parse_price_table
from .registry import PriceTableRegistry, build_default_registry
from .schema import MaxChargeTier, PriceTable, RecurringTier, UntilTier

__all__ = [
    "load_price_tables",
    "parse_price_table",
    "PriceTableRegistry",
    "build_default_registry",
    "PriceTable",
    "UntilTier",
    "RecurringTier",
    "MaxChargeTier",
]
