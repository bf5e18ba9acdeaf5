"""Error kinds raised by the fee calculator and the price table loader."""

from __future__ import annotations


class ParkingFeeError(ValueError):
    """Base class for every error raised by parking_fee."""


class InvalidSchedule(ParkingFeeError):
    """A price table cannot be used for a calculation (or could not be loaded)."""


class InvalidTimeRange(ParkingFeeError):
    """Entry/exit instants do not describe a valid stay."""


class PriceTableNotFound(ParkingFeeError, KeyError):
    def __init__(self, table_id: str):
        super().__init__(f"Unknown price table: {table_id}")
        self.table_id = table_id

    def __str__(self) -> str:
        return self.args[0]


__all__ = ["ParkingFeeError", "InvalidSchedule", "InvalidTimeRange", "PriceTableNotFound"]
