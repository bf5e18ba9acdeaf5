"""Parsing of "HH:MM" duration strings used by price tables.

Two variants:
- parse_time_to_minutes: lenient. Anything it cannot read degrades to 0
  (per part, or for the whole string), negatives are accepted as-is. A part
  padded with spaces does not read as a number (" 05" is 0).
- parse_time_to_minutes_strict: raises ValueError on anything that is not
  "H:MM" with non-negative parts and minutes < 60.

The calculator takes the parser as an argument, so callers choose.
"""

from __future__ import annotations

import re
from typing import Callable, Optional

TimeParser = Callable[[Optional[str]], int]

_STRICT_RE = re.compile(r"^\s*(\d+):([0-5]\d)\s*$")
_INT_RE = re.compile(r"[+-]?[0-9]+")


def _int_or_zero(part: str) -> int:
    if not _INT_RE.fullmatch(part):
        return 0
    return int(part)


def parse_time_to_minutes(text: Optional[str]) -> int:
    if text is None or not str(text).strip():
        return 0
    parts = str(text).split(":")
    if len(parts) != 2:
        return 0
    hours = _int_or_zero(parts[0])
    minutes = _int_or_zero(parts[1])
    return hours * 60 + minutes


def parse_time_to_minutes_strict(text: Optional[str]) -> int:
    m = _STRICT_RE.match(text or "")
    if not m:
        raise ValueError(f"Invalid time string (expected HH:MM): {text!r}")
    return int(m.group(1)) * 60 + int(m.group(2))


def format_minutes(minutes: int) -> str:
    """Inverse of the parsers for non-negative values: 135 -> "02:15"."""
    sign = "-" if minutes < 0 else ""
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{mins:02d}"


__all__ = ["TimeParser", "parse_time_to_minutes", "parse_time_to_minutes_strict", "format_minutes"]
