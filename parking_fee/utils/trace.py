"""JSONL trace of fee calculations.

One line per calculation, so a run can be audited after the fact:

    {"timestamp": ..., "phase": "fee_calculated", "table_id": "downtown",
     "payload": {"billable_minutes": 75, "case": "until_recurring", "total": "7.0", ...}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from ..pricing.calculator import FeeBreakdown

PHASE_FEE_CALCULATED = "fee_calculated"
PHASE_FEE_FAILED = "fee_failed"


@dataclass
class TraceLogger:
    path: Path
    enabled: bool = True
    events_written: int = field(default=0, init=False)

    def log(self, phase: str, payload: Dict[str, Any], *, table_id: Optional[str] = None) -> None:
        if not self.enabled:
            return
        event: Dict[str, Any] = {"timestamp": datetime.now(timezone.utc).isoformat(), "phase": phase}
        if table_id:
            event["table_id"] = table_id
        event["payload"] = payload

        if self.events_written == 0:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(event, ensure_ascii=False) + "\n")
        self.events_written += 1

    def log_breakdown(self, breakdown: "FeeBreakdown") -> None:
        self.log(PHASE_FEE_CALCULATED, breakdown.to_dict(), table_id=breakdown.table_id)

    def log_failure(self, table_id: Optional[str], error: Exception) -> None:
        self.log(PHASE_FEE_FAILED, {"error": type(error).__name__, "message": str(error)}, table_id=table_id)


def build_trace_logger(path: Path | str, enabled: bool = True) -> TraceLogger:
    return TraceLogger(Path(path), enabled=enabled)


__all__ = ["TraceLogger", "build_trace_logger", "PHASE_FEE_CALCULATED", "PHASE_FEE_FAILED"]
