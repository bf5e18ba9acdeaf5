from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from ..errors import PriceTableNotFound
from .loader import load_price_tables
from .schema import PriceTable


@dataclass
class PriceTableRegistry:
    """Lookup table for price tables by id."""

    tables: Dict[str, PriceTable] = field(default_factory=dict)

    def register(self, table: PriceTable) -> None:
        self.tables[table.id] = table

    def get(self, table_id: str) -> PriceTable:
        try:
            return self.tables[table_id]
        except KeyError:
            raise PriceTableNotFound(table_id) from None

    def ids(self) -> List[str]:
        return sorted(self.tables)

    def __contains__(self, table_id: object) -> bool:
        return table_id in self.tables

    def __len__(self) -> int:
        return len(self.tables)


def build_default_registry(tables_dir: Path | str | None = None) -> PriceTableRegistry:
    reg = PriceTableRegistry()
    for t in load_price_tables(tables_dir):
        reg.register(t)
    return reg
