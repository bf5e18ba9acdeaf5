from pathlib import Path

import pytest

from parking_fee.errors import PriceTableNotFound
from parking_fee.schedule.registry import PriceTableRegistry, build_default_registry
from parking_fee.schedule.schema import PriceTable


def test_register_and_get():
    reg = PriceTableRegistry()
    reg.register(PriceTable(id="a"))
    reg.register(PriceTable(id="b"))

    assert reg.get("a").id == "a"
    assert "b" in reg
    assert len(reg) == 2
    assert reg.ids() == ["a", "b"]


def test_unknown_table_raises_not_found():
    reg = PriceTableRegistry()
    with pytest.raises(PriceTableNotFound, match="missing"):
        reg.get("missing")
    with pytest.raises(KeyError):
        reg.get("missing")


def test_build_default_registry_from_dir(tmp_path: Path):
    (tmp_path / "x.yaml").write_text('id: x\ninitial_tolerance: "00:05"\n', encoding="utf-8")
    reg = build_default_registry(tmp_path)
    assert reg.ids() == ["x"]
    assert reg.get("x").initial_tolerance == "00:05"
