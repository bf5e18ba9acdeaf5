import json
from decimal import Decimal
from pathlib import Path
from textwrap import dedent

import pytest

from parking_fee.errors import InvalidSchedule
from parking_fee.pricing.calculator import calculate_fee
from parking_fee.schedule.loader import load_price_tables, parse_price_table
from parking_fee.schedule.schema import MaxChargeTier, RecurringTier, UntilTier


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(dedent(text), encoding="utf-8")
    return path


def test_load_nested_yaml_table(tmp_path: Path):
    _write(
        tmp_path,
        "garage.yaml",
        """
        id: garage
        name: Garage
        initial_tolerance: "00:15"
        until: {time: "01:00", value: 5.0}
        recurring: {start: "01:00", every: "00:30", value: 2.0}
        max_charge: {period: "12:00", value: 30}
        """,
    )

    (table,) = load_price_tables(tmp_path)

    assert table.id == "garage"
    assert table.initial_tolerance == "00:15"
    assert table.until == UntilTier("01:00", Decimal("5.0"))
    assert table.recurring == RecurringTier("01:00", "00:30", Decimal("2.0"))
    assert table.max_charge == MaxChargeTier("12:00", Decimal("30"))
    assert table.source_file == "garage.yaml"


def test_load_flat_json_tables(tmp_path: Path):
    data = {
        "tables": [
            {
                "id": 1,
                "name": "Test Table",
                "initialTolerance": "00:15",
                "untilTime": "01:00",
                "untilValue": 5.0,
                "fromTime": "01:00",
                "everyInterval": "00:30",
                "addValue": 2.0,
                "maxChargePeriod": None,
                "maxChargeValue": None,
            },
            {"id": "b", "until_time": "02:00", "until_value": "7.5"},
        ]
    }
    (tmp_path / "tables.json").write_text(json.dumps(data), encoding="utf-8")

    first, second = load_price_tables(tmp_path)

    assert first.id == "1"
    assert first.until == UntilTier("01:00", Decimal("5.0"))
    assert first.recurring == RecurringTier("01:00", "00:30", Decimal("2.0"))
    assert first.max_charge is None
    assert second.name == "b"
    assert second.initial_tolerance == "00:00"
    assert second.until.value == Decimal("7.5")


def test_partially_configured_tier_is_not_configured():
    table = parse_price_table({"id": "x", "untilTime": "01:00", "fromTime": "00:00", "addValue": 1})
    assert table.until is None
    assert table.recurring is None


def test_missing_id_raises():
    with pytest.raises(InvalidSchedule, match="'id'"):
        parse_price_table({"name": "no id"}, ctx="price_tables(x.yaml)")


def test_negative_amount_raises():
    with pytest.raises(InvalidSchedule, match="non-negative"):
        parse_price_table({"id": "x", "until": {"time": "01:00", "value": -1}})


def test_non_numeric_amount_raises():
    with pytest.raises(InvalidSchedule, match="must be a number"):
        parse_price_table({"id": "x", "until": {"time": "01:00", "value": "five"}})


def test_zero_interval_rejected_at_load_time(tmp_path: Path):
    _write(
        tmp_path,
        "bad.yaml",
        """
        id: bad
        recurring: {start: "00:00", every: "00:00", value: 1}
        """,
    )
    with pytest.raises(InvalidSchedule, match="recurring interval"):
        load_price_tables(tmp_path)


def test_duplicate_ids_raise(tmp_path: Path):
    _write(tmp_path, "a.yaml", "id: same\n")
    _write(tmp_path, "b.yaml", "id: same\n")
    with pytest.raises(InvalidSchedule, match="Duplicate"):
        load_price_tables(tmp_path)


def test_invalid_yaml_raises(tmp_path: Path):
    _write(tmp_path, "broken.yaml", "id: [unterminated\n")
    with pytest.raises(InvalidSchedule, match="Invalid YAML"):
        load_price_tables(tmp_path)


def test_missing_directory_returns_empty(tmp_path: Path):
    assert load_price_tables(tmp_path / "nope") == []


def test_other_files_are_ignored(tmp_path: Path):
    _write(tmp_path, "README.md", "# not a table\n")
    _write(tmp_path, "t.yml", "id: t\n")
    assert [t.id for t in load_price_tables(tmp_path)] == ["t"]


def test_bundled_tables_load():
    ids = {t.id for t in load_price_tables()}
    assert {"downtown", "hourly", "event"} <= ids


def test_unquoted_yaml_times_are_read_as_minutes(tmp_path: Path):
    _write(
        tmp_path,
        "unquoted.yaml",
        """
        id: unquoted
        until: {time: 12:00, value: 5}
        max_charge: {period: 12:00, value: 3}
        """,
    )

    (table,) = load_price_tables(tmp_path)

    assert table.until.time == "12:00"
    assert table.max_charge.period == "12:00"
    # 2h billable is within the 12h period, so the cap applies
    assert calculate_fee(table, 0, 120 * 60_000) == Decimal("3")


def test_tables_dir_pointing_at_a_file_raises(tmp_path: Path):
    path = _write(tmp_path, "t.yaml", "id: t\n")
    with pytest.raises(InvalidSchedule, match="not a directory"):
        load_price_tables(path)
