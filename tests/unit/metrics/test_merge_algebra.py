"""Tests for merging metric records."""

from __future__ import annotations

import pytest

from dfsbench.exceptions import IncompatibleMergeError
from dfsbench.metrics import DataType, MetricRecord, merge, merge_all, resolve_type


def _record(data_type: DataType, value, op: str = "write", measurement: str = "duration") -> MetricRecord:
    return MetricRecord(data_type, op, measurement, value)


def test_long_plus_long_sums_values_and_counts() -> None:
    merged = merge(_record(DataType.LONG, 100), _record(DataType.LONG, 50))

    assert merged.data_type is DataType.LONG
    assert merged.value == 150
    assert merged.count == 2


def test_long_wins_over_integer() -> None:
    merged = merge(_record(DataType.LONG, 100), _record(DataType.INTEGER, 50))

    assert merged.data_type is DataType.LONG
    assert merged.value == 150


def test_double_wins_over_float() -> None:
    merged = merge(_record(DataType.DOUBLE, 1000.0), _record(DataType.FLOAT, 500.0))

    assert merged.data_type is DataType.DOUBLE
    assert merged.value == pytest.approx(1500.0)


def test_integer_plus_integer_stays_integer() -> None:
    merged = merge(_record(DataType.INTEGER, 1), _record(DataType.INTEGER, 2))
    assert merged.data_type is DataType.INTEGER
    assert merged.value == 3


def test_string_merge_concatenates_in_operand_order() -> None:
    a = _record(DataType.STRING, "a", measurement="note")
    b = _record(DataType.STRING, "b", measurement="note")

    assert merge(a, b).value == "a;b"
    assert merge(b, a).value == "b;a"


def test_string_wins_over_numbers() -> None:
    merged = merge(_record(DataType.STRING, "x"), _record(DataType.LONG, 7))
    assert merged.data_type is DataType.STRING
    assert merged.value == "x;7"


@pytest.mark.parametrize(
    "left,right,expected",
    [
        (DataType.INTEGER, DataType.FLOAT, DataType.FLOAT),
        (DataType.LONG, DataType.FLOAT, DataType.FLOAT),
        (DataType.FLOAT, DataType.DOUBLE, DataType.DOUBLE),
        (DataType.STRING, DataType.DOUBLE, DataType.STRING),
        (DataType.INTEGER, DataType.INTEGER, DataType.INTEGER),
    ],
)
def test_resolve_type_precedence(left: DataType, right: DataType, expected: DataType) -> None:
    assert resolve_type(left, right) is expected
    assert resolve_type(right, left) is expected


def test_merge_rejects_different_operation() -> None:
    with pytest.raises(IncompatibleMergeError):
        merge(_record(DataType.LONG, 1, op="write"), _record(DataType.LONG, 1, op="read"))


def test_merge_rejects_different_measurement() -> None:
    with pytest.raises(IncompatibleMergeError):
        merge(_record(DataType.LONG, 1), _record(DataType.LONG, 1, measurement="error"))


def test_merge_all_folds_left_to_right() -> None:
    records = [_record(DataType.LONG, value) for value in (10, 20, 30)]
    merged = merge_all(records)

    assert merged.value == 60
    assert merged.count == 3


def test_merge_all_of_nothing_is_an_error() -> None:
    with pytest.raises(ValueError):
        merge_all([])
