"""Type-directed merge algebra for metric records.

If either operand is a STRING the values are concatenated with ``;``. Otherwise
the widest numeric type wins in the order DOUBLE, FLOAT, LONG, INTEGER and the
values are summed. Counts always add up.
"""

from __future__ import annotations

from functools import reduce
from typing import Iterable

from dfsbench.exceptions import IncompatibleMergeError

from .data_type import DataType
from .record import STRING_SEP, MetricRecord

__all__ = ["merge", "merge_all", "resolve_type"]

_PRECEDENCE = (DataType.STRING, DataType.DOUBLE, DataType.FLOAT, DataType.LONG)


def resolve_type(left: DataType, right: DataType) -> DataType:
    """Return the result type of merging ``left`` with ``right``."""
    for candidate in _PRECEDENCE:
        if candidate in (left, right):
            return candidate
    return DataType.INTEGER


def merge(a: MetricRecord, b: MetricRecord) -> MetricRecord:
    """Combine two records sharing operation and measurement type.

    Raises:
        IncompatibleMergeError: If the operation or measurement types differ.
    """
    if not a.same_key(b):
        raise IncompatibleMergeError(a.to_key_string(), b.to_key_string())

    result_type = resolve_type(a.data_type, b.data_type)
    if result_type is DataType.STRING:
        value = f"{a.to_output_value()}{STRING_SEP}{b.to_output_value()}"
    elif result_type.is_floating:
        value = float(a.value) + float(b.value)
    else:
        value = int(a.value) + int(b.value)

    return MetricRecord(
        data_type=result_type,
        operation_type=a.operation_type,
        measurement_type=a.measurement_type,
        value=value,
        count=a.count + b.count,
    )


def merge_all(records: Iterable[MetricRecord]) -> MetricRecord:
    """Fold ``records`` left to right with :func:`merge`.

    Raises:
        ValueError: If ``records`` is empty.
    """
    items = list(records)
    if not items:
        raise ValueError("merge_all requires at least one record")
    return reduce(merge, items)
