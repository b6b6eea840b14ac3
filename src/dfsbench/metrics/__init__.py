"""Metric record types and the merge algebra."""

from .data_type import DataType
from .merge import merge, merge_all, resolve_type
from .record import MEASUREMENT_SEP, STRING_SEP, TYPE_SEP, MetricRecord

__all__ = [
    "DataType",
    "MetricRecord",
    "merge",
    "merge_all",
    "resolve_type",
    "TYPE_SEP",
    "MEASUREMENT_SEP",
    "STRING_SEP",
]
