"""Reducer side of a benchmark run."""

from .reducer import OperationReducer, OperationSummary, ReducerValue, parse_duration

__all__ = ["OperationReducer", "OperationSummary", "ReducerValue", "parse_duration"]
