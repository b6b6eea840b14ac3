"""Enumeration describing the value kinds a metric record can carry."""

from __future__ import annotations

from enum import Enum
from typing import Any

__all__ = ["DataType"]


class DataType(Enum):
    """Value type of a metric record, named as it appears in record keys."""

    STRING = "string"
    FLOAT = "float"
    LONG = "long"
    DOUBLE = "double"
    INTEGER = "integer"

    @classmethod
    def from_token(cls, token: str) -> "DataType":
        """Resolve a key token such as ``LONG`` (case-insensitive)."""
        try:
            return cls[token.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown data type token: {token!r}") from None

    @property
    def is_integral(self) -> bool:
        return self in (DataType.LONG, DataType.INTEGER)

    @property
    def is_floating(self) -> bool:
        return self in (DataType.FLOAT, DataType.DOUBLE)

    def coerce(self, value: Any) -> Any:
        """Return ``value`` in the representation this type requires.

        Raises:
            ValueError: If ``value`` is not legal for this type.
        """
        if self is DataType.STRING:
            if not isinstance(value, str):
                raise ValueError(f"STRING value must be str, got {type(value).__name__}")
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{self.name} value must be numeric, got {type(value).__name__}")
        if self.is_integral:
            if not isinstance(value, int):
                raise ValueError(f"{self.name} value must be an integer, got {value!r}")
            return value
        return float(value)
