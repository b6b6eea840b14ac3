"""Typed metric record emitted once per operation attempt.

A record is keyed as ``DATATYPE:operationType*measurementType``; the key is
what the shuffle stage groups on and what ``parse`` reads back. The value is
rendered separately through :meth:`MetricRecord.to_output_value`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from dfsbench.exceptions import InvalidFormatError

from .data_type import DataType

__all__ = ["MetricRecord", "TYPE_SEP", "MEASUREMENT_SEP", "STRING_SEP"]

TYPE_SEP = ":"
MEASUREMENT_SEP = "*"
STRING_SEP = ";"

RecordValue = Union[str, int, float]


@dataclass(frozen=True)
class MetricRecord:
    """Immutable measurement of one operation outcome."""

    data_type: DataType
    operation_type: str
    measurement_type: str
    value: RecordValue
    count: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.data_type, DataType):
            raise ValueError(f"data_type must be a DataType, got {self.data_type!r}")
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count < 1:
            raise ValueError(f"count must be an integer >= 1, got {self.count!r}")
        object.__setattr__(self, "value", self.data_type.coerce(self.value))

    @classmethod
    def parse(cls, key: str, value: Any = None, count: int = 1) -> "MetricRecord":
        """Build a record from its key string and an optional value.

        Without a value the record holds the zero of its type. Numeric text is
        converted for numeric types, so ``parse("LONG:write*duration", "100")``
        holds ``100``.

        Raises:
            InvalidFormatError: If a separator is missing, the type token is
                not a known :class:`DataType`, or the value does not fit the type.
        """
        place = key.find(TYPE_SEP)
        if place == -1:
            raise InvalidFormatError(key, f"no type separator {TYPE_SEP!r}")
        try:
            data_type = DataType.from_token(key[:place])
        except ValueError as exc:
            raise InvalidFormatError(key, "invalid output type") from exc

        rest = key[place + 1:]
        place = rest.find(MEASUREMENT_SEP)
        if place == -1:
            raise InvalidFormatError(key, f"no measurement separator {MEASUREMENT_SEP!r}")

        if value is None:
            value = "" if data_type is DataType.STRING else 0
        elif isinstance(value, str) and data_type is not DataType.STRING:
            try:
                value = int(value) if data_type.is_integral else float(value)
            except ValueError as exc:
                raise InvalidFormatError(key, f"value {value!r} is not a {data_type.name} value") from exc

        try:
            return cls(data_type, rest[:place], rest[place + 1:], value, count)
        except ValueError as exc:
            raise InvalidFormatError(key, str(exc)) from exc

    def to_key_string(self) -> str:
        """Format the key as ``DATATYPE:operationType*measurementType``."""
        return (
            f"{self.data_type.name}{TYPE_SEP}"
            f"{self.operation_type}{MEASUREMENT_SEP}{self.measurement_type}"
        )

    def to_output_value(self) -> str:
        """Return the canonical text form of the value."""
        return str(self.value)

    def to_payload(self) -> str:
        """Return the ``measurement:value`` text handed to the reducer."""
        return f"{self.measurement_type}{TYPE_SEP}{self.to_output_value()}"

    def same_key(self, other: "MetricRecord") -> bool:
        """Return ``True`` when both records share operation and measurement."""
        return (
            self.operation_type == other.operation_type
            and self.measurement_type == other.measurement_type
        )

    def __str__(self) -> str:
        return f"{self.to_key_string()} ({self.value})"
