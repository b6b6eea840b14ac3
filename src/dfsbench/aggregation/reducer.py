"""
Reduction of all records sharing one operation key into a summary.

Values arrive in arbitrary order, either as :class:`MetricRecord` instances or
as ``measurement:value`` payload strings. A bare integer string is read as a
duration. Values that cannot be read as an integer duration are logged and left
out of the statistics; they never abort the reduction. Error values, including
the ``-1`` recorded for an unknown operation, count like any other duration.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from dfsbench.constants import DURATION, ERROR, SKIPPED
from dfsbench.exceptions import MalformedMetricPayloadError
from dfsbench.metrics import TYPE_SEP, MetricRecord

__all__ = ["OperationReducer", "OperationSummary", "ReducerValue", "parse_duration"]

logger = logging.getLogger(__name__)

ReducerValue = Union[MetricRecord, str]

_KNOWN_TAGS = (DURATION, ERROR, SKIPPED)
_LINE_FIELD = re.compile(r"\s*(\w+)=(.*?)\s*$")


def parse_duration(value: ReducerValue) -> Tuple[str, int]:
    """Return ``(measurement_tag, duration_ms)`` for one reducer value.

    Raises:
        MalformedMetricPayloadError: If the value carries no integer duration
            or an unknown measurement tag.
    """
    if isinstance(value, MetricRecord):
        tag, raw = value.measurement_type, value.value
    elif isinstance(value, str):
        text = value.strip()
        if TYPE_SEP in text:
            tag, _, raw = text.partition(TYPE_SEP)
            tag = tag.strip()
        else:
            tag, raw = DURATION, text
    else:
        raise MalformedMetricPayloadError(value, f"unsupported value type {type(value).__name__}")

    if tag not in _KNOWN_TAGS:
        raise MalformedMetricPayloadError(value, f"unknown measurement {tag!r}")

    if isinstance(raw, bool):
        raise MalformedMetricPayloadError(value, "duration is not an integer")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise MalformedMetricPayloadError(value, "duration is not an integer")
        duration = int(raw)
    elif isinstance(raw, int):
        duration = raw
    else:
        try:
            duration = int(str(raw).strip())
        except ValueError as exc:
            raise MalformedMetricPayloadError(value, "duration is not an integer") from exc

    return tag, duration


@dataclass(frozen=True)
class OperationSummary:
    """Aggregated statistics for one operation."""

    operation: str
    count: int
    total_time: int
    avg_time: int
    min_time: int
    max_time: int
    error_count: int = 0
    skipped_count: int = 0

    def to_line(self) -> str:
        line = (
            f"Operation={self.operation}, Count={self.count}, errorCount={self.error_count}, "
            f"totalTime={self.total_time}, avgTime={self.avg_time}, "
            f"minTime={self.min_time}, maxTime={self.max_time}"
        )
        if self.skipped_count > 0:
            line += f", skippedCount={self.skipped_count}"
        return line

    @classmethod
    def from_line(cls, line: str) -> "OperationSummary":
        """Parse a line produced by :meth:`to_line`.

        Raises:
            ValueError: If a field is missing or not an integer.
        """
        fields: Dict[str, str] = {}
        for part in line.strip().split(","):
            match = _LINE_FIELD.match(part)
            if match is None:
                raise ValueError(f"Malformed summary field {part!r} in {line!r}")
            fields[match.group(1)] = match.group(2)

        try:
            return cls(
                operation=fields["Operation"],
                count=int(fields["Count"]),
                total_time=int(fields["totalTime"]),
                avg_time=int(fields["avgTime"]),
                min_time=int(fields["minTime"]),
                max_time=int(fields["maxTime"]),
                error_count=int(fields["errorCount"]),
                skipped_count=int(fields.get("skippedCount", 0)),
            )
        except KeyError as exc:
            raise ValueError(f"Summary line is missing field {exc.args[0]}: {line!r}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class OperationReducer:
    """Fold the values of one operation key into an :class:`OperationSummary`."""

    def reduce(self, operation: str, values: Iterable[ReducerValue]) -> Optional[OperationSummary]:
        """Return the summary for ``operation`` or ``None`` when nothing counted."""
        count = 0
        total = 0
        minimum: Optional[int] = None
        maximum: Optional[int] = None
        errors = 0
        skipped = 0

        for value in values:
            try:
                tag, duration = parse_duration(value)
            except MalformedMetricPayloadError as exc:
                logger.warning("Skipping value for %s: %s", operation, exc.message)
                continue

            if tag == SKIPPED:
                skipped += 1
                continue
            if tag == ERROR:
                errors += 1

            count += 1
            total += duration
            minimum = duration if minimum is None else min(minimum, duration)
            maximum = duration if maximum is None else max(maximum, duration)

        if count == 0:
            if skipped:
                logger.info("Operation %s had %s skipped values and no measurements", operation, skipped)
            return None

        return OperationSummary(
            operation=operation,
            count=count,
            total_time=total,
            avg_time=total // count,
            min_time=minimum,
            max_time=maximum,
            error_count=errors,
            skipped_count=skipped,
        )
