"""Report artifacts written at the end of a run and read back by ``dfsbench show``."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from rich.table import Table

from dfsbench.aggregation import OperationSummary
from dfsbench.constants import REPORT_FILE_NAME, SUMMARY_JSON_NAME

__all__ = ["ReportWriter", "read_report", "render_table"]

logger = logging.getLogger(__name__)


class ReportWriter:
    """Write ``part-00000`` and ``summary.json`` into an output directory."""

    def __init__(self, output_dir: Union[str, Path]) -> None:
        self.output_dir = Path(output_dir)

    @property
    def report_path(self) -> Path:
        return self.output_dir / REPORT_FILE_NAME

    @property
    def summary_path(self) -> Path:
        return self.output_dir / SUMMARY_JSON_NAME

    def write(
        self,
        summaries: Sequence[OperationSummary],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Path:
        """Persist the summaries and return the path of ``part-00000``."""
        self.output_dir.mkdir(parents=True, exist_ok=True)

        with open(self.report_path, "w", encoding="utf-8") as handle:
            for summary in summaries:
                handle.write(summary.to_line() + "\n")

        document: Dict[str, Any] = {
            "metadata": dict(metadata or {}),
            "operations": [summary.to_dict() for summary in summaries],
        }
        with open(self.summary_path, "w", encoding="utf-8") as handle:
            json.dump(document, handle, indent=2, default=str)

        logger.info("Wrote %s operation summaries to %s", len(summaries), self.output_dir)
        return self.report_path


def read_report(path: Union[str, Path]) -> List[OperationSummary]:
    """
    Parse a ``part-00000`` file back into summaries.

    ``path`` may name the file itself or the directory holding it. Blank lines
    are ignored.

    Raises:
        FileNotFoundError: If no report exists at ``path``.
        ValueError: If a line is not a summary line.
    """
    target = Path(path)
    if target.is_dir():
        target = target / REPORT_FILE_NAME
    if not os.path.isfile(target):
        raise FileNotFoundError(f"No report found at {target}")

    with open(target, encoding="utf-8") as handle:
        return [OperationSummary.from_line(line) for line in handle if line.strip()]


def render_table(summaries: Sequence[OperationSummary], title: str = "Benchmark Results") -> Table:
    """Build a rich table with one row per operation."""
    table = Table(title=title)
    table.add_column("Operation", style="cyan", no_wrap=True)
    table.add_column("Count", justify="right")
    table.add_column("Total(ms)", justify="right")
    table.add_column("Avg(ms)", justify="right")
    table.add_column("Min(ms)", justify="right")
    table.add_column("Max(ms)", justify="right")
    table.add_column("Errors", justify="right", style="red")

    for summary in summaries:
        table.add_row(
            summary.operation,
            str(summary.count),
            str(summary.total_time),
            str(summary.avg_time),
            str(summary.min_time),
            str(summary.max_time),
            str(summary.error_count),
        )
    return table
