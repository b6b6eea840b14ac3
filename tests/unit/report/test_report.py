"""Tests for writing, reading and rendering reports."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console

from dfsbench.aggregation import OperationSummary
from dfsbench.report import ReportWriter, read_report, render_table

SUMMARIES = [
    OperationSummary("mkdir", 10, 50, 5, 1, 9, 0),
    OperationSummary("read", 4, 40, 10, 5, 20, 1, 3),
]


def test_write_then_read_round_trip(tmp_path: Path) -> None:
    report_path = ReportWriter(tmp_path / "out").write(SUMMARIES, metadata={"workers": 2})

    assert report_path.name == "part-00000"
    assert read_report(report_path) == SUMMARIES
    assert read_report(tmp_path / "out") == SUMMARIES


def test_report_lines_use_summary_format(tmp_path: Path) -> None:
    path = ReportWriter(tmp_path).write(SUMMARIES[:1])
    assert path.read_text().splitlines() == [
        "Operation=mkdir, Count=10, errorCount=0, totalTime=50, avgTime=5, minTime=1, maxTime=9"
    ]


def test_summary_json_contains_operations_and_metadata(tmp_path: Path) -> None:
    writer = ReportWriter(tmp_path)
    writer.write(SUMMARIES, metadata={"backend": "memory"})

    document = json.loads(writer.summary_path.read_text())
    assert document["metadata"] == {"backend": "memory"}
    assert document["operations"][1]["skipped_count"] == 3


def test_read_missing_report_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        read_report(tmp_path)


def test_render_table_has_expected_columns() -> None:
    table = render_table(SUMMARIES)

    assert [column.header for column in table.columns] == [
        "Operation",
        "Count",
        "Total(ms)",
        "Avg(ms)",
        "Min(ms)",
        "Max(ms)",
        "Errors",
    ]
    assert table.row_count == 2

    console = Console(record=True, width=120)
    console.print(table)
    assert "mkdir" in console.export_text()
