"""Tests for the dfsbench command line interface."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from dfsbench import __version__
from dfsbench.cli.main import app
from dfsbench.report import read_report

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_run_on_memory_backend_writes_report(tmp_path: Path) -> None:
    out = tmp_path / "results"
    result = runner.invoke(
        app,
        [
            "run",
            "--backend", "memory",
            "--workers", "2",
            "--ops-per-worker", "6",
            "--operations", "mkdir,write,ls",
            "--file-size", "0",
            "--heartbeat-interval", "0",
            "--output-dir", str(out),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "mkdir" in result.output
    assert [summary.operation for summary in read_report(out)] == ["list", "mkdir", "write"]


def test_run_with_config_file_and_sync_flag(tmp_path: Path) -> None:
    config = tmp_path / "bench.yaml"
    config.write_text(
        "backend: memory\nworkers: 1\nops_per_worker: 3\noperations: exists\n"
        "heartbeat_interval: 0\nfile_size_mb: 0\n"
        f"output_dir: {tmp_path / 'out'}\n"
    )

    result = runner.invoke(app, ["run", "--config", str(config), "--sync"])

    assert result.exit_code == 0, result.output
    assert read_report(tmp_path / "out")[0].count == 3


def test_run_failures_still_exit_zero(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "run",
            "--backend", "memory",
            "--workers", "1",
            "--ops-per-worker", "2",
            "--operations", "read",
            "--heartbeat-interval", "0",
            "--output-dir", str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert read_report(tmp_path)[0].error_count == 2


def test_invalid_configuration_exits_with_one(tmp_path: Path) -> None:
    result = runner.invoke(app, ["run", "--workers", "0", "--output-dir", str(tmp_path)])

    assert result.exit_code == 1
    assert not (tmp_path / "part-00000").exists()


def test_unknown_operation_exits_with_one(tmp_path: Path) -> None:
    result = runner.invoke(app, ["run", "--operations", "mkdir,teleport", "--output-dir", str(tmp_path)])
    assert result.exit_code == 1


def test_missing_config_file_exits_with_one(tmp_path: Path) -> None:
    result = runner.invoke(app, ["run", "--config", str(tmp_path / "absent.yaml")])
    assert result.exit_code == 1


def test_generate_writes_plans(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        ["generate", "--workers", "2", "--ops-per-worker", "3", "--operations", "write,read", "--output-dir", str(tmp_path)],
    )

    assert result.exit_code == 0, result.output
    lines = (tmp_path / "plan-1.txt").read_text().splitlines()
    assert [line.split(":")[0] for line in lines] == ["write", "read", "write"]


def test_show_renders_existing_report(tmp_path: Path) -> None:
    (tmp_path / "part-00000").write_text(
        "Operation=write, Count=2, errorCount=0, totalTime=30, avgTime=15, minTime=10, maxTime=20\n"
    )

    result = runner.invoke(app, ["show", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert "write" in result.output
    assert "15" in result.output


def test_show_missing_report_exits_with_one(tmp_path: Path) -> None:
    result = runner.invoke(app, ["show", str(tmp_path / "nothing")])
    assert result.exit_code == 1


def test_verbose_flag_is_accepted() -> None:
    result = runner.invoke(app, ["--verbose", "version"])
    assert result.exit_code == 0


def test_lenient_operations_flag_schedules_unknown_names(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "run",
            "--backend", "memory",
            "--workers", "1",
            "--ops-per-worker", "4",
            "--operations", "mkdir,teleport",
            "--lenient-operations",
            "--heartbeat-interval", "0",
            "--output-dir", str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    summaries = {summary.operation: summary for summary in read_report(tmp_path)}
    assert sorted(summaries) == ["mkdir", "teleport"]
    assert summaries["teleport"].error_count == 2
