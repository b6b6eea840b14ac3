"""Tests for operation plan generation."""

from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from dfsbench.plan import PlanGenerator, plan_file_name, write_plans
from dfsbench.progress import LoggingProgressReporter


def test_entries_follow_round_robin_with_unique_keys() -> None:
    counter = itertools.count()
    generator = PlanGenerator(["write", "read"], 5, key_factory=lambda: f"k{next(counter)}")

    assert list(generator.generate(0)) == ["write:k0", "read:k1", "write:k2", "read:k3", "write:k4"]


def test_default_keys_are_uuids() -> None:
    entries = list(PlanGenerator(["mkdir"], 3).generate(0))
    keys = [entry.split(":", 1)[1] for entry in entries]

    assert len(set(keys)) == 3
    assert all(len(key) == 36 for key in keys)


def test_progress_is_reported() -> None:
    reporter = LoggingProgressReporter(keep_history=True)
    list(PlanGenerator(["mkdir"], 200, reporter=reporter).generate(4))

    assert reporter.history == [
        "Running operation generator for worker 4",
        "Generated 100 operation entries",
        "Generated 200 operation entries",
        "Completed generating 200 operation entries",
    ]


def test_write_plans_creates_one_file_per_worker(tmp_path: Path) -> None:
    paths = write_plans(["mkdir", "ls"], 3, 4, tmp_path / "plans")

    assert [path.name for path in paths] == [plan_file_name(i) for i in range(3)]
    lines = paths[2].read_text().splitlines()
    assert [line.split(":")[0] for line in lines] == ["mkdir", "ls", "mkdir", "ls"]


def test_invalid_arguments() -> None:
    with pytest.raises(ValueError):
        PlanGenerator([], 1)
    with pytest.raises(ValueError):
        write_plans(["mkdir"], 0, 1, "unused")
