"""Tests for the round-robin worker loop."""

from __future__ import annotations

import threading
from collections import Counter

import pytest

from dfsbench.constants import DURATION
from dfsbench.operations import OperationCatalog, OperationType, Outcome
from dfsbench.progress import LoggingProgressReporter
from dfsbench.transport import ListSink
from dfsbench.worker import Worker, WorkerSettings, operation_sequence, select_operation


def _settings(**overrides) -> WorkerSettings:
    values = dict(
        worker_id=0,
        operations=("mkdir",),
        ops_per_worker=10,
        base_dir="/bench",
        file_size_mb=0,
        pool_size=2,
        async_mode=False,
    )
    values.update(overrides)
    return WorkerSettings(**values)


def test_round_robin_selection() -> None:
    assert [op for _, op in operation_sequence(["a", "b"], 5)] == ["a", "b", "a", "b", "a"]
    assert select_operation(["a", "b", "c"], 7) == "b"


def test_select_operation_requires_operations() -> None:
    with pytest.raises(ValueError):
        select_operation([], 0)


def test_settings_validation() -> None:
    with pytest.raises(ValueError):
        _settings(operations=())
    with pytest.raises(ValueError):
        _settings(pool_size=0)
    with pytest.raises(ValueError):
        _settings(ops_per_worker=-1)


def test_sync_worker_emits_one_record_per_operation(memory_backend) -> None:
    sink = ListSink()
    settings = _settings(operations=("mkdir", "write", "read"), ops_per_worker=7)
    result = Worker(settings, memory_backend, sink).run()

    assert len(sink) == 7
    assert sink.keys == ["mkdir", "write", "read", "mkdir", "write", "read", "mkdir"]
    assert result.completed == 7
    assert result.failed == 0
    assert result.succeeded == 7


def test_duplicate_operations_increase_frequency(memory_backend) -> None:
    sink = ListSink()
    Worker(_settings(operations=("mkdir", "mkdir", "exists"), ops_per_worker=9), memory_backend, sink).run()
    assert Counter(sink.keys) == {"mkdir": 6, "exists": 3}


def test_async_worker_waits_for_every_operation(memory_backend) -> None:
    sink = ListSink()
    result = Worker(_settings(ops_per_worker=50, async_mode=True, pool_size=4), memory_backend, sink).run()

    assert len(sink) == 50
    assert result.completed == 50
    assert memory_backend.exists("/bench/mkdir/0/dir_49")


def test_failures_are_counted_and_reported(memory_backend) -> None:
    reporter = LoggingProgressReporter(keep_history=True)
    sink = ListSink()
    result = Worker(_settings(operations=("read",), ops_per_worker=4), memory_backend, sink, reporter).run()

    assert result.failed == 4
    assert reporter.status == "Completed 0 operations successfully, 4 failed"


def test_progress_reported_at_start_every_hundred_and_end(memory_backend) -> None:
    reporter = LoggingProgressReporter(keep_history=True)
    Worker(_settings(operations=("exists",), ops_per_worker=250), memory_backend, ListSink(), reporter).run()

    assert reporter.history[0].startswith("Running worker 0")
    assert reporter.history[1:3] == ["Completed 100 operations", "Completed 200 operations"]
    assert reporter.history[-1] == "Completed 250 operations successfully, 0 failed"
    assert len(reporter.history) == 4


def test_unknown_operation_in_lenient_run_is_emitted_under_raw_key(memory_backend) -> None:
    sink = ListSink()
    result = Worker(_settings(operations=("mkdir", "warp"), ops_per_worker=4), memory_backend, sink).run()

    assert sink.keys.count("warp") == 2
    assert all(record.value == -1 for key, record in sink.items if key == "warp")
    assert result.failed == 2


def test_tallies_merge_records_per_key(memory_backend) -> None:
    result = Worker(_settings(operations=("mkdir", "exists"), ops_per_worker=6), memory_backend, ListSink()).run()

    assert result.tallies["LONG:mkdir*duration"].count == 3
    assert result.tallies["LONG:exists*duration"].count == 3


def test_async_executor_is_shut_down_after_run(memory_backend) -> None:
    executors = []

    class RecordingWorker(Worker):
        def build_executor(self):
            executor = super().build_executor()
            executors.append(executor)
            return executor

    RecordingWorker(_settings(async_mode=True), memory_backend, ListSink()).run()
    assert executors[0].is_shutdown


def test_custom_catalog_is_used(memory_backend) -> None:
    catalog = OperationCatalog()
    catalog.register(OperationType.MKDIR, lambda ctx, index: Outcome.succeeded())
    sink = ListSink()
    Worker(_settings(ops_per_worker=3), memory_backend, sink, catalog=catalog).run()

    assert not memory_backend.exists("/bench/mkdir")
    assert all(record.measurement_type == DURATION for record in sink.records)


def test_heartbeat_thread_pings_reporter(memory_backend) -> None:
    reporter = LoggingProgressReporter()
    release = threading.Event()

    def slow(ctx, index):
        release.wait(0.3)
        return Outcome.succeeded()

    catalog = OperationCatalog()
    catalog.register(OperationType.MKDIR, slow)
    Worker(_settings(ops_per_worker=1, heartbeat_interval=0.05), memory_backend, ListSink(), reporter, catalog).run()

    assert reporter.heartbeats >= 1
