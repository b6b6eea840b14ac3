"""Tests for progress reporting and the heartbeat thread."""

from __future__ import annotations

import threading

import pytest

from dfsbench.progress import HeartbeatThread, LoggingProgressReporter, ProgressReporter


def test_logging_reporter_satisfies_protocol() -> None:
    assert isinstance(LoggingProgressReporter(), ProgressReporter)


def test_reporter_keeps_latest_status_and_history() -> None:
    reporter = LoggingProgressReporter(keep_history=True)
    reporter.set_status("one")
    reporter.set_status("two")

    assert reporter.status == "two"
    assert reporter.history == ["one", "two"]


def test_heartbeat_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        HeartbeatThread(LoggingProgressReporter(), 0)


def test_heartbeat_pings_until_stopped() -> None:
    pinged = threading.Event()

    class Reporter:
        def set_status(self, message: str) -> None:
            pass

        def progress(self) -> None:
            pinged.set()

    thread = HeartbeatThread(Reporter(), 0.01)
    thread.start()
    assert pinged.wait(2)
    thread.stop_running(timeout=2)
    assert not thread.is_alive()


def test_failing_ping_does_not_stop_heartbeat() -> None:
    calls = []

    class Flaky:
        def set_status(self, message: str) -> None:
            pass

        def progress(self) -> None:
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("monitor unavailable")

    thread = HeartbeatThread(Flaky(), 0.01)
    thread.start()
    deadline = threading.Event()
    for _ in range(200):
        if len(calls) >= 2:
            break
        deadline.wait(0.01)
    thread.stop_running(timeout=2)
    assert len(calls) >= 2
