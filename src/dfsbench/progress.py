"""
Progress reporting for long-running workers.

External monitors consider a worker alive while it keeps reporting. Workers
set a status line at start, every ``PROGRESS_EVERY`` completed operations and
at completion; a :class:`HeartbeatThread` additionally pings the reporter on a
fixed interval so slow operations do not look like a hang.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Protocol, runtime_checkable

__all__ = ["HeartbeatThread", "LoggingProgressReporter", "ProgressReporter"]

logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressReporter(Protocol):
    """Receiver of worker status lines and liveness pings."""

    def set_status(self, message: str) -> None: ...

    def progress(self) -> None: ...


class LoggingProgressReporter:
    """Reporter that logs status lines and remembers the latest one."""

    def __init__(self, name: str = "worker", keep_history: bool = False) -> None:
        self.name = name
        self.status: Optional[str] = None
        self.heartbeats = 0
        self.history: List[str] = []
        self._keep_history = keep_history
        self._lock = threading.Lock()

    def set_status(self, message: str) -> None:
        with self._lock:
            self.status = message
            if self._keep_history:
                self.history.append(message)
        logger.info("[%s] %s", self.name, message)

    def progress(self) -> None:
        with self._lock:
            self.heartbeats += 1
        logger.debug("[%s] heartbeat %s", self.name, self.heartbeats)


class HeartbeatThread(threading.Thread):
    """Daemon thread calling ``reporter.progress()`` every ``interval`` seconds."""

    def __init__(self, reporter: ProgressReporter, interval: float) -> None:
        super().__init__(name="dfsbench-heartbeat", daemon=True)
        if interval <= 0:
            raise ValueError("Heartbeat interval must be positive")
        self.reporter = reporter
        self.interval = interval
        self._stop_event = threading.Event()

    def run(self) -> None:
        while not self._stop_event.wait(self.interval):
            try:
                self.reporter.progress()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Heartbeat failed: %s", exc)

    def stop_running(self, timeout: Optional[float] = None) -> None:
        """Stop the thread and wait for it to exit."""
        self._stop_event.set()
        if self.is_alive():
            self.join(timeout)
