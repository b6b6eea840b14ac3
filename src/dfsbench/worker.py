"""
Worker loop driving one independent run of operations.

A worker picks operation ``i`` as ``operations[i % len(operations)]``, runs it
through its own :class:`OperationExecutor` (inline or on the executor pool),
and emits every resulting record to its sink keyed by operation type.
"""

from __future__ import annotations

import logging
from concurrent.futures import as_completed
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Sequence, Tuple

from dfsbench.constants import (
    DEFAULT_FILE_SIZE_MB,
    DEFAULT_POOL_SIZE,
    ERROR,
    PROGRESS_EVERY,
    SKIPPED,
)
from dfsbench.metrics import MetricRecord, merge
from dfsbench.operations import (
    MissingFilePolicy,
    OperationCatalog,
    OperationExecutor,
    PayloadGenerator,
)
from dfsbench.progress import HeartbeatThread, LoggingProgressReporter, ProgressReporter
from dfsbench.storage.base import StorageBackend
from dfsbench.transport import RecordSink

__all__ = [
    "Worker",
    "WorkerResult",
    "WorkerSettings",
    "operation_sequence",
    "select_operation",
]

logger = logging.getLogger(__name__)


def select_operation(operations: Sequence[str], index: int) -> str:
    """Return the operation scheduled at ``index`` (round-robin)."""
    if not operations:
        raise ValueError("At least one operation is required")
    return operations[index % len(operations)]


def operation_sequence(operations: Sequence[str], count: int) -> Iterator[Tuple[int, str]]:
    """Yield ``(index, operation)`` for the first ``count`` scheduled operations."""
    for index in range(count):
        yield index, select_operation(operations, index)


@dataclass(frozen=True)
class WorkerSettings:
    """Configuration one worker runs with."""

    worker_id: int
    operations: Tuple[str, ...]
    ops_per_worker: int
    base_dir: str
    file_size_mb: int = DEFAULT_FILE_SIZE_MB
    pool_size: int = DEFAULT_POOL_SIZE
    async_mode: bool = True
    missing_file_policy: MissingFilePolicy = MissingFilePolicy.ERROR
    seed: Optional[int] = None
    heartbeat_interval: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "operations", tuple(self.operations))
        if not self.operations:
            raise ValueError("operations must not be empty")
        if self.ops_per_worker < 0:
            raise ValueError("ops_per_worker must not be negative")
        if self.pool_size < 1:
            raise ValueError("pool_size must be a positive integer")
        if self.heartbeat_interval < 0:
            raise ValueError("heartbeat_interval must not be negative")


@dataclass
class WorkerResult:
    """Counters and merged per-key tallies of one finished worker."""

    worker_id: int
    completed: int = 0
    failed: int = 0
    skipped: int = 0
    tallies: Dict[str, MetricRecord] = field(default_factory=dict)

    @property
    def succeeded(self) -> int:
        return self.completed - self.failed - self.skipped

    def add(self, record: MetricRecord) -> None:
        self.completed += 1
        if record.measurement_type == ERROR:
            self.failed += 1
        elif record.measurement_type == SKIPPED:
            self.skipped += 1

        key = record.to_key_string()
        current = self.tallies.get(key)
        self.tallies[key] = record if current is None else merge(current, record)


class Worker:
    """Run the configured operation sequence against one backend."""

    def __init__(
        self,
        settings: WorkerSettings,
        backend: StorageBackend,
        sink: RecordSink,
        reporter: Optional[ProgressReporter] = None,
        catalog: Optional[OperationCatalog] = None,
    ) -> None:
        self.settings = settings
        self.backend = backend
        self.sink = sink
        self.reporter = reporter or LoggingProgressReporter(name=f"worker-{settings.worker_id}")
        self.catalog = catalog

    def build_executor(self) -> OperationExecutor:
        seed = None if self.settings.seed is None else self.settings.seed + self.settings.worker_id
        return OperationExecutor(
            self.backend,
            self.settings.base_dir,
            self.settings.worker_id,
            self.settings.file_size_mb,
            self.settings.pool_size,
            catalog=self.catalog,
            payloads=PayloadGenerator(seed),
            missing_file_policy=self.settings.missing_file_policy,
        )

    def _log_and_set_status(self, message: str) -> None:
        self.reporter.set_status(message)

    def run(self) -> WorkerResult:
        """Execute every scheduled operation and return the worker's counters."""
        settings = self.settings
        result = WorkerResult(worker_id=settings.worker_id)
        self._log_and_set_status(
            f"Running worker {settings.worker_id} for {settings.ops_per_worker} operations "
            f"({'async' if settings.async_mode else 'sync'}, ops={','.join(settings.operations)})"
        )

        heartbeat: Optional[HeartbeatThread] = None
        if settings.heartbeat_interval > 0:
            heartbeat = HeartbeatThread(self.reporter, settings.heartbeat_interval)
            heartbeat.start()

        try:
            with self.build_executor() as executor:
                if settings.async_mode:
                    self._run_async(executor, result)
                else:
                    self._run_sync(executor, result)
        finally:
            if heartbeat is not None:
                heartbeat.stop_running()

        summary = f"Completed {result.succeeded} operations successfully, {result.failed} failed"
        if result.skipped:
            summary += f", {result.skipped} skipped"
        self._log_and_set_status(summary)
        for key, tally in sorted(result.tallies.items()):
            logger.debug("Worker %s tally %s: %s ms over %s ops", settings.worker_id, key, tally.value, tally.count)
        return result

    def _run_sync(self, executor: OperationExecutor, result: WorkerResult) -> None:
        for index, op_type in operation_sequence(self.settings.operations, self.settings.ops_per_worker):
            self._deliver(executor.execute(op_type, index), result)

    def _run_async(self, executor: OperationExecutor, result: WorkerResult) -> None:
        futures = [
            executor.execute_async(op_type, index)
            for index, op_type in operation_sequence(self.settings.operations, self.settings.ops_per_worker)
        ]
        for future in as_completed(futures):
            self._deliver(future.result(), result)

    def _deliver(self, record: MetricRecord, result: WorkerResult) -> None:
        self.sink.emit(record.operation_type, record)
        result.add(record)
        if result.completed % PROGRESS_EVERY == 0:
            self._log_and_set_status(f"Completed {result.completed} operations")
