"""
Timed operation executor.

``OperationExecutor`` is the single place where handler outcomes and handler
exceptions become :class:`MetricRecord` instances. It never raises out of
``execute``: unknown operations produce an error record carrying ``-1`` and
backend failures produce an error record carrying the elapsed milliseconds.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from dfsbench.constants import (
    DEFAULT_POOL_SIZE,
    DURATION,
    ERROR,
    SKIPPED,
    UNKNOWN_OPERATION_SENTINEL,
)
from dfsbench.exceptions import OperationIOFailure, UnknownOperationError
from dfsbench.metrics import DataType, MetricRecord
from dfsbench.storage.base import StorageBackend

from .catalog import OperationCatalog, default_catalog
from .context import MissingFilePolicy, OperationContext, PayloadGenerator
from .outcome import Outcome, OutcomeStatus

__all__ = ["OperationExecutor"]

logger = logging.getLogger(__name__)

_MEASUREMENTS = {
    OutcomeStatus.SUCCEEDED: DURATION,
    OutcomeStatus.FAILED: ERROR,
    OutcomeStatus.SKIPPED: SKIPPED,
}


def _elapsed_ms(started: float) -> int:
    return max(0, int((time.perf_counter() - started) * 1000))


class OperationExecutor:
    """Run catalogued operations against one backend for one task."""

    def __init__(
        self,
        backend: StorageBackend,
        base_dir: str,
        task_id: int,
        file_size_mb: int,
        pool_size: int = DEFAULT_POOL_SIZE,
        *,
        catalog: Optional[OperationCatalog] = None,
        payloads: Optional[PayloadGenerator] = None,
        missing_file_policy: MissingFilePolicy = MissingFilePolicy.ERROR,
    ) -> None:
        """Initialise the executor.

        Args:
            backend: Storage backend the handlers drive.
            base_dir: Root of this run's path namespace.
            task_id: Worker identity; part of every path.
            file_size_mb: Size of files created by ``write``.
            pool_size: Maximum number of concurrent asynchronous operations.
            catalog: Handler registry, defaults to the built-in catalog.
            payloads: Random payload source, one per worker.
            missing_file_policy: Treatment of never-written source files.
        """
        if pool_size < 1:
            raise ValueError("pool_size must be a positive integer")

        self.catalog = catalog or default_catalog()
        self.context = OperationContext(
            backend=backend,
            base_dir=base_dir,
            task_id=task_id,
            file_size_mb=file_size_mb,
            payloads=payloads or PayloadGenerator(),
            missing_file_policy=missing_file_policy,
        )
        self.pool_size = pool_size
        self._pool: Optional[ThreadPoolExecutor] = None
        self._pool_lock = threading.Lock()
        self._closed = False

    @property
    def task_id(self) -> int:
        return self.context.task_id

    @property
    def is_shutdown(self) -> bool:
        return self._closed

    def execute(self, op_type: str, index: int) -> MetricRecord:
        """Run one operation and return its metric record. Never raises."""
        started = time.perf_counter()
        operation = self.catalog.resolve(op_type)
        if operation is None:
            logger.error("%s", UnknownOperationError(op_type).message)
            return MetricRecord(DataType.LONG, op_type, ERROR, UNKNOWN_OPERATION_SENTINEL)

        handler = self.catalog.get(operation.value)
        try:
            outcome = handler(self.context, index)
        except Exception as exc:  # noqa: BLE001
            failure = OperationIOFailure(operation.value, index, exc)
            logger.error("%s", failure.message, exc_info=exc)
            outcome = Outcome.failed(exc)

        return self._to_record(operation.value, index, outcome, _elapsed_ms(started))

    def _to_record(self, operation: str, index: int, outcome: Outcome, elapsed: int) -> MetricRecord:
        if outcome.status is OutcomeStatus.SKIPPED:
            logger.debug("Skipped %s at index %s: %s", operation, index, outcome.detail)
        elif outcome.detail:
            logger.debug("%s at index %s: %s", operation, index, outcome.detail)
        return MetricRecord(DataType.LONG, operation, _MEASUREMENTS[outcome.status], elapsed)

    def execute_async(self, op_type: str, index: int) -> "Future[MetricRecord]":
        """Schedule :meth:`execute` on the executor's bounded thread pool.

        Raises:
            RuntimeError: If the executor has been shut down.
        """
        return self._ensure_pool().submit(self.execute, op_type, index)

    def _ensure_pool(self) -> ThreadPoolExecutor:
        with self._pool_lock:
            if self._closed:
                raise RuntimeError("Executor has been shut down")
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self.pool_size,
                    thread_name_prefix=f"dfsbench-task{self.task_id}",
                )
            return self._pool

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """Release the thread pool. Safe to call repeatedly and concurrently."""
        with self._pool_lock:
            if self._closed:
                return
            self._closed = True
            pool, self._pool = self._pool, None

        if pool is not None:
            pool.shutdown(wait=wait, cancel_futures=cancel_pending)
            logger.debug("Shut down operation pool for task %s", self.task_id)

    def __enter__(self) -> "OperationExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True, cancel_pending=exc_type is not None)
