"""
In-process orchestration of a full benchmark run.

The orchestrator plays the role a cluster scheduler would: it starts one
:class:`Worker` per configured worker id, routes every emitted record through a
:class:`ShuffleTransport`, runs one :class:`OperationReducer` pass per
partition and writes the report.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from dfsbench.aggregation import OperationReducer, OperationSummary
from dfsbench.config import BenchmarkConfig
from dfsbench.report import ReportWriter
from dfsbench.storage import StorageBackend, create_backend
from dfsbench.transport import ShuffleTransport
from dfsbench.worker import Worker, WorkerResult

__all__ = ["BackendFactory", "LocalOrchestrator", "RunResult"]

logger = logging.getLogger(__name__)

BackendFactory = Callable[[int], StorageBackend]


@dataclass
class RunResult:
    """Outcome of one orchestrated run."""

    summaries: List[OperationSummary]
    workers: List[WorkerResult] = field(default_factory=list)
    report_path: Optional[Path] = None
    elapsed_seconds: float = 0.0

    @property
    def total_operations(self) -> int:
        return sum(worker.completed for worker in self.workers)

    @property
    def failed_operations(self) -> int:
        return sum(worker.failed for worker in self.workers)

    def summary_for(self, operation: str) -> Optional[OperationSummary]:
        for summary in self.summaries:
            if summary.operation == operation:
                return summary
        return None


class LocalOrchestrator:
    """Run every worker on a local thread pool and reduce their records."""

    def __init__(self, config: BenchmarkConfig, backend_factory: Optional[BackendFactory] = None) -> None:
        self.config = config
        self.backend_factory = backend_factory or self._default_backend

    def _default_backend(self, worker_id: int) -> StorageBackend:
        return create_backend(self.config.backend)

    def run(self) -> RunResult:
        config = self.config
        started = time.monotonic()
        transport = ShuffleTransport(config.reducers)
        logger.info(
            "Starting %s workers x %s operations (%s) on %s backend",
            config.workers,
            config.ops_per_worker,
            ",".join(config.operations),
            config.backend.value,
        )

        with ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="dfsbench-worker") as pool:
            futures = [
                pool.submit(self._run_worker, worker_id, transport) for worker_id in range(config.workers)
            ]
            workers = [future.result() for future in futures]

        summaries = self._reduce(transport)
        metadata = {
            "workers": config.workers,
            "reducers": config.reducers,
            "ops_per_worker": config.ops_per_worker,
            "operations": list(config.operations),
            "backend": config.backend.value,
            "records": transport.emitted,
        }
        report_path = ReportWriter(config.output_dir).write(summaries, metadata=metadata)

        elapsed = time.monotonic() - started
        logger.info("Run finished in %.2fs, %s records reduced into %s summaries", elapsed, transport.emitted, len(summaries))
        return RunResult(summaries=summaries, workers=workers, report_path=report_path, elapsed_seconds=elapsed)

    def _run_worker(self, worker_id: int, transport: ShuffleTransport) -> WorkerResult:
        try:
            backend = self.backend_factory(worker_id)
        except Exception:
            logger.error("Worker %s could not obtain a storage backend", worker_id, exc_info=True)
            raise

        try:
            worker = Worker(self.config.worker_settings(worker_id), backend, transport)
            return worker.run()
        except Exception:
            logger.error("Worker %s failed", worker_id, exc_info=True)
            raise
        finally:
            backend.close()

    def _reduce(self, transport: ShuffleTransport) -> List[OperationSummary]:
        reducer = OperationReducer()
        summaries: List[OperationSummary] = []
        for partition in range(transport.num_partitions):
            for key, records in transport.groups(partition):
                summary = reducer.reduce(key, records)
                if summary is not None:
                    summaries.append(summary)
        return sorted(summaries, key=lambda summary: summary.operation)
