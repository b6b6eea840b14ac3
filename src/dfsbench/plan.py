"""Operation plans: the schedule a worker would run, written without touching storage."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, Union

from dfsbench.constants import PROGRESS_EVERY
from dfsbench.progress import LoggingProgressReporter, ProgressReporter
from dfsbench.worker import operation_sequence

__all__ = ["PlanGenerator", "plan_file_name", "write_plans"]

logger = logging.getLogger(__name__)


def plan_file_name(worker_id: int) -> str:
    return f"plan-{worker_id}.txt"


def _random_key() -> str:
    return str(uuid.uuid4())


class PlanGenerator:
    """Produce ``op:<key>`` entries in the worker's round-robin order."""

    def __init__(
        self,
        operations: Sequence[str],
        ops_per_worker: int,
        reporter: Optional[ProgressReporter] = None,
        key_factory: Callable[[], str] = _random_key,
    ) -> None:
        if not operations:
            raise ValueError("At least one operation is required")
        if ops_per_worker < 0:
            raise ValueError("ops_per_worker must not be negative")
        self.operations = tuple(operations)
        self.ops_per_worker = ops_per_worker
        self.reporter = reporter or LoggingProgressReporter(name="plan")
        self.key_factory = key_factory

    def generate(self, worker_id: int) -> Iterator[str]:
        self.reporter.set_status(f"Running operation generator for worker {worker_id}")
        generated = 0
        for _, op_type in operation_sequence(self.operations, self.ops_per_worker):
            yield f"{op_type}:{self.key_factory()}"
            generated += 1
            if generated % PROGRESS_EVERY == 0:
                self.reporter.set_status(f"Generated {generated} operation entries")
        self.reporter.set_status(f"Completed generating {generated} operation entries")


def write_plans(
    operations: Sequence[str],
    workers: int,
    ops_per_worker: int,
    output_dir: Union[str, Path],
    generator: Optional[PlanGenerator] = None,
) -> List[Path]:
    """Write one ``plan-<worker>.txt`` per worker and return their paths."""
    if workers < 1:
        raise ValueError("workers must be a positive integer")
    generator = generator or PlanGenerator(operations, ops_per_worker)
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    paths: List[Path] = []
    for worker_id in range(workers):
        path = directory / plan_file_name(worker_id)
        with open(path, "w", encoding="utf-8") as handle:
            for entry in generator.generate(worker_id):
                handle.write(entry + "\n")
        paths.append(path)
    logger.info("Wrote %s plan files to %s", len(paths), directory)
    return paths
