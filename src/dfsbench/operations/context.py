"""Per-executor state shared by every operation handler."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from dfsbench.constants import MEGABYTE
from dfsbench.storage.base import StorageBackend

__all__ = ["MissingFilePolicy", "OperationContext", "PayloadGenerator"]


class MissingFilePolicy(str, Enum):
    """How operations treat a source file that was never written."""

    ERROR = "error"  # let the backend raise; recorded as an error
    SKIP = "skip"  # check first; recorded as skipped


class PayloadGenerator:
    """Random payload source owned by a single worker."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._random = random.Random(seed)

    def generate(self, size: int) -> bytes:
        """Return ``size`` random bytes."""
        if size <= 0:
            return b""
        return self._random.randbytes(size)

    def chunks(self, total: int, chunk_size: int = MEGABYTE):
        """Yield random chunks adding up to ``total`` bytes."""
        remaining = total
        while remaining > 0:
            size = min(chunk_size, remaining)
            yield self.generate(size)
            remaining -= size


@dataclass
class OperationContext:
    """Everything a handler needs besides the operation index."""

    backend: StorageBackend
    base_dir: str
    task_id: int
    file_size_mb: int
    payloads: PayloadGenerator = field(default_factory=PayloadGenerator)
    missing_file_policy: MissingFilePolicy = MissingFilePolicy.ERROR

    def build_path(self, namespace: str, suffix: str = "") -> str:
        """Return ``<base_dir>/<namespace>/<task_id>/<suffix>``."""
        return f"{self.base_dir.rstrip('/')}/{namespace}/{self.task_id}/{suffix}"

    def namespace_dir(self, namespace: str) -> str:
        return f"{self.base_dir.rstrip('/')}/{namespace}/{self.task_id}"

    def data_file(self, index: int) -> str:
        """Path of the file the ``write`` operation creates for ``index``."""
        return self.build_path("write", f"file_{index}")

    def link_dir(self) -> str:
        return f"{self.base_dir.rstrip('/')}/link_{self.task_id}"
