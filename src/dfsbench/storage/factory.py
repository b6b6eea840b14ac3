"""
Storage Backend Factory

Maps a backend type name from configuration to a backend instance. Each
worker asks the factory for its own instance so workers share no handles.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from dfsbench.exceptions import ConfigurationError

from .base import StorageBackend
from .local import LocalStorageBackend
from .memory import InMemoryStorageBackend

__all__ = ["BackendType", "create_backend"]

logger = logging.getLogger(__name__)


class BackendType(str, Enum):
    """Supported storage backend types."""

    LOCAL = "local"  # Local POSIX filesystem
    MEMORY = "memory"  # In-memory tree (non-persistent)


def create_backend(kind: BackendType | str, **options: Any) -> StorageBackend:
    """Instantiate the backend registered for ``kind``."""
    try:
        backend_type = BackendType(str(getattr(kind, "value", kind)).strip().lower())
    except ValueError:
        raise ConfigurationError(
            f"Unsupported storage backend: {kind!r}",
            context={"supported": [member.value for member in BackendType]},
        ) from None

    if backend_type is BackendType.LOCAL:
        backend: StorageBackend = LocalStorageBackend(root=options.get("root"))
    else:
        backend = InMemoryStorageBackend()

    logger.debug("Created %s storage backend", backend_type.value)
    return backend
