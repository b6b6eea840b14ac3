"""Storage backends driven by the benchmark operations."""

from .base import FileStatus, StorageBackend
from .factory import BackendType, create_backend
from .local import LocalStorageBackend
from .memory import InMemoryStorageBackend

__all__ = [
    "BackendType",
    "FileStatus",
    "InMemoryStorageBackend",
    "LocalStorageBackend",
    "StorageBackend",
    "create_backend",
]
