"""
Storage Backend Interface

This module defines the POSIX-like contract the operation handlers drive.
Implementations raise ``FileNotFoundError`` for missing paths (``delete`` and
``exists`` excepted) and may raise any ``OSError`` subclass for other
failures; the executor converts those into error records.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import BinaryIO, List

__all__ = ["FileStatus", "StorageBackend"]


@dataclass(frozen=True)
class FileStatus:
    """Snapshot of one path's metadata."""

    path: str
    length: int
    is_dir: bool
    permission: int
    modification_time: float
    is_symlink: bool = False


class StorageBackend(abc.ABC):
    """Abstract interface for hierarchical storage services under test."""

    name = "abstract"

    @abc.abstractmethod
    def create(self, path: str, overwrite: bool = True) -> BinaryIO:
        """Create ``path`` (and missing parents) and return a writable stream."""

    @abc.abstractmethod
    def open(self, path: str) -> BinaryIO:
        """Open an existing file for reading."""

    @abc.abstractmethod
    def append(self, path: str) -> BinaryIO:
        """Open an existing file for appending."""

    @abc.abstractmethod
    def truncate(self, path: str, length: int) -> None:
        """Truncate an existing file to ``length`` bytes."""

    @abc.abstractmethod
    def delete(self, path: str, recursive: bool = False) -> bool:
        """Delete ``path``; return ``False`` when it did not exist."""

    @abc.abstractmethod
    def rename(self, src: str, dst: str) -> None:
        """Rename ``src`` to ``dst``."""

    @abc.abstractmethod
    def mkdirs(self, path: str) -> bool:
        """Create ``path`` with all parents; return ``True`` when it exists afterwards."""

    @abc.abstractmethod
    def exists(self, path: str) -> bool:
        """Return ``True`` if ``path`` exists."""

    @abc.abstractmethod
    def get_status(self, path: str) -> FileStatus:
        """Return the status of ``path``."""

    @abc.abstractmethod
    def set_permission(self, path: str, mode: int) -> None:
        """Set POSIX permission bits on ``path``."""

    @abc.abstractmethod
    def create_symlink(self, target: str, link: str) -> None:
        """Create ``link`` pointing at ``target``."""

    @abc.abstractmethod
    def list_status(self, path: str) -> List[FileStatus]:
        """Return the status of every direct child of directory ``path``."""

    def close(self) -> None:
        """Release backend resources. The default implementation holds none."""
