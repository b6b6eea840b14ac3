"""Storage backend writing to the local POSIX filesystem."""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import BinaryIO, List, Optional

from .base import FileStatus, StorageBackend

__all__ = ["LocalStorageBackend"]

logger = logging.getLogger(__name__)


class LocalStorageBackend(StorageBackend):
    """Drive a directory tree on the local filesystem.

    When ``root`` is given, every benchmark path is resolved beneath it, so a
    base directory such as ``/bench`` lands in ``<root>/bench``.
    """

    name = "local"

    def __init__(self, root: Optional[str] = None) -> None:
        self.root = Path(root) if root else None
        logger.debug("Initialized local storage backend (root=%s)", self.root)

    def _resolve(self, path: str) -> Path:
        if self.root is None:
            return Path(path)
        return self.root / str(path).lstrip("/")

    def create(self, path: str, overwrite: bool = True) -> BinaryIO:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        return open(target, "wb" if overwrite else "xb")

    def open(self, path: str) -> BinaryIO:
        return open(self._resolve(path), "rb")

    def append(self, path: str) -> BinaryIO:
        target = self._resolve(path)
        if not target.is_file():
            raise FileNotFoundError(f"Cannot append to missing file: {path}")
        return open(target, "ab")

    def truncate(self, path: str, length: int) -> None:
        os.truncate(self._resolve(path), length)

    def delete(self, path: str, recursive: bool = False) -> bool:
        target = self._resolve(path)
        if not target.exists() and not target.is_symlink():
            return False
        if target.is_dir() and not target.is_symlink():
            if recursive:
                shutil.rmtree(target)
            else:
                target.rmdir()
        else:
            target.unlink()
        return True

    def rename(self, src: str, dst: str) -> None:
        os.rename(self._resolve(src), self._resolve(dst))

    def mkdirs(self, path: str) -> bool:
        target = self._resolve(path)
        target.mkdir(parents=True, exist_ok=True)
        return target.is_dir()

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def get_status(self, path: str) -> FileStatus:
        return self._status(self._resolve(path), path)

    def set_permission(self, path: str, mode: int) -> None:
        os.chmod(self._resolve(path), mode)

    def create_symlink(self, target: str, link: str) -> None:
        os.symlink(self._resolve(target), self._resolve(link))

    def list_status(self, path: str) -> List[FileStatus]:
        directory = self._resolve(path)
        prefix = str(path).rstrip("/")
        return [
            self._status(child, f"{prefix}/{child.name}")
            for child in sorted(directory.iterdir())
        ]

    @staticmethod
    def _status(target: Path, logical_path: str) -> FileStatus:
        info = target.lstat()
        return FileStatus(
            path=logical_path,
            length=info.st_size,
            is_dir=stat.S_ISDIR(info.st_mode),
            permission=stat.S_IMODE(info.st_mode),
            modification_time=info.st_mtime,
            is_symlink=stat.S_ISLNK(info.st_mode),
        )
