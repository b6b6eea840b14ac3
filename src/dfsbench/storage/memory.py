"""
In-Memory Storage Backend

A dictionary-backed directory tree with POSIX-like semantics. It is used for
dry runs of the harness and by the test suite; it keeps no data across
instances.
"""

from __future__ import annotations

import errno
import io
import logging
import posixpath
import threading
import time
from typing import BinaryIO, Dict, List, Set

from .base import FileStatus, StorageBackend

__all__ = ["InMemoryStorageBackend"]

logger = logging.getLogger(__name__)

_DIR_PERMISSION = 0o755
_FILE_PERMISSION = 0o644


class _MemoryWriteStream(io.BytesIO):
    """Writable stream that commits its buffer to the backend on flush and close."""

    def __init__(self, backend: "InMemoryStorageBackend", path: str, initial: bytes = b"") -> None:
        super().__init__()
        self._backend = backend
        self._path = path
        self.write(initial)

    def flush(self) -> None:
        super().flush()
        if not self.closed:
            self._backend._commit(self._path, self.getvalue())

    def close(self) -> None:
        if not self.closed:
            self._backend._commit(self._path, self.getvalue())
        super().close()


class InMemoryStorageBackend(StorageBackend):
    """Thread-safe in-memory implementation of :class:`StorageBackend`."""

    name = "memory"

    def __init__(self) -> None:
        self._files: Dict[str, bytes] = {}
        self._dirs: Set[str] = {"/"}
        self._links: Dict[str, str] = {}
        self._permissions: Dict[str, int] = {"/": _DIR_PERMISSION}
        self._mtimes: Dict[str, float] = {"/": time.time()}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _norm(path: str) -> str:
        normalized = posixpath.normpath("/" + str(path).lstrip("/"))
        return "/" if normalized == "//" else normalized

    def _touch(self, path: str, permission: int) -> None:
        self._permissions.setdefault(path, permission)
        self._mtimes[path] = time.time()

    def _make_dirs(self, path: str) -> None:
        current = path
        pending = []
        while current not in self._dirs:
            if current in self._files or current in self._links:
                raise FileExistsError(errno.EEXIST, "Path exists and is not a directory", current)
            pending.append(current)
            current = posixpath.dirname(current)
        for directory in reversed(pending):
            self._dirs.add(directory)
            self._touch(directory, _DIR_PERMISSION)

    def _commit(self, path: str, data: bytes) -> None:
        with self._lock:
            self._files[path] = bytes(data)
            self._touch(path, _FILE_PERMISSION)

    def _require(self, path: str) -> str:
        if path not in self._files and path not in self._dirs and path not in self._links:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        return path

    def _require_file(self, path: str) -> str:
        self._require(path)
        if path in self._dirs:
            raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
        if path in self._links:
            return self._require_file(self._norm(self._links[path]))
        return path

    def _subtree(self, path: str) -> List[str]:
        prefix = path.rstrip("/") + "/"
        keys = list(self._files) + list(self._dirs) + list(self._links)
        return [key for key in keys if key.startswith(prefix)]

    def _status(self, path: str) -> FileStatus:
        is_link = path in self._links
        return FileStatus(
            path=path,
            length=len(self._files.get(path, b"")),
            is_dir=path in self._dirs,
            permission=self._permissions.get(path, _FILE_PERMISSION),
            modification_time=self._mtimes.get(path, 0.0),
            is_symlink=is_link,
        )

    # ------------------------------------------------------------------
    # StorageBackend API
    # ------------------------------------------------------------------

    def create(self, path: str, overwrite: bool = True) -> BinaryIO:
        path = self._norm(path)
        with self._lock:
            if path in self._dirs:
                raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
            if path in self._files and not overwrite:
                raise FileExistsError(errno.EEXIST, "File exists", path)
            self._make_dirs(posixpath.dirname(path))
            self._commit(path, b"")
        return _MemoryWriteStream(self, path)

    def open(self, path: str) -> BinaryIO:
        with self._lock:
            resolved = self._require_file(self._norm(path))
            return io.BytesIO(self._files[resolved])

    def append(self, path: str) -> BinaryIO:
        with self._lock:
            resolved = self._require_file(self._norm(path))
            return _MemoryWriteStream(self, resolved, self._files[resolved])

    def truncate(self, path: str, length: int) -> None:
        if length < 0:
            raise ValueError("truncate length must be non-negative")
        with self._lock:
            resolved = self._require_file(self._norm(path))
            data = self._files[resolved]
            self._commit(resolved, data[:length].ljust(length, b"\x00"))

    def delete(self, path: str, recursive: bool = False) -> bool:
        path = self._norm(path)
        with self._lock:
            if path not in self._files and path not in self._dirs and path not in self._links:
                return False
            if path in self._dirs:
                children = self._subtree(path)
                if children and not recursive:
                    raise OSError(errno.ENOTEMPTY, "Directory not empty", path)
                for child in children:
                    self._drop(child)
            self._drop(path)
            return True

    def _drop(self, path: str) -> None:
        self._files.pop(path, None)
        self._dirs.discard(path)
        self._links.pop(path, None)
        self._permissions.pop(path, None)
        self._mtimes.pop(path, None)

    def rename(self, src: str, dst: str) -> None:
        src, dst = self._norm(src), self._norm(dst)
        with self._lock:
            self._require(src)
            if dst in self._dirs:
                raise IsADirectoryError(errno.EISDIR, "Is a directory", dst)
            self._make_dirs(posixpath.dirname(dst))
            moved = [src] + (self._subtree(src) if src in self._dirs else [])
            for old in moved:
                new = dst + old[len(src):]
                if old in self._files:
                    self._files[new] = self._files.pop(old)
                if old in self._dirs:
                    self._dirs.discard(old)
                    self._dirs.add(new)
                if old in self._links:
                    self._links[new] = self._links.pop(old)
                self._permissions[new] = self._permissions.pop(old, _FILE_PERMISSION)
                self._mtimes[new] = time.time()
                self._mtimes.pop(old, None)

    def mkdirs(self, path: str) -> bool:
        with self._lock:
            self._make_dirs(self._norm(path))
            return True

    def exists(self, path: str) -> bool:
        path = self._norm(path)
        with self._lock:
            return path in self._files or path in self._dirs or path in self._links

    def get_status(self, path: str) -> FileStatus:
        with self._lock:
            return self._status(self._require(self._norm(path)))

    def set_permission(self, path: str, mode: int) -> None:
        with self._lock:
            resolved = self._require(self._norm(path))
            self._permissions[resolved] = mode & 0o7777

    def create_symlink(self, target: str, link: str) -> None:
        link = self._norm(link)
        with self._lock:
            if posixpath.dirname(link) not in self._dirs:
                raise FileNotFoundError(errno.ENOENT, "Parent directory does not exist", link)
            if self.exists(link):
                raise FileExistsError(errno.EEXIST, "File exists", link)
            self._links[link] = self._norm(target)
            self._touch(link, 0o777)

    def list_status(self, path: str) -> List[FileStatus]:
        path = self._norm(path)
        with self._lock:
            self._require(path)
            if path not in self._dirs:
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
            children = [
                key for key in self._subtree(path)
                if posixpath.dirname(key) == path
            ]
            return [self._status(child) for child in sorted(children)]
