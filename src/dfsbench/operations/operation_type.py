"""Enumeration of the built-in storage operation types."""

from __future__ import annotations

from enum import Enum
from typing import Optional

__all__ = ["OperationType"]


class OperationType(str, Enum):
    """Named classes of storage action a worker can issue."""

    MKDIR = "mkdir"
    WRITE = "write"
    READ = "read"
    DELETE_FILE = "delete_file"
    DELETE_DIR = "delete_dir"
    LIST = "list"
    RENAME = "rename"
    GET_FILE_STATUS = "get_file_status"
    EXISTS = "exists"
    SET_PERMISSION = "set_permission"
    APPEND = "append"
    CREATE_SYMLINK = "create_symlink"
    APPEND_TRUNCATE = "append_truncate"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def lookup(cls, tag: str) -> Optional["OperationType"]:
        """Return the operation type named by ``tag`` or ``None``."""
        normalized = str(tag).strip().lower()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError:
            return None


_ALIASES = {
    "ls": OperationType.LIST.value,
}
