"""Registry mapping operation types to their handlers."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from dfsbench.exceptions import UnknownOperationError

from . import handlers
from .handlers import Handler
from .operation_type import OperationType

__all__ = ["OperationCatalog", "default_catalog"]

logger = logging.getLogger(__name__)


class OperationCatalog:
    """Manage the handler registered for each :class:`OperationType`."""

    def __init__(self) -> None:
        self._handlers: Dict[OperationType, Handler] = {}

    def register(self, operation: OperationType, handler: Handler) -> None:
        """Register ``handler`` for ``operation``."""
        if operation in self._handlers:
            raise ValueError(f"Handler for operation '{operation}' already exists")
        self._handlers[operation] = handler
        logger.debug("Registered handler for '%s'", operation)

    def unregister(self, operation: OperationType) -> None:
        """Remove the handler registered for ``operation``."""
        if operation not in self._handlers:
            raise ValueError(f"Handler for operation '{operation}' does not exist")
        del self._handlers[operation]
        logger.debug("Unregistered handler for '%s'", operation)

    def resolve(self, tag: str) -> Optional[OperationType]:
        """Return the registered operation type named by ``tag`` or ``None``."""
        operation = OperationType.lookup(tag)
        if operation is None or operation not in self._handlers:
            return None
        return operation

    def get(self, tag: str) -> Handler:
        """Return the handler for ``tag``.

        Raises:
            UnknownOperationError: If no handler is registered for ``tag``.
        """
        operation = self.resolve(tag)
        if operation is None:
            raise UnknownOperationError(tag)
        return self._handlers[operation]

    def names(self) -> List[str]:
        """Return the names of every registered operation."""
        return [operation.value for operation in self._handlers]

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and self.resolve(tag) is not None

    def __len__(self) -> int:
        return len(self._handlers)


_BUILTIN_HANDLERS: Dict[OperationType, Handler] = {
    OperationType.MKDIR: handlers.mkdir,
    OperationType.WRITE: handlers.write,
    OperationType.READ: handlers.read,
    OperationType.DELETE_FILE: handlers.delete_file,
    OperationType.DELETE_DIR: handlers.delete_dir,
    OperationType.LIST: handlers.list_dir,
    OperationType.RENAME: handlers.rename,
    OperationType.GET_FILE_STATUS: handlers.get_file_status,
    OperationType.EXISTS: handlers.exists,
    OperationType.SET_PERMISSION: handlers.set_permission,
    OperationType.APPEND: handlers.append,
    OperationType.CREATE_SYMLINK: handlers.create_symlink,
    OperationType.APPEND_TRUNCATE: handlers.append_truncate,
}


def default_catalog() -> OperationCatalog:
    """Return a new catalog holding every built-in handler."""
    catalog = OperationCatalog()
    for operation, handler in _BUILTIN_HANDLERS.items():
        catalog.register(operation, handler)
    return catalog
