"""Operation catalog, handlers and the timed executor."""

from .catalog import OperationCatalog, default_catalog
from .context import MissingFilePolicy, OperationContext, PayloadGenerator
from .executor import OperationExecutor
from .operation_type import OperationType
from .outcome import Outcome, OutcomeStatus

__all__ = [
    "MissingFilePolicy",
    "OperationCatalog",
    "OperationContext",
    "OperationExecutor",
    "OperationType",
    "Outcome",
    "OutcomeStatus",
    "PayloadGenerator",
    "default_catalog",
]
