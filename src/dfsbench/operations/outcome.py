"""Result type returned by operation handlers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

__all__ = ["Outcome", "OutcomeStatus"]


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Outcome:
    """What happened during one operation attempt.

    Handlers only build ``succeeded`` and ``skipped`` outcomes; the executor
    builds ``failed`` ones from the exceptions handlers let propagate.
    """

    status: OutcomeStatus
    detail: Optional[str] = None
    error: Optional[BaseException] = None

    @classmethod
    def succeeded(cls, detail: Optional[str] = None) -> "Outcome":
        return cls(OutcomeStatus.SUCCEEDED, detail)

    @classmethod
    def skipped(cls, detail: str) -> "Outcome":
        return cls(OutcomeStatus.SKIPPED, detail)

    @classmethod
    def failed(cls, error: BaseException) -> "Outcome":
        return cls(OutcomeStatus.FAILED, str(error), error)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED
