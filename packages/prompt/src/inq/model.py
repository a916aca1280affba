"""Prompt status and per-attempt outcome types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from inq.errors import FilterError, ValidationFailure


class PromptStatus(Enum):
    """Lifecycle state of one prompt. ANSWERED is terminal."""

    PENDING = "pending"
    ANSWERED = "answered"


class Phase(Enum):
    """Pipeline phase that produced an outcome."""

    FILTER = "filter"
    VALIDATE = "validate"


@dataclass(frozen=True)
class Outcome:
    """Result of running filter then validate on one attempt.

    ``value`` is the filtered value, or None when the filter itself failed.
    ``error`` is the validator's non-True result or the raised exception.
    """

    valid: bool
    value: Any = None
    error: Any = None
    phase: Phase = Phase.VALIDATE

    @classmethod
    def accepted(cls, value: Any) -> Outcome:
        return cls(valid=True, value=value)

    @classmethod
    def rejected(cls, error: Any, value: Any = None, phase: Phase = Phase.VALIDATE) -> Outcome:
        return cls(valid=False, value=value, error=error, phase=phase)

    def as_exception(self) -> FilterError | ValidationFailure | None:
        """Wrap the error of an invalid outcome in the matching error type."""
        if self.valid:
            return None
        if self.phase is Phase.FILTER and isinstance(self.error, BaseException):
            return FilterError(self.error)
        return ValidationFailure(self.error, self.value)
