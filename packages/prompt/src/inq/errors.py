from __future__ import annotations

from typing import Any


class InqError(Exception):
    """Base class for errors raised by the prompt core."""


class ConfigurationError(InqError, ValueError):
    def __init__(self, message: str, *, param: str | None = None) -> None:
        self.param = param
        super().__init__(message)


class FilterError(InqError):
    """A filter function failed for one attempt. Recoverable."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(str(cause) or type(cause).__name__)


class ValidationFailure(InqError):
    """A validator rejected one attempt. Recoverable."""

    def __init__(self, reason: Any, value: Any = None) -> None:
        self.reason = reason
        self.value = value
        super().__init__(_reason_text(reason))


def _reason_text(reason: Any) -> str:
    if isinstance(reason, BaseException):
        return str(reason) or type(reason).__name__
    if reason is False or reason is None:
        return "Invalid input"
    return str(reason)


def describe_error(error: Any) -> str:
    """Return the text shown to the user for an invalid outcome's error."""
    if isinstance(error, (FilterError, ValidationFailure)):
        return str(error)
    return _reason_text(error)


__all__ = [
    "InqError",
    "ConfigurationError",
    "FilterError",
    "ValidationFailure",
    "describe_error",
]
