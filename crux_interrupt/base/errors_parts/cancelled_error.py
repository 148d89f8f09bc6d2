"""Cancellation error types.

``CancelledError`` is raised by operations that observe a done context via
``Context.raise_if_cancelled``. Deadline-caused cancellation raises the
``DeadlineExceededError`` subclass so callers can tell timeouts apart.
"""

from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode


class CancelledError(RuntimeError):
    """Raised when an operation observes cooperative cancellation.

    Attributes:
        code: Normalized :class:`ErrorCode` describing why the context ended.
        reason: Free-form reason supplied at cancel time, if any.
    """

    def __init__(self, reason: Optional[str] = None, code: ErrorCode = ErrorCode.CANCELLED) -> None:
        super().__init__(reason or "context cancelled")
        self.code = code
        self.reason = reason


class DeadlineExceededError(CancelledError):
    """Raised when a context ended because its deadline elapsed."""

    def __init__(self, reason: Optional[str] = None) -> None:
        super().__init__(reason or "context deadline exceeded", ErrorCode.DEADLINE_EXCEEDED)


def error_for(code: ErrorCode, reason: Optional[str]) -> CancelledError:
    """Build the exception matching a done context's ``code``."""
    if code is ErrorCode.DEADLINE_EXCEEDED:
        return DeadlineExceededError(reason)
    return CancelledError(reason, code)


__all__ = ["CancelledError", "DeadlineExceededError", "error_for"]
