"""Cancellation error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``crux_interrupt.base.errors_parts`` to maintain a stable import path while
enforcing the one-class-per-file governance rule.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.cancelled_error import CancelledError, DeadlineExceededError, error_for

__all__ = ["ErrorCode", "CancelledError", "DeadlineExceededError", "error_for"]
