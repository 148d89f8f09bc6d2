"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `crux_interrupt.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .cancelled_error import CancelledError, DeadlineExceededError, error_for

__all__ = ["ErrorCode", "CancelledError", "DeadlineExceededError", "error_for"]
