"""
Normalized cancellation cause codes (taxonomy).

Defines the `ErrorCode` enumeration recorded on a context when it becomes
done. Values are lowercase snake_case and are considered a stable public
contract for logging.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated reasons a cancellation context became done."""

    CANCELLED = "cancelled"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    INTERRUPTED = "interrupted"


__all__ = ["ErrorCode"]
