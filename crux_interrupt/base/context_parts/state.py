"""Internal state holder for cancellation contexts.

Dataclass used by ``Context`` to track the one-shot done flag together with
the reason and cause code recorded by the first cancellation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors_parts.error_code import ErrorCode


@dataclass
class State:
    """Internal state for cancellation contexts."""

    done: bool = False
    reason: Optional[str] = None
    code: Optional[ErrorCode] = None


__all__ = ["State"]
