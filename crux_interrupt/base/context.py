"""Hierarchical cancellation contexts (public API facade).

Purpose
-------
Expose the cancellation context constructs via the canonical
``crux_interrupt.base.context`` import path while the concrete
implementations live under ``context_parts`` for organization.

Notes
-----
- ``Context`` carries a one-shot done flag that cascades from parent to
  child, plus the reason and ``ErrorCode`` of the first cancellation.
- ``background()`` is the never-cancelled root; ``with_cancel``,
  ``with_deadline`` and ``with_timeout`` derive children.
- ``CancelledError`` is raised by ``Context.raise_if_cancelled``.
"""

from .context_parts.context import BackgroundContext, Context, DoneCallback, background
from .context_parts.constructors import (
    DEADLINE_REASON,
    CancelFunc,
    with_cancel,
    with_deadline,
    with_timeout,
)
from .errors_parts.cancelled_error import CancelledError, DeadlineExceededError

__all__ = [
    "BackgroundContext",
    "CancelFunc",
    "CancelledError",
    "Context",
    "DEADLINE_REASON",
    "DeadlineExceededError",
    "DoneCallback",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
]
