"""
Interrupt Base Package

Provider-agnostic building blocks for turning operator interrupts into
cooperative cancellation:
- Signals: the platform interrupt signal set
- Context: hierarchical, one-shot cancellation contexts
- Notify: the injectable signal-delivery capability
- Interrupt: ``handle`` / ``notify_context``
- Errors and logging support shared by the above
"""

from .errors import CancelledError, DeadlineExceededError, ErrorCode
from .signals import SIGNALS, resolve_signals, signal_name
from .context import (
    BackgroundContext,
    Context,
    background,
    with_cancel,
    with_deadline,
    with_timeout,
)
from .notify import ProcessSignalSource, Registration, SignalSource, default_source
from .interrupt import handle, notify_context

__all__ = [
    # Signals
    "SIGNALS",
    "resolve_signals",
    "signal_name",
    # Contexts
    "BackgroundContext",
    "Context",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
    # Notify
    "ProcessSignalSource",
    "Registration",
    "SignalSource",
    "default_source",
    # Interrupt handling
    "handle",
    "notify_context",
    # Errors
    "CancelledError",
    "DeadlineExceededError",
    "ErrorCode",
]
