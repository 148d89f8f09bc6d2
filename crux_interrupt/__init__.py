"""crux_interrupt package

Interrupt handling for long-running processes, expressed as cancellation.

Purpose:
    Convert operator interrupts (Ctrl-C, SIGTERM) into cancellation of a
    hierarchical ``Context`` so the rest of a program can rely on ordinary
    cancellation-aware code paths. The first interrupt cancels the context
    returned by :func:`handle`; the listener is then removed, so a second
    interrupt gets the process's normal behavior.

Public API (re-exported):
    - Version: ``__version__``
    - Core: :func:`handle`, :func:`notify_context`, ``SIGNALS``
    - Contexts: :class:`Context`, :func:`background`, :func:`with_cancel`,
      :func:`with_timeout`, :func:`with_deadline`
    - Errors: :class:`CancelledError`, :class:`DeadlineExceededError`,
      :class:`ErrorCode`
    - Signal delivery: :class:`SignalSource`, :class:`Registration`,
      :class:`ProcessSignalSource`, :func:`default_source`
    - Configuration: :class:`InterruptConfig`, :func:`get_interrupt_config`

Example:
    >>> from crux_interrupt import background, handle
    >>> ctx = handle(background())
    >>> ctx.wait()  # returns after the first Ctrl-C
"""

from .base import (
    SIGNALS,
    CancelledError,
    Context,
    DeadlineExceededError,
    ErrorCode,
    ProcessSignalSource,
    Registration,
    SignalSource,
    background,
    default_source,
    handle,
    notify_context,
    with_cancel,
    with_deadline,
    with_timeout,
)
from .config import InterruptConfig, get_interrupt_config

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "SIGNALS",
    "handle",
    "notify_context",
    # Contexts
    "Context",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
    # Errors
    "CancelledError",
    "DeadlineExceededError",
    "ErrorCode",
    # Signal delivery
    "ProcessSignalSource",
    "Registration",
    "SignalSource",
    "default_source",
    # Configuration
    "InterruptConfig",
    "get_interrupt_config",
]
