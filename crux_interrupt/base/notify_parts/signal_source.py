"""SignalSource Protocol (single-class module).

Interface for the process-wide signal-delivery capability. Injecting it
keeps interrupt handling testable with an in-memory source.
"""

from __future__ import annotations

import signal
from typing import Protocol, Sequence, runtime_checkable

from .registration import Registration, SignalCallback


@runtime_checkable
class SignalSource(Protocol):
    """Registers interest in signals by kind.

    Implementations should:
    - Support multiple independent registrations for the same signal
    - Invoke ``callback(signum)`` for each active registration of a
      delivered signal, closing the registration first
    - Resume the previous signal disposition once no registration claims a
      signal
    - Never raise for signals that cannot be intercepted; leave them to the
      platform default instead
    """

    def register(self, signals: Sequence[signal.Signals], callback: SignalCallback) -> Registration:
        """Start intercepting ``signals``; returns the registration handle."""
        ...


__all__ = ["SignalSource"]
