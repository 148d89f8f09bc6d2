"""Signal listener registration (public API facade).

Exposes the ``SignalSource`` capability, the ``Registration`` handle it
returns, and the process-wide ``ProcessSignalSource`` implementation via the
canonical ``crux_interrupt.base.notify`` import path.
"""

from .notify_parts.registration import Registration, SignalCallback
from .notify_parts.signal_source import SignalSource
from .notify_parts.process_source import ProcessSignalSource, default_source

__all__ = [
    "ProcessSignalSource",
    "Registration",
    "SignalCallback",
    "SignalSource",
    "default_source",
]
