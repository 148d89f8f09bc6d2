"""In-memory signal source.

``ManualSignalSource`` implements the ``SignalSource`` protocol without
touching the process signal table. Signals are "delivered" by calling
``deliver``; a delivery that no registration claims is recorded in
``unclaimed`` to stand in for platform default handling. Useful in tests and
for hosts that want to drive interrupts programmatically.
"""

from __future__ import annotations

import signal
import threading
from typing import Dict, List, Optional, Sequence

from ..base.notify import Registration, SignalCallback
from ..base.signals import SignalLike, resolve_signals


class ManualSignalSource:
    """Signal source whose deliveries are triggered explicitly."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._routes: Dict[signal.Signals, List[Registration]] = {}
        self.unclaimed: List[signal.Signals] = []
        self.registered_count = 0

    def register(self, signals: Sequence[SignalLike], callback: SignalCallback) -> Registration:
        registration = Registration(resolve_signals(signals), callback, self._release)
        with self._lock:
            self.registered_count += 1
            for sig in registration.signals:
                self._routes.setdefault(sig, []).append(registration)
        return registration

    def deliver(self, signum: SignalLike) -> int:
        """Deliver ``signum`` to every active registration; return how many."""
        sig = signal.Signals(signum)
        with self._lock:
            targets = list(self._routes.get(sig, ()))
        notified = sum(1 for registration in targets if registration.notify(sig))
        if not notified:
            self.unclaimed.append(sig)
        return notified

    def active_registrations(self, signum: Optional[SignalLike] = None) -> List[Registration]:
        with self._lock:
            if signum is not None:
                return list(self._routes.get(signal.Signals(signum), ()))
            seen: List[Registration] = []
            for routes in self._routes.values():
                seen.extend(r for r in routes if r not in seen)
            return seen

    def _release(self, registration: Registration) -> None:
        with self._lock:
            for sig in registration.signals:
                routes = self._routes.get(sig, [])
                if registration in routes:
                    routes.remove(registration)
                if not routes:
                    self._routes.pop(sig, None)


__all__ = ["ManualSignalSource"]
