"""Signal listener registration (single-class module).

A ``Registration`` is one live subscription in a signal source. It is
one-shot: the first delivery closes it before the callback runs, and
``close`` is idempotent so the delivery path and an explicit cleanup can both
call it safely.

The one-shot right is a single-element token list; ``list.pop`` is atomic,
so ``claim`` takes no lock and may be called from a signal handler.
"""

from __future__ import annotations

import signal
from typing import Callable, List, Tuple

SignalCallback = Callable[[signal.Signals], None]
ReleaseHook = Callable[["Registration"], None]


class Registration:
    """Handle for a subscription created by ``SignalSource.register``."""

    def __init__(
        self,
        signals: Tuple[signal.Signals, ...],
        callback: SignalCallback,
        release: ReleaseHook,
    ) -> None:
        self.signals = signals
        self._callback = callback
        self._release = release
        self._token: List[bool] = [True]

    @property
    def active(self) -> bool:
        """Whether the registration still intercepts its signals."""
        return bool(self._token)

    def claim(self) -> bool:
        """Take the one-shot right to deliver or close; ``True`` exactly once."""
        try:
            self._token.pop()
        except IndexError:
            return False
        return True

    def close(self) -> bool:
        """Unregister; returns ``True`` only for the call that closed it."""
        if not self.claim():
            return False
        self._release(self)
        return True

    def deliver(self, signum: signal.Signals) -> None:
        """Complete a delivery already claimed with ``claim``."""
        self._release(self)
        self._callback(signum)

    def notify(self, signum: signal.Signals) -> bool:
        """Deliver ``signum`` once; later deliveries are ignored."""
        if not self.claim():
            return False
        self.deliver(signum)
        return True

    def __repr__(self) -> str:
        names = ",".join(s.name for s in self.signals)
        return f"Registration(signals=[{names}], active={self.active})"


__all__ = ["Registration", "ReleaseHook", "SignalCallback"]
