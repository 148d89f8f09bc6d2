"""Process-wide signal table backed by ``signal.signal``.

``ProcessSignalSource`` multiplexes any number of registrations onto one
Python-level dispatcher per signal. The dispatcher is installed when the
first registration claims a signal, remembering the previous disposition,
and the previous disposition is reinstated once no registration for that
signal is left.

The dispatcher runs as a Python signal handler, on the main thread, between
arbitrary bytecodes of whatever the main thread was doing (possibly inside a
``threading`` primitive that holds a non-reentrant lock). It therefore takes
no locks and does no logging. It claims the active registrations, puts the
previous disposition back when nothing is left listening, and hands the
claimed registrations to a daemon dispatch thread through a
``queue.SimpleQueue``. Callbacks (and so context cancellation) run on that
thread.

Python only lets the main thread install handlers. A registration closed on
another thread (for example the background waiter started by ``handle``) is
detached immediately, but the handler restore is deferred: the next
delivery of that signal finds no registration, reinstates the previous
disposition and forwards the signal to it. Any later register or close on
the main thread flushes deferred restores as well.

Failure Modes
-------------
Signals that cannot be intercepted (uncatchable signals, or a first
registration made off the main thread) are logged and left to platform
default handling; ``register`` never raises.
"""

from __future__ import annotations

import logging
import queue
import signal
import threading
from types import FrameType
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..logging import LogContext, get_logger, log_event
from ..signals import SignalLike, resolve_signals
from .registration import Registration, SignalCallback

_logger = get_logger("interrupt.notify")

Delivery = Tuple[signal.Signals, List[Registration]]


def _on_main_thread() -> bool:
    return threading.current_thread() is threading.main_thread()


class ProcessSignalSource:
    """Signal source that routes real process signals to registrations."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._routes: Dict[signal.Signals, List[Registration]] = {}
        # signals our dispatcher is installed for -> disposition it replaced
        self._previous: Dict[signal.Signals, Any] = {}
        self._pending: "queue.SimpleQueue[Delivery]" = queue.SimpleQueue()
        self._worker: threading.Thread | None = None

    def register(self, signals: Sequence[SignalLike], callback: SignalCallback) -> Registration:
        """Route ``signals`` to ``callback`` until the registration closes."""
        registration = Registration(resolve_signals(signals), callback, self._release)
        with self._lock:
            self._flush_restores()
            for sig in registration.signals:
                # routed before the dispatcher goes in, so a delivery that
                # races the install still finds it
                self._routes.setdefault(sig, []).append(registration)
                if sig not in self._previous and not self._install(sig):
                    self._drop_route(sig, registration)
        return registration

    def active_registrations(self, signum: Optional[SignalLike] = None) -> List[Registration]:
        """Return active registrations routed for ``signum`` (or any signal)."""
        with self._lock:
            if signum is not None:
                routes = self._routes.get(signal.Signals(signum), ())
                return [r for r in routes if r.active]
            seen: List[Registration] = []
            for routes in self._routes.values():
                seen.extend(r for r in routes if r.active and r not in seen)
            return seen

    def intercepting(self, signum: SignalLike) -> bool:
        """Whether the dispatcher is currently installed for ``signum``."""
        return signal.getsignal(signal.Signals(signum)) == self._dispatch

    def _install(self, sig: signal.Signals) -> bool:
        try:
            previous = signal.signal(sig, self._dispatch)
        except (OSError, RuntimeError, ValueError) as exc:
            log_event(
                _logger,
                "signal.install_failed",
                LogContext(signal=sig.name),
                level=logging.WARNING,
                error=str(exc),
            )
            return False
        # None means a handler installed outside Python; treat as default
        self._previous[sig] = previous if previous is not None else signal.SIG_DFL
        self._start_worker()
        return True

    def _start_worker(self) -> None:
        if self._worker is None:
            self._worker = threading.Thread(
                target=self._drain,
                name="interrupt-signal-dispatch",
                daemon=True,
            )
            self._worker.start()

    def _drop_route(self, sig: signal.Signals, registration: Registration) -> None:
        routes = self._routes.get(sig)
        if routes is None:
            return
        if registration in routes:
            routes.remove(registration)
        if not routes:
            del self._routes[sig]

    def _release(self, registration: Registration) -> None:
        with self._lock:
            for sig in registration.signals:
                self._drop_route(sig, registration)
            self._flush_restores()

    def _flush_restores(self) -> None:
        if not _on_main_thread():
            return
        # the dispatcher may pop entries while this loop runs
        for sig in list(self._previous):
            if sig not in self._routes:
                self._restore(sig)

    def _restore(self, sig: signal.Signals) -> None:
        previous = self._previous.get(sig)
        if previous is None:
            return
        try:
            signal.signal(sig, previous)
        except (OSError, RuntimeError, ValueError) as exc:
            log_event(
                _logger,
                "signal.restore_failed",
                LogContext(signal=sig.name),
                level=logging.WARNING,
                error=str(exc),
            )
        else:
            log_event(_logger, "signal.restored", LogContext(signal=sig.name), level=logging.DEBUG)
        self._previous.pop(sig, None)

    def _has_active(self, sig: signal.Signals) -> bool:
        return any(r.active for r in list(self._routes.get(sig, ())))

    def _dispatch(self, signum: int, frame: Optional[FrameType]) -> None:
        sig = signal.Signals(signum)
        claimed = [r for r in list(self._routes.get(sig, ())) if r.claim()]
        previous = None if self._has_active(sig) else self._uninstall(sig)
        if claimed:
            self._pending.put((sig, claimed))
        elif previous is not None:
            self._pending.put((sig, []))
            self._forward(sig, previous, frame)

    def _uninstall(self, sig: signal.Signals) -> Any:
        previous = self._previous.pop(sig, None)
        if previous is None:
            return None
        signal.signal(sig, previous)
        if self._has_active(sig):
            # registered from another thread while the handler ran
            self._previous[sig] = signal.signal(sig, self._dispatch)
            return None
        return previous

    def _forward(self, sig: signal.Signals, previous: Any, frame: Optional[FrameType]) -> None:
        if callable(previous):
            previous(sig, frame)
        elif previous == signal.SIG_DFL:
            signal.raise_signal(sig)

    def _drain(self) -> None:
        while True:
            sig, claimed = self._pending.get()
            if not claimed:
                log_event(_logger, "signal.forwarded", LogContext(signal=sig.name), level=logging.DEBUG)
                continue
            for registration in claimed:
                try:
                    registration.deliver(sig)
                except Exception:
                    _logger.exception("signal callback failed for %s", sig.name)


_DEFAULT: ProcessSignalSource | None = None
_DEFAULT_LOCK = threading.Lock()


def default_source() -> ProcessSignalSource:
    """Return the process-wide ``ProcessSignalSource`` singleton.

    A single instance should own the process signal table; separate instances
    would each remember the other's dispatcher as the previous disposition.
    """
    global _DEFAULT  # noqa: PLW0603 - module singleton
    with _DEFAULT_LOCK:
        if _DEFAULT is None:
            _DEFAULT = ProcessSignalSource()
        return _DEFAULT


__all__ = ["ProcessSignalSource", "default_source"]
