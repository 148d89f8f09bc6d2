"""Interrupt-aware context derivation.

``handle`` returns a copy of a parent ``Context`` that is marked done when an
interrupt signal arrives or when the parent is done, whichever happens first.

Signal handling is unregistered as soon as the derived context is done, which
restores the previous signal disposition. The first interrupt therefore
requests cooperative cancellation, and a second one gets the process's
normal behavior (``KeyboardInterrupt`` for SIGINT, termination for SIGTERM).

Most programs wrap their root context once at startup::

    ctx = handle(background())
    while not ctx.done:
        do_work(ctx)

``notify_context`` is the lower-level building block: it derives the context
and returns the ``stop`` function without starting the background waiter.
"""
from __future__ import annotations

import logging
import signal
import threading
from typing import Callable, Optional, Sequence, Tuple

from .context import Context
from .errors import ErrorCode
from .logging import LogContext, get_logger, log_event
from .notify import Registration, SignalSource, default_source
from .signals import SignalLike, resolve_signals

StopFunc = Callable[[], None]

_logger = get_logger("interrupt.handle")


def notify_context(
    parent: Context,
    *signals: SignalLike,
    source: Optional[SignalSource] = None,
) -> Tuple[Context, StopFunc]:
    """Derive a child of ``parent`` that is also done when a signal arrives.

    Parameters
    ----------
    parent: Context
        Context to derive from; its cancellation cascades to the child.
    *signals: SignalLike
        Signals to intercept. None at all is legal and yields a plain
        cancellable child of ``parent``.
    source: SignalSource | None
        Signal-delivery capability; defaults to the process signal table.

    Returns
    -------
    tuple[Context, Callable[[], None]]
        The child and an idempotent ``stop`` that marks the child done and
        unregisters the signal listener.
    """
    ctx = Context(parent=parent)
    wanted = resolve_signals(signals)
    registration: Registration | None = None

    def on_signal(signum: signal.Signals) -> None:
        log_event(
            _logger,
            "interrupt.received",
            LogContext(context_id=ctx.id, signal=signum.name),
        )
        ctx.cancel(f"interrupted by {signum.name}", code=ErrorCode.INTERRUPTED)

    if wanted and not ctx.done:
        registration = (source or default_source()).register(wanted, on_signal)
        log_event(
            _logger,
            "interrupt.registered",
            LogContext(context_id=ctx.id),
            level=logging.DEBUG,
            signals=[s.name for s in wanted],
        )

    def stop() -> None:
        ctx.cancel()
        if registration is not None and registration.close():
            log_event(
                _logger,
                "interrupt.released",
                LogContext(context_id=ctx.id, code=ctx.code.value if ctx.code else None),
                level=logging.DEBUG,
            )

    return ctx, stop


def _release_when_done(ctx: Context, stop: StopFunc) -> None:
    ctx.wait()
    stop()


def handle(
    parent: Context,
    *,
    signals: Optional[Sequence[SignalLike]] = None,
    source: Optional[SignalSource] = None,
) -> Context:
    """Return a child of ``parent`` that is done on the first interrupt signal.

    ``signals`` defaults to the configured interrupt set
    (``INTERRUPT_SIGNALS``, else ``SIGNALS``). A daemon thread waits for the
    child to be done for any reason and then unregisters the listener, so no
    registration outlives the context it protects. Returns immediately and
    never raises.
    """
    if signals is None:
        # Local import: config depends on base modules at import time
        from ..config import get_interrupt_config

        signals = get_interrupt_config().signals
    ctx, stop = notify_context(parent, *signals, source=source)
    waiter = threading.Thread(
        target=_release_when_done,
        args=(ctx, stop),
        name=f"interrupt-waiter-{ctx.id}",
        daemon=True,
    )
    waiter.start()
    log_event(_logger, "interrupt.handle", LogContext(context_id=ctx.id), level=logging.DEBUG)
    return ctx


__all__ = ["StopFunc", "handle", "notify_context"]
