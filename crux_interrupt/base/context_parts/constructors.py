"""Derived context constructors.

``with_cancel`` derives a cancellable child; ``with_deadline`` and
``with_timeout`` additionally end the child when a ``time.monotonic()``
deadline elapses. Each returns ``(ctx, cancel)`` where ``cancel`` is the
child's bound ``cancel`` method.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Tuple

from ..errors_parts.error_code import ErrorCode
from ..logging import LogContext, get_logger, log_event
from .context import Context

CancelFunc = Callable[..., bool]

_logger = get_logger("interrupt.context")

DEADLINE_REASON = "context deadline exceeded"


def with_cancel(parent: Context) -> Tuple[Context, CancelFunc]:
    """Derive a child of ``parent`` that can be cancelled independently."""
    ctx = Context(parent=parent)
    return ctx, ctx.cancel


def with_deadline(parent: Context, deadline: float) -> Tuple[Context, CancelFunc]:
    """Derive a child that ends with ``DEADLINE_EXCEEDED`` at ``deadline``.

    ``deadline`` is expressed on the ``time.monotonic()`` clock. When the
    parent already carries an earlier deadline no timer is started; the
    parent's own expiry cascades instead.
    """
    parent_deadline = parent.deadline
    ctx = Context(parent=parent, deadline=deadline)
    if ctx.done or (parent_deadline is not None and parent_deadline <= deadline):
        return ctx, ctx.cancel

    remaining = deadline - time.monotonic()
    if remaining <= 0:
        _expire(ctx)
        return ctx, ctx.cancel

    timer = threading.Timer(remaining, _expire, args=(ctx,))
    timer.daemon = True
    timer.name = f"deadline-{ctx.id}"
    ctx.add_done_callback(lambda _ctx: timer.cancel())
    timer.start()
    return ctx, ctx.cancel


def with_timeout(parent: Context, seconds: float) -> Tuple[Context, CancelFunc]:
    """Shortcut for ``with_deadline(parent, time.monotonic() + seconds)``."""
    return with_deadline(parent, time.monotonic() + seconds)


def _expire(ctx: Context) -> None:
    if ctx.cancel(DEADLINE_REASON, code=ErrorCode.DEADLINE_EXCEEDED):
        log_event(
            _logger,
            "context.deadline",
            LogContext(context_id=ctx.id, code=ErrorCode.DEADLINE_EXCEEDED.value),
            level=logging.DEBUG,
        )


__all__ = ["CancelFunc", "DEADLINE_REASON", "with_cancel", "with_deadline", "with_timeout"]
