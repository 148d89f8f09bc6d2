"""Hierarchical cancellation context.

A ``Context`` represents work that may be abandoned. It becomes done exactly
once, either through an explicit ``cancel`` or because its parent became
done; propagation only flows from parent to child. Children are held
strongly by their parent while active and hold a weak reference back.

State is guarded by a re-entrant lock. ``cancel`` sets a ``threading.Event``
and must not be called from a Python signal handler: the handler can
interrupt ``wait`` while the main thread holds the event's internal lock.
``ProcessSignalSource`` hands deliveries to a dispatch thread for that reason.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
import threading
import weakref
from typing import Callable, Dict, List

from ..errors_parts.cancelled_error import CancelledError, error_for
from ..errors_parts.error_code import ErrorCode
from ..logging import LogContext, get_logger, log_event
from .state import State

DoneCallback = Callable[["Context"], None]

_logger = get_logger("interrupt.context")
_ids = itertools.count(1)


def _noop() -> None:
    return None


class Context:
    """A cancellation context with cascading, one-shot done semantics.

    Thread-safe for ``cancel``, ``wait`` and callback registration. A child
    created while its parent is already done is done immediately, with the
    parent's reason and code.
    """

    def __init__(self, *, parent: "Context | None" = None, deadline: float | None = None) -> None:
        self.id = f"ctx-{next(_ids)}"
        self._state = State()
        self._lock = threading.RLock()
        self._done = threading.Event()
        self._children: List[Context] = []
        self._callbacks: Dict[object, DoneCallback] = {}
        self._parent_ref = weakref.ref(parent) if parent is not None else None
        parent_deadline = parent.deadline if parent is not None else None
        if deadline is None or (parent_deadline is not None and parent_deadline < deadline):
            deadline = parent_deadline
        self._deadline = deadline
        if parent is not None:
            parent.link_child(self)

    @property
    def parent(self) -> "Context | None":
        """The parent context, if it is still alive."""
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def done(self) -> bool:
        return self._state.done

    @property
    def reason(self) -> str | None:
        return self._state.reason

    @property
    def code(self) -> ErrorCode | None:
        return self._state.code

    @property
    def deadline(self) -> float | None:
        """Earliest ``time.monotonic()`` deadline of this context or its ancestors."""
        return self._deadline

    @property
    def error(self) -> CancelledError | None:
        """Exception describing why the context ended, or ``None`` while active."""
        if not self._state.done:
            return None
        return error_for(self._state.code or ErrorCode.CANCELLED, self._state.reason)

    def cancel(self, reason: str | None = None, *, code: ErrorCode = ErrorCode.CANCELLED) -> bool:
        """Mark the context done and cascade to children.

        Only the first call has any effect; it returns ``True``. Later calls
        are no-ops returning ``False``.
        """
        with self._lock:
            if self._state.done:
                return False
            self._state.done = True
            self._state.reason = reason
            self._state.code = code
            children = list(self._children)
            self._children.clear()
            callbacks = list(self._callbacks.values())
            self._callbacks.clear()
        self._done.set()
        log_event(
            _logger,
            "context.cancelled",
            LogContext(context_id=self.id, code=code.value),
            level=logging.DEBUG,
            reason=reason,
            children=len(children) or None,
        )
        for child in children:
            child.cancel(reason, code=code)
        for callback in callbacks:
            self._run_callback(callback)
        parent = self.parent
        if parent is not None:
            parent._unlink_child(self)
        return True

    def link_child(self, child: "Context") -> "Context":
        """Link a child so cancellation of this context cascades (returns child)."""
        with self._lock:
            if not self._state.done:
                self._children.append(child)
        if self._state.done:
            # covers a cancel that ran between the check and the append
            self._unlink_child(child)
            child.cancel(self._state.reason, code=self._state.code or ErrorCode.CANCELLED)
        return child

    def _unlink_child(self, child: "Context") -> None:
        with self._lock, contextlib.suppress(ValueError):
            self._children.remove(child)

    def add_done_callback(self, fn: DoneCallback) -> Callable[[], None]:
        """Run ``fn(self)`` once the context is done.

        Runs immediately (on the calling thread) when already done; otherwise
        on whichever thread performs the cancellation. Returns an idempotent
        function that unregisters ``fn`` if it has not run yet.
        """
        key = object()
        with self._lock:
            registered = not self._state.done
            if registered:
                self._callbacks[key] = fn
        if not registered:
            self._run_callback(fn)
            return _noop
        if self._state.done and self._callbacks.pop(key, None) is not None:
            self._run_callback(fn)

        def remove() -> None:
            with self._lock:
                self._callbacks.pop(key, None)

        return remove

    def _run_callback(self, fn: DoneCallback) -> None:
        try:
            fn(self)
        except Exception:
            _logger.exception("done callback %r failed for %s", fn, self.id)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until done or ``timeout`` elapses; return whether done."""
        return self._done.wait(timeout)

    async def wait_async(self) -> None:
        """Suspend the current asyncio task until the context is done."""
        if self._state.done:
            return
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()

        def _resolve() -> None:
            if not waiter.done():
                waiter.set_result(None)

        remove = self.add_done_callback(lambda _ctx: loop.call_soon_threadsafe(_resolve))
        try:
            await waiter
        finally:
            remove()

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` (or ``DeadlineExceededError``) if done."""
        error = self.error
        if error is not None:
            raise error

    def child(self) -> "Context":
        """Create and link a cancellable child context."""
        return Context(parent=self)

    def __repr__(self) -> str:
        code = self._state.code.value if self._state.code else None
        return (
            f"Context(id={self.id!r}, done={self._state.done}, "
            f"code={code!r}, reason={self._state.reason!r}, children={len(self._children)})"
        )


class BackgroundContext(Context):
    """Root context that is never done.

    ``cancel`` is a no-op and children and callbacks are not retained, so a
    process-lifetime root does not accumulate references.
    """

    def __init__(self) -> None:
        super().__init__()
        self.id = "background"

    def cancel(self, reason: str | None = None, *, code: ErrorCode = ErrorCode.CANCELLED) -> bool:
        return False

    def link_child(self, child: Context) -> Context:
        return child

    def add_done_callback(self, fn: DoneCallback) -> Callable[[], None]:
        return _noop

    def __repr__(self) -> str:
        return "Context(background)"


_BACKGROUND = BackgroundContext()


def background() -> Context:
    """Return the process-wide root context, which is never cancelled."""
    return _BACKGROUND


__all__ = ["Context", "BackgroundContext", "DoneCallback", "background"]
