"""Interrupt signal set for the current platform.

``SIGNALS`` extends the portable interrupt signal (``SIGINT``) with
``SIGTERM`` on POSIX-like platforms, which should be handled for typical
long-running process behavior. It is computed once at import and never
mutated.

``resolve_signals`` normalizes operator-supplied names or numbers (for
example from ``INTERRUPT_SIGNALS``) into ``signal.Signals`` members so the set
can be supplied by the host instead of being hard-coded.
"""
from __future__ import annotations

import logging
import signal
import sys
from typing import Iterable, Tuple, Union

from .logging import get_logger, log_event

SignalLike = Union[int, str, signal.Signals]

_logger = get_logger("interrupt.signals")


def _platform_signals() -> Tuple[signal.Signals, ...]:
    if sys.platform == "win32":
        return (signal.SIGINT,)
    return (signal.SIGINT, signal.SIGTERM)


SIGNALS: Tuple[signal.Signals, ...] = _platform_signals()


def _coerce(value: SignalLike) -> signal.Signals | None:
    if isinstance(value, signal.Signals):
        return value
    if isinstance(value, int):
        try:
            return signal.Signals(value)
        except ValueError:
            return None
    text = str(value).strip().upper()
    if not text:
        return None
    if text.isdigit():
        return _coerce(int(text))
    if not text.startswith("SIG"):
        text = f"SIG{text}"
    sig = getattr(signal.Signals, text, None)
    return sig if isinstance(sig, signal.Signals) else None


def resolve_signals(values: Iterable[SignalLike]) -> Tuple[signal.Signals, ...]:
    """Normalize signal names or numbers into an ordered, de-duplicated tuple.

    Accepts ``signal.Signals`` members, integers, and names such as
    ``"SIGINT"``, ``"int"`` or ``"15"`` (case-insensitive). Entries unknown on
    this platform are dropped with a warning; this never raises.
    """
    out: list[signal.Signals] = []
    for value in values:
        sig = _coerce(value)
        if sig is None:
            log_event(_logger, "signal.unknown", level=logging.WARNING, value=str(value))
            continue
        if sig not in out:
            out.append(sig)
    return tuple(out)


def signal_name(signum: SignalLike) -> str:
    """Return the canonical name (``"SIGINT"``) for ``signum``, or its text."""
    sig = _coerce(signum)
    return sig.name if sig is not None else str(signum)


__all__ = ["SIGNALS", "SignalLike", "resolve_signals", "signal_name"]
