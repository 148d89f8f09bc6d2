"""Fixtures for the interrupt handling test suite.

Provides an in-memory signal source, a clean ``INTERRUPT_*`` environment,
and logging capture. Tests that touch the real process signal table use
``SIGUSR1`` so a stray delivery never reaches the test runner's SIGINT
handling.
"""

from __future__ import annotations

import logging
import signal
from typing import Iterator, List

import pytest

from crux_interrupt.config import reset_interrupt_config
from crux_interrupt.mock import ManualSignalSource


@pytest.fixture()
def manual_source() -> ManualSignalSource:
    """Return a fresh in-memory signal source."""

    return ManualSignalSource()


@pytest.fixture(autouse=True)
def clean_interrupt_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear ``INTERRUPT_*`` variables and the config cache around each test."""

    for key in ("INTERRUPT_SIGNALS", "INTERRUPT_LOG_LEVEL", "INTERRUPT_LOG_JSON"):
        monkeypatch.delenv(key, raising=False)
    reset_interrupt_config()
    yield
    reset_interrupt_config()


@pytest.fixture()
def usr1_recorder() -> Iterator[List[int]]:
    """Install a recording SIGUSR1 handler and restore the original afterwards.

    The recorder stands in for "platform default handling": deliveries that
    reach it were not intercepted.
    """

    received: List[int] = []

    def _record(signum, frame):  # noqa: ARG001
        received.append(signum)

    original = signal.signal(signal.SIGUSR1, _record)
    try:
        yield received
    finally:
        signal.signal(signal.SIGUSR1, original)


@pytest.fixture()
def log_capture() -> Iterator[List[logging.LogRecord]]:
    """Collect records emitted through the shared ``interrupt`` logger."""

    records: List[logging.LogRecord] = []
    handler = logging.Handler(level=logging.DEBUG)
    handler.emit = lambda record: records.append(record)  # type: ignore
    base = logging.getLogger("interrupt")
    previous_level = base.level
    base.addHandler(handler)
    base.setLevel(logging.DEBUG)
    try:
        yield records
    finally:
        base.removeHandler(handler)
        base.setLevel(previous_level)
