"""Unit tests for signal registrations using the in-memory signal source.

Covers idempotent close, one-shot delivery, and broadcast to every active
registration of a signal.
"""
from __future__ import annotations

import signal

from crux_interrupt.base.notify import Registration, SignalSource
from crux_interrupt.mock import ManualSignalSource


def test_manual_source_satisfies_protocol(manual_source):
    assert isinstance(manual_source, SignalSource)  # nosec B101 - pytest assert in tests


def test_close_is_idempotent(manual_source):
    received = []
    reg = manual_source.register([signal.SIGINT], received.append)
    assert isinstance(reg, Registration) and reg.active  # nosec B101

    assert reg.close() is True  # nosec B101
    assert reg.close() is False  # nosec B101
    assert not reg.active  # nosec B101
    assert manual_source.active_registrations() == []  # nosec B101

    assert manual_source.deliver(signal.SIGINT) == 0  # nosec B101
    assert received == []  # nosec B101
    assert manual_source.unclaimed == [signal.SIGINT]  # nosec B101


def test_delivery_is_one_shot(manual_source):
    received = []
    reg = manual_source.register(["SIGINT", "SIGTERM"], received.append)

    assert manual_source.deliver(signal.SIGTERM) == 1  # nosec B101
    assert received == [signal.SIGTERM]  # nosec B101
    assert not reg.active  # nosec B101
    # closing after delivery is a harmless no-op
    assert reg.close() is False  # nosec B101

    assert manual_source.deliver(signal.SIGINT) == 0  # nosec B101
    assert received == [signal.SIGTERM]  # nosec B101


def test_delivery_broadcasts_to_every_registration(manual_source):
    first, second, other = [], [], []
    manual_source.register([signal.SIGINT], first.append)
    manual_source.register([signal.SIGINT], second.append)
    manual_source.register([signal.SIGTERM], other.append)

    assert manual_source.deliver(signal.SIGINT) == 2  # nosec B101
    assert first == [signal.SIGINT] and second == [signal.SIGINT]  # nosec B101
    assert other == []  # nosec B101
    assert len(manual_source.active_registrations(signal.SIGTERM)) == 1  # nosec B101


def test_register_with_no_signals_is_inert():
    source = ManualSignalSource()
    reg = source.register([], lambda s: None)
    assert reg.signals == () and reg.active  # nosec B101
    assert source.active_registrations() == []  # nosec B101


def test_claim_is_one_shot_and_defers_release_to_deliver():
    released, received = [], []
    reg = Registration((signal.SIGINT,), received.append, released.append)

    assert reg.claim() is True  # nosec B101
    assert reg.claim() is False and not reg.active  # nosec B101
    assert reg.close() is False and released == []  # nosec B101

    reg.deliver(signal.SIGINT)
    assert released == [reg] and received == [signal.SIGINT]  # nosec B101
