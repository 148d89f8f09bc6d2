"""End-to-end interrupt behavior in a child interpreter.

These cases end in process termination or ``KeyboardInterrupt``, so each runs
in its own ``python -c`` subprocess:

* a second SIGTERM terminates the process once the first one was consumed,
  both right after the first delivery and after the listener was released
  off the main thread (deferred restore, then forward to ``SIG_DFL``)
* a second SIGINT raises ``KeyboardInterrupt`` in the same two situations
* a delivery that lands while the main thread is inside ``Context.wait``
  still cancels the context instead of hanging the process
"""
from __future__ import annotations

import os
import signal
import subprocess  # nosec B404 - runs this interpreter on a fixed script
import sys
import textwrap
from pathlib import Path

import pytest

pytestmark = pytest.mark.skipif(
    sys.platform == "win32" or not hasattr(signal, "SIGUSR1"),
    reason="POSIX signal delivery required",
)

ROOT = Path(__file__).resolve().parents[2]

PRELUDE = """
import os, signal, sys, time
from crux_interrupt import background, default_source, handle
from crux_interrupt.base.context import Context

def wait_released():
    deadline = time.monotonic() + 5
    while default_source().active_registrations():
        if time.monotonic() > deadline:
            sys.exit(3)
        time.sleep(0.01)

def consume_first(sig, via_parent):
    if via_parent:
        parent = Context()
        handle(parent, signals=[sig])
        parent.cancel("shutdown")
        wait_released()
        return
    ctx = handle(background(), signals=[sig])
    os.kill(os.getpid(), sig)
    if not ctx.wait(5):
        sys.exit(3)
"""


def _run(body: str, timeout: float = 60) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH")]))
    env["INTERRUPT_LOG_LEVEL"] = "WARNING"
    script = PRELUDE + textwrap.dedent(body)
    return subprocess.run(  # nosec B603 - fixed argv, no shell
        [sys.executable, "-c", script],
        cwd=str(ROOT),
        env=env,
        capture_output=True,
        text=True,
        timeout=timeout,
    )


@pytest.mark.parametrize("via_parent", [False, True], ids=["after-signal", "after-parent-cancel"])
def test_second_sigterm_terminates_the_process(via_parent):
    result = _run(
        f"""
        consume_first(signal.SIGTERM, {via_parent})
        print("consumed", flush=True)
        os.kill(os.getpid(), signal.SIGTERM)
        time.sleep(5)
        sys.exit(4)
        """
    )
    assert "consumed" in result.stdout, result.stderr  # nosec B101 - pytest assert in tests
    assert result.returncode == -signal.SIGTERM, result.stderr  # nosec B101


@pytest.mark.parametrize("via_parent", [False, True], ids=["after-signal", "after-parent-cancel"])
def test_second_sigint_raises_keyboard_interrupt(via_parent):
    result = _run(
        f"""
        consume_first(signal.SIGINT, {via_parent})
        try:
            os.kill(os.getpid(), signal.SIGINT)
            time.sleep(5)
        except KeyboardInterrupt:
            print("keyboard-interrupt", flush=True)
            sys.exit(0)
        sys.exit(4)
        """
    )
    assert result.returncode == 0, result.stderr  # nosec B101
    assert "keyboard-interrupt" in result.stdout  # nosec B101


def test_signal_during_wait_cancels_instead_of_hanging():
    result = _run(
        """
        import random, threading

        ctx = handle(background(), signals=[signal.SIGUSR1])
        # deliver while the main thread holds the done event's internal lock
        with ctx._done._cond:
            signal.raise_signal(signal.SIGUSR1)
        if not ctx.wait(5):
            sys.exit(3)

        for _ in range(500):
            ctx = handle(background(), signals=[signal.SIGUSR1])
            timer = threading.Timer(random.random() / 1000, os.kill, (os.getpid(), signal.SIGUSR1))
            timer.start()
            while not ctx.wait(0):
                pass
            timer.join()
        print("completed", flush=True)
        """
    )
    assert result.returncode == 0, result.stderr  # nosec B101
    assert "completed" in result.stdout  # nosec B101
