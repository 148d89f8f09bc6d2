"""Unit coverage for structured logging utilities."""

from __future__ import annotations

import io
import json
import logging

from crux_interrupt.base.logging import (
    LogContext,
    configure_logger,
    get_logger,
    log_event,
)
from crux_interrupt.base.log_support import JsonFormatter


def test_env_parsing_helpers_are_shared_with_config():
    from crux_interrupt.base.logging import _parse_json_mode, _parse_level

    assert _parse_level(" warn ") == logging.WARNING  # nosec B101
    assert _parse_level("loud", default=logging.ERROR) == logging.ERROR  # nosec B101
    assert _parse_json_mode("Off", True) is False  # nosec B101
    assert _parse_json_mode("  ", False) is False  # nosec B101
    assert _parse_json_mode("yes", False) is True  # nosec B101


def test_get_logger_env_overrides_level(monkeypatch, capsys):
    monkeypatch.setenv("INTERRUPT_LOG_LEVEL", "ERROR")
    try:
        logger = get_logger(name="interrupt.test", json_mode=True, level=logging.DEBUG)
        logger.info("hello")
        out = capsys.readouterr().err
        assert out == ""  # nosec B101 - asserts are appropriate in unit tests
        logger.error("fail")
        out = capsys.readouterr().err
        data = json.loads(out.strip())
        assert data["level"] == "ERROR" and data["msg"] == "fail"  # nosec B101
        assert data["logger"] == "interrupt.test"  # nosec B101
    finally:
        monkeypatch.delenv("INTERRUPT_LOG_LEVEL")
        get_logger(name="interrupt.test")


def test_log_event_hoists_payload_and_drops_none(capsys):
    logger = get_logger(name="interrupt.test.event", json_mode=True)
    log_event(
        logger,
        "interrupt.received",
        LogContext(context_id="ctx-1", signal="SIGINT", extra={"pid": 42, "skip": None}),
        attempt=None,
        count=2,
    )
    data = json.loads(capsys.readouterr().err.strip())
    assert data["event"] == "interrupt.received"  # nosec B101
    assert data["context_id"] == "ctx-1" and data["signal"] == "SIGINT"  # nosec B101
    assert data["pid"] == 42 and data["count"] == 2  # nosec B101
    assert "attempt" not in data and "skip" not in data and "msg" not in data  # nosec B101


def test_log_event_respects_level(capsys):
    logger = get_logger(name="interrupt.test.quiet")
    log_event(logger, "signal.restored", level=logging.DEBUG)
    assert capsys.readouterr().err == ""  # nosec B101


def test_json_formatter_keeps_plain_messages() -> None:
    formatter = JsonFormatter()
    record = logging.LogRecord(
        name="interrupt.test.json",
        level=logging.WARNING,
        pathname=__file__,
        lineno=0,
        msg="plain %s",
        args=("text",),
        exc_info=None,
    )
    payload = json.loads(formatter.format(record))
    assert payload["msg"] == "plain text"  # nosec B101
    assert payload["level"] == "WARNING"  # nosec B101


def test_child_logger_uses_parent_handler_without_duplicates() -> None:
    logger = get_logger(name="interrupt.test.child", json_mode=False)
    base_logger = logging.getLogger("interrupt")
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    base_logger.addHandler(handler)
    try:
        logger.warning("once")
    finally:
        base_logger.removeHandler(handler)
        get_logger(json_mode=True)
    assert logger.handlers == []  # nosec B101
    assert stream.getvalue().splitlines() == ["once"]  # nosec B101


def test_configure_logger_attaches_and_removes_file_handler(tmp_path):
    path = tmp_path / "logs" / "interrupt.log"
    logger = configure_logger(level="INFO", file_path=str(path))
    try:
        log_event(logger, "interrupt.handle", LogContext(context_id="ctx-9"))
        for h in logger.handlers:
            h.flush()
        line = path.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["context_id"] == "ctx-9"  # nosec B101
        assert len(_managed_file_handlers(logger)) == 1  # nosec B101
    finally:
        configure_logger(level="INFO", file_path=None)
    # pytest's own logging plugin may attach FileHandlers; only ours must go
    assert _managed_file_handlers(logger) == []  # nosec B101
    assert not any(  # nosec B101
        getattr(h, "baseFilename", None) == str(path) for h in logger.handlers
    )


def _managed_file_handlers(logger: logging.Logger) -> list:
    return [h for h in logger.handlers if getattr(h, "_interrupt_file_handler", False)]
