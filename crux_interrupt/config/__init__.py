"""Configuration for interrupt handling.

Goals
-----
* Let the host supply the interrupt signal set instead of hard-coding it.
* Merge sources in a predictable order:
    1. Built-in defaults (``SIGNALS`` for the platform, INFO, JSON logs)
    2. Environment variables
    3. In-code overrides passed to ``get_interrupt_config``
* Never raise on malformed input; fall back to defaults instead.

Environment Variables
---------------------
INTERRUPT_SIGNALS
    Comma-separated signal names or numbers (``"SIGINT,SIGTERM,HUP"``). An
    empty value means no signals are intercepted; unset means ``SIGNALS``.
INTERRUPT_LOG_LEVEL
    Logging level name for the ``interrupt`` logger.
INTERRUPT_LOG_JSON
    ``0``/``false``/``no``/``off`` switches the log format to plain text.

Public API
----------
* InterruptConfig
* get_interrupt_config(overrides: dict | None = None) -> InterruptConfig
* reset_interrupt_config() -> None
"""
from __future__ import annotations

import logging
import os
import signal
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..base.logging import _parse_json_mode, _parse_level, configure_logger
from ..base.signals import SIGNALS, resolve_signals

_ENV_KEYS = ("INTERRUPT_SIGNALS", "INTERRUPT_LOG_LEVEL", "INTERRUPT_LOG_JSON")


class InterruptConfig(BaseModel):
    """Normalized interrupt handling settings.

    Attributes
    ----------
    signals:
        Signals ``handle`` intercepts by default. Accepts names, numbers, a
        comma-separated string, or ``signal.Signals`` members; unknown
        entries are dropped.
    log_level:
        Level name for the shared ``interrupt`` logger.
    json_logs:
        Whether log lines are JSON encoded.
    """

    model_config = ConfigDict(frozen=True)

    signals: Tuple[signal.Signals, ...] = Field(default=SIGNALS)
    log_level: str = "INFO"
    json_logs: bool = True

    @field_validator("signals", mode="before")
    @classmethod
    def _normalize_signals(cls, value: Any) -> Tuple[signal.Signals, ...]:
        if value is None:
            return SIGNALS
        if isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        elif isinstance(value, int):
            # covers signal.Signals, whose str() is not its name on 3.10
            value = (value,)
        return resolve_signals(value)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        return logging.getLevelName(_parse_level(str(value or "")))

    def apply_logging(self) -> logging.Logger:
        """Apply ``log_level`` and ``json_logs`` to the shared logger."""
        return configure_logger(level=self.log_level, json_mode=self.json_logs)


_CACHED: InterruptConfig | None = None
_ENV_GUARD: Tuple[Optional[str], ...] | None = None


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    raw_signals = os.getenv("INTERRUPT_SIGNALS")
    if raw_signals is not None:
        out["signals"] = raw_signals
    level = os.getenv("INTERRUPT_LOG_LEVEL")
    if level:
        out["log_level"] = level
    out["json_logs"] = _parse_json_mode(os.getenv("INTERRUPT_LOG_JSON"), True)
    return out


def get_interrupt_config(overrides: Optional[Dict[str, Any]] = None) -> InterruptConfig:
    """Return the process-cached configuration, merged with ``overrides``.

    The cache is refreshed when any ``INTERRUPT_*`` variable changes, so
    tests can adjust the environment at runtime. Overrides are applied on top
    of the cached value and never cached themselves.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = tuple(os.getenv(key) for key in _ENV_KEYS)
    if _CACHED is None or _ENV_GUARD != guard:
        _CACHED = InterruptConfig(**_env_overrides())
        _ENV_GUARD = guard
    if not overrides:
        return _CACHED
    return InterruptConfig(**(_CACHED.model_dump() | overrides))


def reset_interrupt_config() -> None:
    """Drop the cached configuration."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    _CACHED = None
    _ENV_GUARD = None


__all__ = ["InterruptConfig", "get_interrupt_config", "reset_interrupt_config"]
