"""Mock signal source exposing deterministic delivery for tests."""

from .signal_source import ManualSignalSource

__all__ = ["ManualSignalSource"]
