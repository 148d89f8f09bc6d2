"""Cancellation context implementation parts.

Prefer importing from ``crux_interrupt.base.context`` for the stable surface.
"""
