"""Signal listener registration parts.

Prefer importing from ``crux_interrupt.base.notify`` for the stable surface.
"""
