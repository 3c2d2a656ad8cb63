"""
ID generation utilities for AetherCast.

Thread-safe unique identifier generation for effects and recorded casts.
"""

from __future__ import annotations

import threading
import time


# ============================================================================
# Thread-Safe Counter
# ============================================================================


class _ThreadSafeCounter:
    """Thread-safe incrementing counter."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        """Get the next counter value."""
        with self._lock:
            self._value += 1
            return self._value


_counter = _ThreadSafeCounter()


# ============================================================================
# ID Generation Functions
# ============================================================================


def generate_id(prefix: str = "") -> str:
    """Generate a unique identifier.

    Format: {prefix}_{timestamp}_{counter}

    Args:
        prefix: Optional prefix for the ID

    Returns:
        Unique string identifier

    Example:
        >>> generate_id("FX")
        "FX_1704067200_001"
    """
    timestamp = int(time.time())
    count = _counter.next()

    if prefix:
        return f"{prefix}_{timestamp}_{count:03d}"
    return f"{timestamp}_{count:03d}"


def generate_effect_id() -> str:
    """Generate an ID for a simulation effect."""
    return generate_id("FX")


def generate_phenomenon_id() -> str:
    """Generate an ID for a recorded cast phenomenon."""
    return generate_id("PH")
