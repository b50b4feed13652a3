"""
Process-wide invalidation tick counter.

Every in-place mutation of tensor storage stamps the storage with a fresh tick.
When debug mode is on, the backprop pass compares those stamps with the ticks
recorded when values were captured, which detects data invalidated after it
was referenced by the computation graph.

Thread safety
-------------
Increments are serialized by an internal lock, so concurrent callers never
observe the same tick and no increment is lost.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import threading


@dataclass(eq=False)
class TickCounter:
    """
    Monotonically increasing counter.

    The counter starts at `start` (0 by default); the first `next_tick()`
    returns `start + 1`.
    """

    start: int = 0

    _value: int = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        self._value = self.start

    def next_tick(self) -> int:
        """Atomically increment the counter and return the new value."""
        with self._lock:
            self._value += 1
            return self._value

    def current_tick(self) -> int:
        """Return the most recently issued tick without incrementing."""
        with self._lock:
            return self._value


_GLOBAL_TICK_COUNTER = TickCounter()


def global_tick_counter() -> TickCounter:
    """Return the process-wide tick counter."""
    return _GLOBAL_TICK_COUNTER


def next_tick() -> int:
    """Increment the process-wide counter and return the new tick."""
    return _GLOBAL_TICK_COUNTER.next_tick()


def current_tick() -> int:
    """Return the process-wide counter's current value."""
    return _GLOBAL_TICK_COUNTER.current_tick()
