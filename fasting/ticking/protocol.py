"""Ticker protocol for the timer's periodic scheduling source.

The timer controller depends only on the protocol, never on a concrete ticker,
so the asyncio loop can be swapped for a manually driven one in tests.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

TickCallback = Callable[[], object]


@runtime_checkable
class Ticker(Protocol):
    """A single periodic source: at most one callback is scheduled at a time."""

    interval: float

    @property
    def running(self) -> bool: ...

    def start(self, callback: TickCallback) -> None:
        """Begin invoking `callback` once per interval, replacing any previous schedule."""
        ...

    def stop(self) -> None:
        """Halt future invocations. Safe to call when not running."""
        ...
