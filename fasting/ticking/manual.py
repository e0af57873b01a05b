"""Manual ticker: the host (or a test) fires ticks explicitly."""

from fasting.ticking.protocol import TickCallback


class ManualTicker:
    """Manual-mode ticker: records the callback, invokes it only on fire()."""

    def __init__(self, interval: float = 1.0) -> None:
        self.interval = interval
        self._callback: TickCallback | None = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback) -> None:
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def fire(self, times: int = 1) -> int:
        """Invoke the callback up to `times` times. Returns how many ticks fired."""
        fired = 0
        for _ in range(times):
            if self._callback is None:
                break
            self._callback()
            fired += 1
        return fired
