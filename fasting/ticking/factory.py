"""Ticker factory: returns an asyncio or manual ticker based on config.

In asyncio mode, ticks are driven by a background task on the running loop.
In manual mode, the embedding host calls fire() itself.
Both implement the same Ticker protocol (start/stop).
"""

from fasting.ticking.protocol import Ticker
from shared.config import settings


def get_ticker(mode: str | None = None, interval: float | None = None) -> Ticker:
    """Return the ticker for `mode` (default: settings.ticker_mode)."""
    from fasting.ticking.asyncio_ticker import AsyncioTicker
    from fasting.ticking.manual import ManualTicker

    mode = mode or settings.ticker_mode
    interval = interval or settings.tick_interval_seconds
    tickers: dict[str, type] = {
        "asyncio": AsyncioTicker,
        "manual": ManualTicker,
    }
    ticker_cls = tickers.get(mode)
    if ticker_cls is None:
        raise ValueError(f"Unsupported ticker mode: {mode}. Must be one of: {list(tickers.keys())}")
    return ticker_cls(interval)
