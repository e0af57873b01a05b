"""Asyncio ticker: one background task calling back on a fixed period.

Must be started from inside a running event loop (e.g. a FastAPI handler).
A callback that raises is logged and the loop keeps ticking.
"""

import asyncio

import structlog

from fasting.ticking.protocol import TickCallback

logger = structlog.get_logger()


class AsyncioTicker:
    def __init__(self, interval: float) -> None:
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: TickCallback) -> None:
        self.stop()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(callback))
        logger.info("ticker_started", ticker="asyncio", interval=self.interval)

    def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        self._task = None
        logger.info("ticker_stopped", ticker="asyncio")

    async def _run(self, callback: TickCallback) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                callback()
            except Exception:
                logger.exception("ticker_callback_failed", ticker="asyncio")
