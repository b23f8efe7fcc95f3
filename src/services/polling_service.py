"""Service for periodically refreshing dashboard data on the asyncio loop."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

RefreshFn = Callable[[], Awaitable[Any]]
ErrorHandler = Callable[[BaseException], Any]
SleepFn = Callable[[float], Awaitable[Any]]


class Poller:
    """
    Run an async refresh once per interval, at most one at a time.

    Methods:
    - start(): Schedule the timer task on the running loop
    - tick(): Start a refresh unless one is still in flight
    - cancel(): Stop all future ticks (irreversible)

    A tick that fires while a refresh is in flight is dropped, not queued.
    Refresh errors go to on_error and the schedule keeps running.
    """

    def __init__(
        self,
        interval_ms: int,
        refresh: RefreshFn,
        on_error: Optional[ErrorHandler] = None,
        sleep: SleepFn = asyncio.sleep,
        run_immediately: bool = False,
    ):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        self.interval_seconds = interval_ms / 1000
        self._refresh = refresh
        self._on_error = on_error
        self._sleep = sleep
        self._run_immediately = run_immediately
        self._task: Optional[asyncio.Task] = None
        self._in_flight: Optional[asyncio.Future] = None
        self._cancelled = False
        self.refresh_count = 0
        self.dropped_ticks = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None and not self._in_flight.done()

    def start(self) -> "Poller":
        if self._cancelled:
            raise RuntimeError("A cancelled poller cannot be restarted")
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run())
            logger.info(f"Polling started every {self.interval_seconds:g}s")
        return self

    def tick(self) -> bool:
        """
        Start one refresh.

        Returns:
            True if a refresh was started, False if the tick was dropped
        """
        if self._cancelled:
            return False
        if self.in_flight:
            self.dropped_ticks += 1
            logger.debug("Refresh still in flight, tick dropped")
            return False

        self.refresh_count += 1
        self._in_flight = asyncio.ensure_future(self._invoke())
        return True

    def cancel(self) -> None:
        """Stop the timer; no tick fires after this returns"""
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        logger.info("Polling cancelled")

    async def _run(self) -> None:
        try:
            if self._run_immediately:
                self.tick()
            while not self._cancelled:
                await self._sleep(self.interval_seconds)
                self.tick()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Polling timer stopped: {e}", exc_info=True)

    async def _invoke(self) -> None:
        try:
            await self._refresh()
        except Exception as e:
            logger.error(f"Error during scheduled refresh: {e}", exc_info=True)
            if self._on_error is not None:
                try:
                    self._on_error(e)
                except Exception as handler_error:
                    logger.error(f"Refresh error handler failed: {handler_error}")


def start_polling(
    interval_ms: int,
    refresh: RefreshFn,
    on_error: Optional[ErrorHandler] = None,
    sleep: SleepFn = asyncio.sleep,
    run_immediately: bool = False,
) -> Poller:
    """
    Start calling `refresh` every `interval_ms` on the running event loop.

    Returns:
        The running Poller; call its cancel() to stop polling
    """
    return Poller(
        interval_ms,
        refresh,
        on_error=on_error,
        sleep=sleep,
        run_immediately=run_immediately,
    ).start()
