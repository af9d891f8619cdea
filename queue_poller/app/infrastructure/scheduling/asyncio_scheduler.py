"""Scheduler implementation on top of an asyncio event loop (loop.call_later re-arming)."""
from __future__ import annotations

import asyncio
from typing import Any, Callable

from loguru import logger

from queue_poller.app.core import SERVICE_NAME


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class AsyncioPeriodicTimer:
    """PeriodicTimer handle. Re-arms itself before every callback invocation."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], object],
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._active = False

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def callback(self) -> Callable[[], object]:
        return self._callback

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        self._active = True
        self._arm()

    def stop(self) -> None:
        self._active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if not self._active:
            return
        self._arm()
        try:
            self._callback()
        except Exception as e:
            logger.exception("periodic callback failed: {}", e)


class AsyncioScheduler:
    """Scheduler port on an asyncio loop.

    Each registration is an AsyncioPeriodicTimer armed with loop.call_later. The
    loop is taken from the constructor or, lazily, from the running loop at the
    first registration.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def register_periodic(
        self,
        interval: float,
        callback: Callable[[], object],
    ) -> AsyncioPeriodicTimer:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")
        timer = AsyncioPeriodicTimer(self._get_loop(), interval, callback)
        timer.start()
        _log("timer_registered", interval=interval)
        return timer

    def cancel(self, timer: AsyncioPeriodicTimer) -> None:
        if not timer.active:
            return
        timer.stop()
        _log("timer_cancelled", interval=timer.interval)
