"""Port: periodic timer scheduler driving the Consumer."""
from __future__ import annotations

from typing import Callable, Protocol


class PeriodicTimer(Protocol):
    """Handle for one periodic registration."""

    @property
    def interval(self) -> float: ...

    @property
    def callback(self) -> Callable[[], object]: ...

    @property
    def active(self) -> bool: ...


class Scheduler(Protocol):
    def register_periodic(
        self,
        interval: float,
        callback: Callable[[], object],
    ) -> PeriodicTimer:
        """Call callback every interval seconds until the returned timer is cancelled."""
        ...

    def cancel(self, timer: PeriodicTimer) -> None: ...
