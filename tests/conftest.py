from __future__ import annotations

from typing import Any, Callable, Iterable

import pytest


class FakeTimer:
    """Implements PeriodicTimer for tests."""

    def __init__(self, interval: float, callback: Callable[[], object]) -> None:
        self.interval = interval
        self.callback = callback
        self.active = True


class FakeScheduler:
    """Implements Scheduler for tests; records registrations and cancellations."""

    def __init__(self) -> None:
        self.registered: list[FakeTimer] = []
        self.cancelled: list[FakeTimer] = []

    def register_periodic(self, interval: float, callback: Callable[[], object]) -> FakeTimer:
        timer = FakeTimer(interval, callback)
        self.registered.append(timer)
        return timer

    def cancel(self, timer: FakeTimer) -> None:
        timer.active = False
        self.cancelled.append(timer)


class FakeQueue:
    """Implements MessageQueue for tests.

    get() returns the scripted messages in order, then `default` forever.
    Every proxied call is recorded as (method, args, kwargs).
    """

    def __init__(self, messages: Iterable[Any] = (), *, default: Any = False) -> None:
        self._messages = list(messages)
        self._default = default
        self.get_calls = 0
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []
        self.results: dict[str, Any] = {}
        self.raise_on_get: Exception | None = None

    def get(self) -> Any:
        self.get_calls += 1
        if self.raise_on_get is not None:
            raise self.raise_on_get
        if self._messages:
            return self._messages.pop(0)
        return self._default

    def _record(self, method: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        self.calls.append((method, args, kwargs))
        return self.results.get(method)

    def ack(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("ack", args, kwargs)

    def nack(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("nack", args, kwargs)

    def reject(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("reject", args, kwargs)

    def cancel(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("cancel", args, kwargs)

    def purge(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("purge", args, kwargs)

    def get_argument(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("get_argument", args, kwargs)

    def get_arguments(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("get_arguments", args, kwargs)

    def has_argument(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("has_argument", args, kwargs)

    def get_name(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("get_name", args, kwargs)

    def get_consumer_tag(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("get_consumer_tag", args, kwargs)


class Counter:
    """Listener that counts invocations and keeps their payloads."""

    def __init__(self) -> None:
        self.count = 0
        self.payloads: list[tuple[Any, ...]] = []

    def __call__(self, *payload: Any) -> None:
        self.count += 1
        self.payloads.append(payload)


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture()
def counter() -> Counter:
    return Counter()
