"""Synchronous event emitter: named listener lists dispatched in registration order.

Handlers run inline on the caller's stack. A handler that raises aborts the
dispatch and the exception propagates out of emit(); handlers registered after
it are not called for that event.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable

Listener = Callable[..., Any]


class EventEmitter:
    """Listener registry keyed by event name."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> None:
        """Register *listener* to be called whenever *event* is emitted."""
        if not callable(listener):
            raise TypeError(f"listener for {event!r} must be callable")
        self._listeners[event].append(listener)

    def once(self, event: str, listener: Listener) -> None:
        """Register *listener* for the next emission of *event* only."""
        if not callable(listener):
            raise TypeError(f"listener for {event!r} must be callable")

        def wrapper(*payload: Any) -> Any:
            self.remove_listener(event, wrapper)
            return listener(*payload)

        wrapper.listener = listener  # type: ignore[attr-defined]
        self._listeners[event].append(wrapper)

    def remove_listener(self, event: str, listener: Listener) -> None:
        handlers = self._listeners.get(event)
        if not handlers:
            return
        for index, handler in enumerate(handlers):
            if handler == listener or getattr(handler, "listener", None) == listener:
                del handlers[index]
                break
        else:
            return
        if not handlers:
            del self._listeners[event]

    def remove_all_listeners(self, event: str | None = None) -> None:
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, ()))

    def emit(self, event: str, *payload: Any) -> bool:
        """Call every listener of *event* with *payload*. Returns False when nobody listens."""
        handlers = self._listeners.get(event)
        if not handlers:
            return False
        for handler in list(handlers):
            handler(*payload)
        return True
