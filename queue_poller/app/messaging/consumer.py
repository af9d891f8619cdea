"""Periodic queue consumer: drains the queue on each scheduler tick and emits events.

Lifecycle:
  construction registers tick() with the scheduler -> tick() runs once per interval
  -> close() cancels the timer, emits "end" and drops all listeners.
  tick() after close() raises ConsumerClosedError.
"""
from __future__ import annotations

from numbers import Real
from typing import Any

from loguru import logger

from queue_poller.app.constants import CONSUMER_EVENT
from queue_poller.app.core import SERVICE_NAME
from queue_poller.app.core.event_emitter import EventEmitter, Listener
from queue_poller.app.ports.message_queue import MessageQueue
from queue_poller.app.ports.scheduler import PeriodicTimer, Scheduler

PROXIED_OPERATIONS = (
    "ack",
    "nack",
    "reject",
    "cancel",
    "purge",
    "get_argument",
    "get_arguments",
    "has_argument",
    "get_name",
    "get_consumer_tag",
)


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class ConsumerClosedError(RuntimeError):
    """Raised when a closed consumer is asked to poll."""


class Consumer:
    """Polls a MessageQueue every `interval` seconds and emits "consume" per message.

    max_messages caps the messages drained in a single tick; None drains until
    the queue reports empty. Listeners receive (message, queue) for "consume"
    and nothing for "end".
    """

    def __init__(
        self,
        queue: MessageQueue,
        scheduler: Scheduler,
        interval: float,
        max_messages: int | None = None,
    ) -> None:
        if isinstance(interval, bool) or not isinstance(interval, Real) or interval <= 0:
            raise ValueError(f"interval must be a positive number of seconds, got {interval!r}")
        if max_messages is not None and (
            isinstance(max_messages, bool) or not isinstance(max_messages, int) or max_messages < 1
        ):
            raise ValueError(f"max_messages must be a positive integer or None, got {max_messages!r}")

        self._queue = queue
        self._scheduler = scheduler
        self._interval = interval
        self._max_messages = max_messages
        self._closed = False
        self._events = EventEmitter()
        self._timer: PeriodicTimer = scheduler.register_periodic(interval, self.tick)
        _log("consumer_registered", interval=interval, max_messages=max_messages)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def max_messages(self) -> int | None:
        return self._max_messages

    @property
    def timer(self) -> PeriodicTimer:
        return self._timer

    @property
    def closed(self) -> bool:
        return self._closed

    def is_closed(self) -> bool:
        return self._closed

    # Events

    def on(self, event: str, listener: Listener) -> None:
        self._events.on(event, listener)

    def once(self, event: str, listener: Listener) -> None:
        self._events.once(event, listener)

    def remove_listener(self, event: str, listener: Listener) -> None:
        self._events.remove_listener(event, listener)

    def remove_all_listeners(self, event: str | None = None) -> None:
        self._events.remove_all_listeners(event)

    def listeners(self, event: str) -> list[Listener]:
        return self._events.listeners(event)

    def emit(self, event: str, *payload: Any) -> bool:
        if event != CONSUMER_EVENT.CLOSE_REQUEST:
            return self._events.emit(event, *payload)
        # Closes regardless of which listeners are registered.
        self._events.emit(event, *payload)
        self.close()
        return True

    # Polling

    def tick(self) -> int:
        """Drain the queue once. Returns how many messages were emitted."""
        if self._closed:
            raise ConsumerClosedError(
                "consumer is closed and cannot receive any more messages"
            )
        counter = 0
        while True:
            message = self._queue.get()
            if not message:
                break
            self._events.emit(CONSUMER_EVENT.CONSUME, message, self._queue)
            counter += 1
            if self._max_messages is not None and counter >= self._max_messages:
                break
            if self._closed:
                break
        if counter:
            logger.debug("consumer drained {} message(s)", counter)
        return counter

    def close(self) -> None:
        if self._closed:
            return
        self._scheduler.cancel(self._timer)
        self._closed = True
        _log("consumer_closed")
        try:
            self._events.emit(CONSUMER_EVENT.END)
        finally:
            self._events.remove_all_listeners()

    # Queue operations forwarded as-is

    def ack(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.ack(*args, **kwargs)

    def nack(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.nack(*args, **kwargs)

    def reject(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.reject(*args, **kwargs)

    def cancel(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.cancel(*args, **kwargs)

    def purge(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.purge(*args, **kwargs)

    def get_argument(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.get_argument(*args, **kwargs)

    def get_arguments(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.get_arguments(*args, **kwargs)

    def has_argument(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.has_argument(*args, **kwargs)

    def get_name(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.get_name(*args, **kwargs)

    def get_consumer_tag(self, *args: Any, **kwargs: Any) -> Any:
        return self._queue.get_consumer_tag(*args, **kwargs)
