"""Adapter: expose an aio_pika queue as a pollable MessageQueue.

aio_pika delivers messages by push (basic.consume). start() subscribes and
appends each delivery to a local buffer; get() pops from that buffer without
awaiting, so it is safe to call from a synchronous scheduler tick. The amount
buffered is bounded by the channel prefetch count since deliveries stay
unacknowledged until ack/nack/reject.

A message returned by get() is no longer tracked here: whoever received it
must settle it. If a "consume" listener raises before doing so, the delivery
holds a prefetch slot until the channel closes; the worker handler in
queue_poller.app.messaging.handler rejects on processing errors for that reason.
"""
from __future__ import annotations

from collections import deque
from typing import Any, Mapping

from aio_pika.abc import AbstractIncomingMessage, AbstractQueue
from loguru import logger

from queue_poller.app.core import SERVICE_NAME


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class AioPikaQueue:
    """Implements queue_poller.app.ports.message_queue.MessageQueue for aio_pika."""

    def __init__(self, queue: AbstractQueue) -> None:
        self._queue = queue
        self._buffer: deque[AbstractIncomingMessage] = deque()
        self._consumer_tag: str | None = None

    @property
    def pending(self) -> int:
        return len(self._buffer)

    async def start(self) -> str:
        if self._consumer_tag is not None:
            raise RuntimeError("queue is already being consumed")
        self._consumer_tag = await self._queue.consume(self._on_message, no_ack=False)
        _log("queue_subscribed", queue_name=self._queue.name, consumer_tag=self._consumer_tag)
        return self._consumer_tag

    async def _on_message(self, message: AbstractIncomingMessage) -> None:
        self._buffer.append(message)

    def get(self) -> AbstractIncomingMessage | None:
        if not self._buffer:
            return None
        return self._buffer.popleft()

    async def ack(self, message: AbstractIncomingMessage, *, multiple: bool = False) -> None:
        await message.ack(multiple=multiple)

    async def nack(
        self,
        message: AbstractIncomingMessage,
        *,
        requeue: bool = True,
        multiple: bool = False,
    ) -> None:
        await message.nack(multiple=multiple, requeue=requeue)

    async def reject(self, message: AbstractIncomingMessage, *, requeue: bool = False) -> None:
        await message.reject(requeue=requeue)

    async def cancel(self, consumer_tag: str | None = None) -> None:
        tag = consumer_tag or self._consumer_tag
        if tag is None:
            return
        await self._queue.cancel(tag)
        if tag == self._consumer_tag:
            self._consumer_tag = None
        _log("queue_unsubscribed", queue_name=self._queue.name, consumer_tag=tag)

    async def purge(self) -> Any:
        # Buffered deliveries are unacked, so the broker purge would not drop them.
        while self._buffer:
            message = self._buffer.popleft()
            try:
                await message.reject(requeue=False)
            except Exception as e:
                logger.warning("reject before purge failed: {}", e)
        return await self._queue.purge()

    def get_arguments(self) -> Mapping[str, Any]:
        return dict(self._queue.arguments or {})

    def get_argument(self, name: str) -> Any:
        arguments = self._queue.arguments or {}
        if name not in arguments:
            raise KeyError(f"queue {self._queue.name!r} has no argument {name!r}")
        return arguments[name]

    def has_argument(self, name: str) -> bool:
        return name in (self._queue.arguments or {})

    def get_name(self) -> str:
        return self._queue.name

    def get_consumer_tag(self) -> str | None:
        return self._consumer_tag
