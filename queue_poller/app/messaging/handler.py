"""Default "consume" listener for the worker: process each delivery and settle it."""
from __future__ import annotations

import asyncio
from typing import Any, Callable

from loguru import logger

from queue_poller.app.core import SERVICE_NAME
from queue_poller.app.ports.message_queue import MessageQueue


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def create_message_handler(
    pending_acks: set[asyncio.Task[Any]],
    process: Callable[[Any], None] | None = None,
) -> Callable[[Any, MessageQueue], None]:
    """Create a synchronous listener that processes the message and schedules its settlement.

    A message whose processing raises is rejected without requeue instead of
    acked, so it never stays unsettled. Settlement tasks are kept in
    pending_acks until done so the caller can await them on shutdown.
    """

    def _settle_done(task: asyncio.Task[Any]) -> None:
        pending_acks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("message settlement failed: {}", exc)

    def _schedule(result: Any) -> None:
        if asyncio.iscoroutine(result):
            task = asyncio.get_running_loop().create_task(result)
            pending_acks.add(task)
            task.add_done_callback(_settle_done)

    def on_message(message: Any, queue: MessageQueue) -> None:
        _log(
            "message_received",
            message_id=getattr(message, "message_id", None),
            body_size=len(getattr(message, "body", b"") or b""),
        )
        try:
            if process is not None:
                process(message)
        except Exception as e:
            logger.exception("message handling failed: {}", e)
            _schedule(queue.reject(message, requeue=False))
            return
        _schedule(queue.ack(message))

    return on_message
