"""Worker composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle.
"""
from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from queue_poller.app.config.settings import Settings
from queue_poller.app.constants import CONSUMER_EVENT
from queue_poller.app.core import SERVICE_NAME
from queue_poller.app.infrastructure.messaging.factory import create_queue_connection
from queue_poller.app.infrastructure.scheduling.factory import create_scheduler
from queue_poller.app.messaging.consumer import Consumer
from queue_poller.app.messaging.handler import create_message_handler
from queue_poller.app.ports.queue_connection import QueueConnection
from queue_poller.app.ports.scheduler import Scheduler


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class WorkerDependencies:
    """Holds wired worker dependencies and their lifecycle."""

    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._connection: QueueConnection | None = None
        self._scheduler: Scheduler | None = None
        self._consumer: Consumer | None = None
        self._pending_acks: set[asyncio.Task[Any]] = set()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def connection(self) -> QueueConnection:
        if self._connection is None:
            raise RuntimeError("connection is not initialized")
        return self._connection

    @property
    def consumer(self) -> Consumer:
        if self._consumer is None:
            raise RuntimeError("consumer is not initialized")
        return self._consumer

    async def connect(self) -> None:
        self._connection = create_queue_connection(self._settings)
        await self._connection.connect()

        self._scheduler = create_scheduler(self._settings, asyncio.get_running_loop())
        self._consumer = Consumer(
            self._connection.queue,
            self._scheduler,
            self._settings.poll_interval_seconds,
            self._settings.poll_max_messages,
        )
        self._consumer.on(CONSUMER_EVENT.CONSUME, create_message_handler(self._pending_acks))
        self._consumer.on(CONSUMER_EVENT.END, lambda: _log("consumer_ended"))

    async def close(self) -> None:
        if self._consumer is not None:
            try:
                self._consumer.close()
            except Exception as exc:
                logger.warning("consumer close failed: {}", exc)
            self._consumer = None

        if self._pending_acks:
            await asyncio.gather(*self._pending_acks, return_exceptions=True)

        if self._connection is not None:
            try:
                await self._connection.close()
            except Exception as exc:
                logger.warning("queue connection close failed: {}", exc)
            self._connection = None

        self._scheduler = None


def create_worker_dependencies(settings: Settings | None = None) -> WorkerDependencies:
    return WorkerDependencies(settings=settings or Settings())
