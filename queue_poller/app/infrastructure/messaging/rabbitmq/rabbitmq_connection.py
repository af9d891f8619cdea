"""
RabbitMQ connection: single connect, queue declaration and subscription, teardown.

Lifecycle:
  DISCONNECTED -> CONNECTING -> CONNECTED -> CHANNEL_OPEN -> QUEUE_DECLARED -> READY.
  On shutdown: READY -> CLOSING -> cancel subscription, close channel/connection -> CLOSED.

A failed connect leaves the state DISCONNECTED and re-raises; reconnect is
handled by aio_pika's robust connection only, there is no retry loop here.
"""
from __future__ import annotations

from typing import Any

import aio_pika
from aio_pika.abc import AbstractChannel, AbstractRobustConnection
from loguru import logger

from queue_poller.app.config.settings import Settings
from queue_poller.app.core import SERVICE_NAME
from queue_poller.app.infrastructure.messaging.rabbitmq.aio_pika_queue import AioPikaQueue
from queue_poller.app.infrastructure.messaging.rabbitmq.constants import ConnectionState


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class RabbitMQConnection:
    """QueueConnection port for RabbitMQ.

    Owns the aio_pika connection and channel and exposes the declared queue as
    an AioPikaQueue once state is READY.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._state = ConnectionState.DISCONNECTED
        self._connection: AbstractRobustConnection | None = None
        self._channel: AbstractChannel | None = None
        self._queue: AioPikaQueue | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._state == ConnectionState.READY

    @property
    def queue(self) -> AioPikaQueue:
        if self._queue is None:
            raise RuntimeError("connection is not ready")
        return self._queue

    def _set_state(self, state: ConnectionState) -> None:
        self._state = state

    def _build_amqp_url(self) -> str:
        vhost = self._settings.broker_vhost.lstrip("/")
        return (
            f"amqp://{self._settings.broker_user}:{self._settings.broker_password}"
            f"@{self._settings.broker_host}:{self._settings.broker_port}/{vhost}"
        )

    def _queue_arguments(self) -> dict[str, Any] | None:
        if self._settings.queue_max_length is None:
            return None
        return {
            "x-max-length": self._settings.queue_max_length,
            "x-overflow": "reject-publish",
        }

    async def connect(self) -> None:
        if self._state != ConnectionState.DISCONNECTED:
            raise RuntimeError(f"cannot connect from state {self._state.value}")
        self._set_state(ConnectionState.CONNECTING)
        _log("rmq_connecting", host=self._settings.broker_host, port=self._settings.broker_port)
        try:
            self._connection = await aio_pika.connect_robust(self._build_amqp_url())
        except Exception as e:
            logger.warning("rmq connect failed: {}", e)
            self._set_state(ConnectionState.DISCONNECTED)
            raise
        self._set_state(ConnectionState.CONNECTED)
        _log("rmq_connected")

        self._channel = await self._connection.channel()
        await self._channel.set_qos(prefetch_count=self._settings.prefetch_count)
        self._set_state(ConnectionState.CHANNEL_OPEN)

        declared = await self._channel.declare_queue(
            self._settings.queue_name,
            durable=self._settings.queue_durable,
            arguments=self._queue_arguments(),
        )
        self._set_state(ConnectionState.QUEUE_DECLARED)

        self._queue = AioPikaQueue(declared)
        await self._queue.start()
        self._set_state(ConnectionState.READY)
        _log("rmq_ready", queue_name=self._settings.queue_name)

    async def close(self) -> None:
        if self._state == ConnectionState.CLOSED:
            return
        self._set_state(ConnectionState.CLOSING)
        _log("rmq_closing")
        if self._queue is not None:
            try:
                await self._queue.cancel()
            except Exception as e:
                logger.warning("queue cancel failed (continuing to close channel): {}", e)
            self._queue = None
        if self._channel is not None:
            try:
                await self._channel.close()
            except Exception as e:
                logger.warning("channel close failed (continuing to close connection): {}", e)
            self._channel = None
        if self._connection is not None:
            try:
                await self._connection.close()
            except Exception as e:
                logger.warning("connection close failed: {}", e)
            self._connection = None
        self._set_state(ConnectionState.CLOSED)
