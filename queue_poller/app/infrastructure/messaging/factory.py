"""Queue connection factory: selects implementation from config. Only place that imports concrete brokers."""
from __future__ import annotations

from queue_poller.app.config.settings import Settings
from queue_poller.app.ports.queue_connection import QueueConnection
from queue_poller.app.infrastructure.messaging.rabbitmq.rabbitmq_connection import RabbitMQConnection


def create_queue_connection(settings: Settings) -> QueueConnection:
    backend = settings.queue_backend.strip().lower()

    if backend == "rabbitmq":
        return RabbitMQConnection(settings)

    raise ValueError(f"Unsupported queue backend: {backend}")
