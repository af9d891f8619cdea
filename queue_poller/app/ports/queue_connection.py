"""Port: broker connection that yields a pollable queue handle."""
from __future__ import annotations

from typing import Protocol

from queue_poller.app.ports.message_queue import MessageQueue


class QueueConnection(Protocol):
    @property
    def ready(self) -> bool: ...

    @property
    def queue(self) -> MessageQueue:
        """The subscribed queue handle. Raises RuntimeError before connect()."""
        ...

    async def connect(self) -> None:
        """Open the connection, declare the queue and start buffering deliveries."""
        ...

    async def close(self) -> None: ...
