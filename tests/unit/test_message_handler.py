import asyncio

import pytest

from queue_poller.app.messaging.handler import create_message_handler
from tests.conftest import FakeQueue


class _Message:
    message_id = "m-1"
    body = b"payload"


class _AsyncAckQueue:
    def __init__(self, fail: bool = False) -> None:
        self.acked = []
        self._fail = fail

    async def ack(self, message) -> None:
        if self._fail:
            raise RuntimeError("ack failed")
        self.acked.append(message)


@pytest.mark.asyncio
async def test_handler_schedules_async_ack():
    pending: set[asyncio.Task] = set()
    queue = _AsyncAckQueue()
    handler = create_message_handler(pending)
    message = _Message()

    handler(message, queue)
    assert len(pending) == 1
    await asyncio.gather(*pending)
    await asyncio.sleep(0)

    assert queue.acked == [message]
    assert pending == set()


@pytest.mark.asyncio
async def test_handler_ack_failure_is_logged_not_raised():
    pending: set[asyncio.Task] = set()
    handler = create_message_handler(pending)

    handler(_Message(), _AsyncAckQueue(fail=True))
    await asyncio.gather(*pending, return_exceptions=True)
    await asyncio.sleep(0)

    assert pending == set()


def test_handler_with_sync_ack_queue():
    pending: set = set()
    queue = FakeQueue()
    handler = create_message_handler(pending)
    message = _Message()

    handler(message, queue)

    assert queue.calls == [("ack", (message,), {})]
    assert pending == set()


def test_processing_failure_rejects_without_requeue():
    pending: set = set()
    queue = FakeQueue()
    message = _Message()

    def process(msg) -> None:
        raise ValueError("bad payload")

    handler = create_message_handler(pending, process)
    handler(message, queue)

    assert queue.calls == [("reject", (message,), {"requeue": False})]


@pytest.mark.asyncio
async def test_processing_failure_schedules_async_reject():
    class _AsyncRejectQueue(_AsyncAckQueue):
        def __init__(self) -> None:
            super().__init__()
            self.rejected = []

        async def reject(self, message, *, requeue: bool) -> None:
            self.rejected.append((message, requeue))

    pending: set[asyncio.Task] = set()
    queue = _AsyncRejectQueue()
    message = _Message()

    def process(msg) -> None:
        raise ValueError("bad payload")

    create_message_handler(pending, process)(message, queue)
    await asyncio.gather(*pending)

    assert queue.rejected == [(message, False)]
    assert queue.acked == []


def test_processed_message_is_acked():
    pending: set = set()
    queue = FakeQueue()
    seen = []
    message = _Message()

    create_message_handler(pending, seen.append)(message, queue)

    assert seen == [message]
    assert queue.calls == [("ack", (message,), {})]
