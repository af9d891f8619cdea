"""Scheduler factory: selects implementation from config."""
from __future__ import annotations

import asyncio

from queue_poller.app.config.settings import Settings
from queue_poller.app.ports.scheduler import Scheduler
from queue_poller.app.infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler


def create_scheduler(
    settings: Settings,
    loop: asyncio.AbstractEventLoop | None = None,
) -> Scheduler:
    backend = settings.scheduler_backend.strip().lower()

    if backend == "asyncio":
        return AsyncioScheduler(loop)

    raise ValueError(f"Unsupported scheduler backend: {backend}")
