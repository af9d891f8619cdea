import asyncio
import signal
from typing import Any

from loguru import logger

from queue_poller.app.composition import WorkerDependencies, create_worker_dependencies
from queue_poller.app.constants import CONSUMER_EVENT
from queue_poller.app.core import SERVICE_NAME


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


async def run_worker(deps: WorkerDependencies | None = None) -> None:
    deps = deps or create_worker_dependencies()
    shutdown = asyncio.Event()

    try:
        await deps.connect()
        # Closing the consumer (signal or a listener emitting close_consumer) stops the worker.
        deps.consumer.on(CONSUMER_EVENT.END, shutdown.set)

        def request_shutdown() -> None:
            if not shutdown.is_set():
                _log("shutdown_signal")
                deps.consumer.close()
                shutdown.set()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, request_shutdown)
            except NotImplementedError:
                pass

        _log(
            "worker_started",
            interval=deps.settings.poll_interval_seconds,
            max_messages=deps.settings.poll_max_messages,
        )
        await shutdown.wait()
    finally:
        await deps.close()
        _log("worker_stopped")


def main() -> None:
    try:
        asyncio.run(run_worker())
    except KeyboardInterrupt:
        _log("worker_interrupted")
    except Exception as e:
        logger.exception("worker failed: {}", e)
        raise


if __name__ == "__main__":
    main()
