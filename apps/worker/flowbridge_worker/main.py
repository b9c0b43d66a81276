#!/usr/bin/env python3
"""FlowBridge Temporal Worker Application.

Registers the hello world workflow and its activity on the configured task
queue and processes tasks until asked to stop. The API process embeds the
same worker; this module runs it standalone.
"""

import asyncio
import logging
import signal
import sys
from typing import Any

import dotenv
from flowbridge_common.config import WorkflowSettings, get_settings
from flowbridge_common.logging import setup_logging
from flowbridge_execution.activities import make_hello_world_activities
from flowbridge_execution.backend import connect_temporal_client
from flowbridge_execution.workflows import HelloWorldWorkflow
from temporalio.client import Client
from temporalio.worker import Worker

logger = logging.getLogger(__name__)


def create_worker(client: Client, settings: WorkflowSettings) -> Worker:
    """Create a Temporal worker hosting the hello world workflow and activity."""
    return Worker(
        client,
        task_queue=settings.TEMPORAL_TASK_QUEUE,
        workflows=[HelloWorldWorkflow],
        activities=make_hello_world_activities(),
        max_concurrent_workflow_tasks=settings.TEMPORAL_MAX_CONCURRENT_WORKFLOWS,
        max_concurrent_activities=settings.TEMPORAL_MAX_CONCURRENT_ACTIVITIES,
    )


class FlowBridgeWorker:
    """Temporal worker for FlowBridge workflows and activities."""

    def __init__(self, settings: WorkflowSettings | None = None, client: Client | None = None):
        self.settings = settings or get_settings().workflow
        self.client = client
        self.worker: Worker | None = None
        self.worker_shutdown_event = asyncio.Event()

    def signal_handler(self, signum: int, frame: Any = None) -> None:
        """Handle shutdown signals gracefully."""
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        self.worker_shutdown_event.set()

    async def connect(self) -> None:
        """Connect to Temporal server."""
        if self.client is None:
            self.client = await connect_temporal_client(self.settings)

    async def create_worker(self) -> None:
        """Create and configure the Temporal worker."""
        if not self.client:
            raise RuntimeError("Client not connected. Call connect() first.")

        self.worker = create_worker(self.client, self.settings)
        logger.info("Started Worker.", extra={"worker": self.settings.TEMPORAL_TASK_QUEUE})

    async def run(self) -> None:
        """Run the worker until shutdown signal."""
        if not self.worker:
            raise RuntimeError("Worker not created. Call create_worker() first.")

        logger.info("Worker starting...")
        worker_task = asyncio.create_task(self.worker.run())
        shutdown_task = asyncio.create_task(self.worker_shutdown_event.wait())

        done, _ = await asyncio.wait(
            {worker_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
        )

        if worker_task in done:
            # Worker stopped on its own; surface its error, if any
            shutdown_task.cancel()
            worker_task.result()
            return

        logger.info("Shutdown signal received, stopping worker...")
        await self.worker.shutdown()
        await worker_task

    def stop(self) -> None:
        """Ask a running worker to stop."""
        self.worker_shutdown_event.set()

    async def start(self) -> None:
        """Start the worker with proper initialization."""
        try:
            await self.connect()
            await self.create_worker()
            await self.run()
        except Exception as e:
            logger.error(f"Worker failed to start: {e}")
            raise
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Release worker resources."""
        logger.info("Shutting down worker...")
        self.worker = None
        self.client = None
        logger.info("Worker shutdown complete")


async def main() -> None:
    """Main entry point for the worker application."""
    dotenv.load_dotenv()
    settings = get_settings()
    setup_logging(settings.app.LOG_LEVEL, settings.app.STRUCTURED_LOGGING)

    worker = FlowBridgeWorker(settings.workflow)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, worker.signal_handler, sig)

    try:
        await worker.start()
    except Exception as e:
        logger.error(f"Worker error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
