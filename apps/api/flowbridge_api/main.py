"""Main FastAPI application for FlowBridge."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from flowbridge_common.config import Settings, get_settings
from flowbridge_common.exceptions import register_gateway_error_handlers
from flowbridge_common.logging import RequestLoggingMiddleware
from flowbridge_execution.backend import TemporalExecutionBackend, connect_temporal_client
from flowbridge_execution.gateway import GatewayContext
from flowbridge_worker.main import FlowBridgeWorker

from flowbridge_api.api import health
from flowbridge_api.api.v1 import workflows

logger = logging.getLogger(__name__)


def _report_worker_exit(task: asyncio.Task) -> None:
    """Log an embedded worker that stops while the API keeps serving."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(
            f"Embedded worker stopped unexpectedly: {error}",
            exc_info=error,
        )


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    """Connect to Temporal, build the gateway context and host the worker.

    A context injected through ``create_app`` is used as-is; no connection
    is made and no worker is started.
    """
    if app.state.gateway_context is not None:
        yield
        return

    settings: Settings = app.state.settings
    client = await connect_temporal_client(settings.workflow)
    app.state.gateway_context = GatewayContext(
        backend=TemporalExecutionBackend(client),
        settings=settings.workflow,
    )

    worker: FlowBridgeWorker | None = None
    worker_task: asyncio.Task | None = None
    if settings.app.RUN_WORKER:
        worker = FlowBridgeWorker(settings.workflow, client=client)
        await worker.create_worker()
        worker_task = asyncio.create_task(worker.run())
        worker_task.add_done_callback(_report_worker_exit)

    logger.info("Application started successfully")
    try:
        yield
    finally:
        logger.info("Application shutting down")
        try:
            if worker is not None and worker_task is not None:
                worker.stop()
                try:
                    await worker_task
                except Exception as e:
                    logger.warning(f"Embedded worker exited with error: {e}")
        finally:
            if worker is not None:
                await worker.shutdown()
            app.state.gateway_context = None


def create_app(
    settings: Settings | None = None, gateway_context: GatewayContext | None = None
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=f"{settings.app.APP_NAME} API",
        description=(
            "Starts hello world workflow executions on Temporal and reports "
            "their status and event history."
        ),
        version="0.1.0",
        lifespan=app_lifespan,
        openapi_tags=[
            {"name": "workflows", "description": "Operations with workflow executions"},
            {"name": "health", "description": "Service health"},
        ],
    )
    app.state.settings = settings
    app.state.gateway_context = gateway_context

    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router)
    app.include_router(workflows.router)

    register_gateway_error_handlers(app)

    return app


app = create_app()
