"""API CLI commands for FlowBridge API."""

import os

import click
import uvicorn
from flowbridge_common.config import get_settings
from flowbridge_common.logging import setup_logging


@click.group()
def cli():
    """FlowBridge API CLI - HTTP server management."""


@cli.command()
@click.option("--host", default=None, help="Host to bind the server to")
@click.option("--port", default=None, type=int, help="Port to bind the server to")
@click.option("--reload/--no-reload", default=False, help="Enable/disable auto-reload")
@click.option("--log-level", default=None, help="Logging level")
@click.option(
    "--with-worker/--without-worker",
    default=None,
    help="Host the Temporal worker inside the API process",
)
def serve(
    host: str | None,
    port: int | None,
    reload: bool,
    log_level: str | None,
    with_worker: bool | None,
):
    """Start the API server."""
    if with_worker is not None:
        # uvicorn's reload child re-reads settings from the environment
        os.environ["APP__RUN_WORKER"] = "true" if with_worker else "false"
        get_settings.cache_clear()

    settings = get_settings()
    host = host or settings.app.HOST
    port = port or settings.app.PORT
    log_level = (log_level or settings.app.LOG_LEVEL).lower()

    setup_logging(log_level, settings.app.STRUCTURED_LOGGING)

    click.echo(f"Starting FlowBridge API server on {host}:{port}")
    click.echo(f"   Reload: {reload}, Log Level: {log_level}, Worker: {settings.app.RUN_WORKER}")

    uvicorn.run(
        app="flowbridge_api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
        log_config=None,
    )


if __name__ == "__main__":
    cli()
