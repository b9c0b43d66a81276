"""Worker CLI commands for FlowBridge Worker."""

import asyncio
import sys

import click
import dotenv
from flowbridge_common.config import get_settings

from flowbridge_worker.main import main as run_worker


@click.group()
def cli():
    """FlowBridge Worker CLI - Temporal worker management."""


@cli.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--max-activities", type=int, help="Max concurrent activities")
@click.option("--max-workflows", type=int, help="Max concurrent workflows")
def start(debug: bool, max_activities: int | None, max_workflows: int | None):
    """Start the Temporal worker."""
    dotenv.load_dotenv()
    settings = get_settings()

    # Override settings if provided
    if max_activities:
        settings.workflow.TEMPORAL_MAX_CONCURRENT_ACTIVITIES = max_activities
    if max_workflows:
        settings.workflow.TEMPORAL_MAX_CONCURRENT_WORKFLOWS = max_workflows
    if debug:
        settings.app.LOG_LEVEL = "DEBUG"

    click.echo("Starting FlowBridge Temporal Worker...")
    click.echo(f"   Temporal Server: {settings.workflow.TEMPORAL_SERVER_URL}")
    click.echo(f"   Namespace: {settings.workflow.TEMPORAL_NAMESPACE}")
    click.echo(f"   Task Queue: {settings.workflow.TEMPORAL_TASK_QUEUE}")
    click.echo(f"   Max Activities: {settings.workflow.TEMPORAL_MAX_CONCURRENT_ACTIVITIES}")
    click.echo(f"   Max Workflows: {settings.workflow.TEMPORAL_MAX_CONCURRENT_WORKFLOWS}")

    try:
        asyncio.run(run_worker())
    except KeyboardInterrupt:
        click.echo("\nWorker stopped by user")
    except Exception as e:
        click.echo(f"\nWorker failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
