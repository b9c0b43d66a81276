"""Execution gateway.

The four operations behind the HTTP surface. Each is a stateless coroutine
that takes an explicitly constructed ``GatewayContext``; nothing here keeps
state between calls and nothing is retried.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from flowbridge_common.config import WorkflowSettings
from flowbridge_common.exceptions import (
    BackendError,
    ExecutionNotFound,
    ListFailed,
    ValidationError,
)
from flowbridge_common.logging import ContextLogger, get_context_logger

from .backend import ExecutionBackend
from .models import (
    Execution,
    ExecutionDescription,
    HistoryEvent,
    ListPartition,
    StartedExecution,
    StartOptions,
    TimeWindow,
    utc_now,
)
from .workflows.constants import DEFAULT_NAME, WORKFLOW_NAME

WORKFLOW_ID_TIME_FORMAT = "%Y%m%d-%H%M%S"


@dataclass(frozen=True)
class GatewayContext:
    """Everything a gateway operation needs, built once at startup."""

    backend: ExecutionBackend
    settings: WorkflowSettings
    logger: ContextLogger = field(default_factory=lambda: get_context_logger(__name__))
    clock: Callable[[], datetime] = utc_now

    def now(self) -> datetime:
        return self.clock()


def new_workflow_id(prefix: str, now: datetime) -> str:
    """Time-based execution id, unique at one-second resolution."""
    return prefix + now.strftime(WORKFLOW_ID_TIME_FORMAT)


def validate_workflow_id(workflow_id: str | None) -> str:
    if not workflow_id:
        raise ValidationError("workflowId")
    return workflow_id


async def start_execution(ctx: GatewayContext, name: str | None = None) -> StartedExecution:
    """Start a hello world execution for ``name``.

    Raises:
        StartFailed: If the backend rejects the request
    """
    name = name or DEFAULT_NAME
    workflow_id = new_workflow_id(ctx.settings.WORKFLOW_ID_PREFIX, ctx.now())
    options = StartOptions(
        task_queue=ctx.settings.TEMPORAL_TASK_QUEUE,
        execution_timeout=ctx.settings.execution_timeout,
        task_timeout=ctx.settings.task_timeout,
    )

    log = ctx.logger.bind(workflow_id=workflow_id)
    try:
        started = await ctx.backend.start_execution(WORKFLOW_NAME, workflow_id, [name], options)
    except BackendError as e:
        log.error(f"Failed to start workflow: {e}")
        raise

    log.bind(run_id=started.run_id).info("Started workflow")
    return started


async def list_executions(
    ctx: GatewayContext, window: TimeWindow | None = None
) -> list[Execution]:
    """Open and closed executions started within the window, open first.

    Either partition failing discards both; a half-populated listing is
    never returned.

    Raises:
        ListFailed: If either partition query fails
    """
    window = window or TimeWindow.trailing(ctx.now(), ctx.settings.list_window)
    limit = ctx.settings.LIST_PAGE_SIZE

    executions: list[Execution] = []
    for partition in (ListPartition.OPEN, ListPartition.CLOSED):
        try:
            executions.extend(await ctx.backend.list_executions(window, partition, limit))
        except BackendError as e:
            ctx.logger.error(f"Failed to list {partition.value} workflows: {e}")
            raise ListFailed(
                f"Failed to list {partition.value} workflows: {e.message}",
                original_error=e.original_error or str(e),
            ) from e
    return executions


async def describe_execution(
    ctx: GatewayContext, workflow_id: str, run_id: str | None = None
) -> ExecutionDescription:
    """Current state of one execution plus its pending activity attempts.

    Raises:
        ExecutionNotFound: If the backend has no such execution
        BackendError: On any other backend failure
    """
    log = ctx.logger.bind(workflow_id=workflow_id, run_id=run_id)
    try:
        return await ctx.backend.describe_execution(workflow_id, run_id or None)
    except ExecutionNotFound as e:
        log.warning(f"Workflow not found: {e}")
        raise
    except BackendError as e:
        log.error(f"Failed to describe workflow: {e}")
        raise BackendError(
            f"Failed to get workflow status: {e.message}",
            workflow_id=workflow_id,
            run_id=run_id,
            original_error=e.original_error,
        ) from e


async def get_history(
    ctx: GatewayContext, workflow_id: str, run_id: str | None = None
) -> list[HistoryEvent]:
    """Drain the execution's event stream.

    A failing page ends the stream early and whatever was collected so far is
    returned; for an append-only log a prefix is still a consistent view.
    An execution that never started yields an empty list.
    """
    events: list[HistoryEvent] = []
    stream = ctx.backend.get_execution_history(
        workflow_id, run_id or None, page_size=ctx.settings.HISTORY_PAGE_SIZE or None
    )
    try:
        async for event in stream:
            events.append(event)
    except (ExecutionNotFound, BackendError) as e:
        ctx.logger.bind(workflow_id=workflow_id, run_id=run_id).error(
            f"Failed to get history event: {e}",
            extra={"events_collected": len(events)},
        )
    return events
