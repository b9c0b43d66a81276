"""Temporal implementation of the execution backend interface.

Translates Temporal client calls and protobuf payloads into the FlowBridge
record model, and Temporal errors into the gateway error taxonomy.
"""

import logging
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Any

from flowbridge_common.config import WorkflowSettings
from flowbridge_common.exceptions import (
    BackendError,
    BackendUnavailable,
    ExecutionNotFound,
    StartFailed,
)
from google.protobuf.message import Message
from google.protobuf.timestamp_pb2 import Timestamp
from temporalio.api.enums.v1 import EventType, PendingActivityState
from temporalio.client import (
    Client,
    WorkflowExecution,
    WorkflowExecutionStatus,
    WorkflowHistoryEventFilterType,
)
from temporalio.contrib.pydantic import pydantic_data_converter
from temporalio.exceptions import WorkflowAlreadyStartedError
from temporalio.service import RPCError, RPCStatusCode

from ..models import (
    ActivityAttempt,
    ActivityState,
    Execution,
    ExecutionDescription,
    ExecutionStatus,
    HistoryEvent,
    ListPartition,
    StartedExecution,
    StartOptions,
    TimeWindow,
)
from .base import ExecutionBackend

logger = logging.getLogger(__name__)

_EVENT_TYPE_PREFIX = "EVENT_TYPE_"
_PENDING_STATE_PREFIX = "PENDING_ACTIVITY_STATE_"


async def connect_temporal_client(settings: WorkflowSettings) -> Client:
    """Connect to the configured Temporal server.

    Raises:
        BackendUnavailable: If the server cannot be reached
    """
    logger.info(
        f"Connecting to Temporal server at {settings.TEMPORAL_SERVER_URL} "
        f"with namespace {settings.TEMPORAL_NAMESPACE}"
    )
    try:
        client = await Client.connect(
            settings.TEMPORAL_SERVER_URL,
            namespace=settings.TEMPORAL_NAMESPACE,
            data_converter=pydantic_data_converter,
        )
    except Exception as e:
        logger.error(f"Failed to connect to Temporal server at {settings.TEMPORAL_SERVER_URL}: {e}")
        raise BackendUnavailable(
            f"Cannot connect to Temporal server: {e}", original_error=str(e)
        ) from e

    logger.info("Successfully connected to Temporal server")
    return client


def event_type_name(value: int) -> str:
    """Convert a Temporal event type enum into its CamelCase name.

    ``EVENT_TYPE_ACTIVITY_TASK_SCHEDULED`` becomes ``ActivityTaskScheduled``.
    Values unknown to the installed SDK map to ``Unknown``.
    """
    try:
        name = EventType.Name(value)
    except ValueError:
        return "Unknown"
    name = name.removeprefix(_EVENT_TYPE_PREFIX)
    return "".join(part.capitalize() for part in name.split("_"))


def _timestamp(message: Message, field: str) -> datetime | None:
    if not message.HasField(field):
        return None
    value: Timestamp = getattr(message, field)
    return value.ToDatetime(tzinfo=UTC)


def _has_message_field(message: Message, field: str) -> bool:
    return field in message.DESCRIPTOR.fields_by_name and message.HasField(field)


def event_payload(event: Message) -> dict[str, Any]:
    """Pull the attributes the projector understands out of a history event."""
    attributes_field = event.WhichOneof("attributes")
    if attributes_field is None:
        return {}
    attributes = getattr(event, attributes_field)

    payload: dict[str, Any] = {}
    if _has_message_field(attributes, "activity_type"):
        payload["activityType"] = attributes.activity_type.name
    if "activity_id" in attributes.DESCRIPTOR.fields_by_name and attributes.activity_id:
        payload["activityId"] = attributes.activity_id
    if _has_message_field(attributes, "workflow_type"):
        payload["workflowType"] = attributes.workflow_type.name
    if _has_message_field(attributes, "failure"):
        payload["reason"] = attributes.failure.message
    return payload


def convert_history_event(event: Message) -> HistoryEvent:
    return HistoryEvent(
        event_id=event.event_id,
        event_type=event_type_name(event.event_type),
        timestamp=_timestamp(event, "event_time"),
        payload=event_payload(event),
    )


def convert_status(
    status: WorkflowExecutionStatus | None, close_time: datetime | None
) -> ExecutionStatus:
    """Map a Temporal execution status onto ``ExecutionStatus``.

    A closed run with no (or an unrecognized) status is reported as
    COMPLETED, as visibility records of closed runs always are.
    """
    if status is not None and status.name in ExecutionStatus.__members__:
        return ExecutionStatus[status.name]
    return ExecutionStatus.COMPLETED if close_time is not None else ExecutionStatus.RUNNING


def convert_execution(info: WorkflowExecution) -> Execution:
    close_time = info.close_time
    status = convert_status(info.status, close_time)
    return Execution(
        id=info.id,
        run_id=info.run_id,
        workflow_type=info.workflow_type or "",
        start_time=info.start_time,
        close_time=close_time if status.is_terminal else None,
        status=status,
        history_length=info.history_length,
    )


def convert_pending_activity(pending: Message) -> ActivityAttempt:
    """Map Temporal ``PendingActivityInfo`` onto an ``ActivityAttempt``.

    Cancel-requested and paused attempts are still in flight and are
    reported as STARTED or SCHEDULED depending on whether they ever ran.
    """
    last_started_time = _timestamp(pending, "last_started_time")
    try:
        state_name = PendingActivityState.Name(pending.state).removeprefix(_PENDING_STATE_PREFIX)
    except ValueError:
        state_name = ""
    if state_name == ActivityState.SCHEDULED.value:
        state = ActivityState.SCHEDULED
    elif state_name == ActivityState.STARTED.value or last_started_time is not None:
        state = ActivityState.STARTED
    else:
        state = ActivityState.SCHEDULED

    return ActivityAttempt(
        activity_id=pending.activity_id,
        activity_type=pending.activity_type.name if pending.HasField("activity_type") else "",
        state=state,
        attempt_number=max(pending.attempt, 1),
        scheduled_time=_timestamp(pending, "scheduled_time"),
        last_started_time=last_started_time,
    )


def build_list_query(window: TimeWindow, partition: ListPartition) -> str:
    status_clause = (
        "ExecutionStatus = 'Running'"
        if partition is ListPartition.OPEN
        else "ExecutionStatus != 'Running'"
    )
    return (
        f"{status_clause} "
        f"AND StartTime >= '{window.earliest.isoformat()}' "
        f"AND StartTime <= '{window.latest.isoformat()}'"
    )


class TemporalExecutionBackend(ExecutionBackend):
    """Temporal implementation of ExecutionBackend."""

    def __init__(self, client: Client):
        self.client = client

    async def start_execution(
        self,
        workflow_type: str,
        workflow_id: str,
        args: list[Any],
        options: StartOptions,
    ) -> StartedExecution:
        """Start a Temporal workflow."""
        try:
            handle = await self.client.start_workflow(
                workflow_type,
                args=args,
                id=workflow_id,
                task_queue=options.task_queue,
                execution_timeout=options.execution_timeout,
                task_timeout=options.task_timeout,
            )
        except WorkflowAlreadyStartedError as e:
            raise StartFailed(
                f"Failed to start workflow: {e}",
                workflow_id=workflow_id,
                original_error=str(e),
            ) from e
        except RPCError as e:
            error_cls = BackendUnavailable if e.status == RPCStatusCode.UNAVAILABLE else StartFailed
            raise error_cls(
                f"Failed to start workflow: {e.message}",
                workflow_id=workflow_id,
                original_error=str(e),
            ) from e

        logger.info(f"Started Temporal workflow {workflow_id} ({workflow_type})")
        return StartedExecution(id=handle.id, run_id=handle.first_execution_run_id or "")

    async def list_executions(
        self, window: TimeWindow, partition: ListPartition, limit: int
    ) -> list[Execution]:
        """List Temporal workflows from one visibility partition."""
        query = build_list_query(window, partition)
        executions: list[Execution] = []
        try:
            async for info in self.client.list_workflows(query, limit=limit):
                executions.append(convert_execution(info))
        except RPCError as e:
            error_cls = BackendUnavailable if e.status == RPCStatusCode.UNAVAILABLE else BackendError
            raise error_cls(e.message, original_error=str(e)) from e
        return executions

    async def describe_execution(
        self, workflow_id: str, run_id: str | None = None
    ) -> ExecutionDescription:
        """Describe a Temporal workflow and its pending activities."""
        handle = self.client.get_workflow_handle(workflow_id, run_id=run_id or None)
        try:
            description = await handle.describe()
        except RPCError as e:
            if e.status == RPCStatusCode.NOT_FOUND:
                raise ExecutionNotFound(
                    f"Workflow execution not found: {e.message}",
                    workflow_id=workflow_id,
                    run_id=run_id,
                ) from e
            error_cls = BackendUnavailable if e.status == RPCStatusCode.UNAVAILABLE else BackendError
            raise error_cls(
                e.message, workflow_id=workflow_id, run_id=run_id, original_error=str(e)
            ) from e

        pending = description.raw_description.pending_activities
        return ExecutionDescription(
            execution=convert_execution(description),
            pending_activities=[convert_pending_activity(activity) for activity in pending],
        )

    async def get_execution_history(
        self, workflow_id: str, run_id: str | None = None, page_size: int | None = None
    ) -> AsyncIterator[HistoryEvent]:
        """Stream a Temporal workflow's history, page by page."""
        handle = self.client.get_workflow_handle(workflow_id, run_id=run_id or None)
        events = handle.fetch_history_events(
            page_size=page_size or None,
            event_filter_type=WorkflowHistoryEventFilterType.ALL_EVENT,
        )
        try:
            async for event in events:
                yield convert_history_event(event)
        except RPCError as e:
            if e.status == RPCStatusCode.NOT_FOUND:
                raise ExecutionNotFound(
                    f"Workflow execution not found: {e.message}",
                    workflow_id=workflow_id,
                    run_id=run_id,
                ) from e
            raise BackendError(
                e.message, workflow_id=workflow_id, run_id=run_id, original_error=str(e)
            ) from e
