"""History projector.

Folds an execution's ordered event log into a status snapshot and a
human-readable timeline. Everything here is pure: no I/O, no clock reads
(``now`` is always passed in), so re-deriving from the same events always
yields the same answer.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from flowbridge_common.exceptions import ProjectionError

from .models import (
    ActivityAttempt,
    Execution,
    ExecutionStatus,
    ExecutionView,
    HistoryEvent,
    HistoryEventView,
    HistorySnapshot,
    PendingActivityView,
)

WORKFLOW_EXECUTION_STARTED = "WorkflowExecutionStarted"

TERMINAL_EVENT_STATUSES: dict[str, ExecutionStatus] = {
    "WorkflowExecutionCompleted": ExecutionStatus.COMPLETED,
    "WorkflowExecutionFailed": ExecutionStatus.FAILED,
    "WorkflowExecutionTimedOut": ExecutionStatus.TIMED_OUT,
    "WorkflowExecutionCanceled": ExecutionStatus.CANCELED,
    "WorkflowExecutionTerminated": ExecutionStatus.TERMINATED,
    "WorkflowExecutionContinuedAsNew": ExecutionStatus.CONTINUED_AS_NEW,
}

DETAIL_TEMPLATES: dict[str, str] = {
    "WorkflowExecutionStarted": "Workflow started with input",
    "ActivityTaskScheduled": "Activity: {activityType}",
    "ActivityTaskStarted": "Activity execution started",
    "ActivityTaskCompleted": "Activity completed successfully",
    "ActivityTaskFailed": "Activity failed: {reason}",
    "WorkflowExecutionCompleted": "Workflow completed successfully",
    "WorkflowExecutionFailed": "Workflow failed: {reason}",
}


def fold_history(
    events: Iterable[HistoryEvent], workflow_id: str = "", run_id: str = ""
) -> HistorySnapshot:
    """Derive the execution snapshot from its event log in a single pass.

    The first ``WorkflowExecutionStarted`` sets the start time; the first
    terminal event sets status and close time, and nothing after it can
    change them again.

    Raises:
        ProjectionError: If the start event carries no timestamp.
    """
    start_time: datetime | None = None
    close_time: datetime | None = None
    workflow_type = ""
    status = ExecutionStatus.RUNNING
    count = 0

    for event in events:
        count += 1

        if event.event_type == WORKFLOW_EXECUTION_STARTED and start_time is None:
            if event.timestamp is None:
                raise ProjectionError(
                    f"{WORKFLOW_EXECUTION_STARTED} event {event.event_id} has no timestamp",
                    workflow_id=workflow_id or None,
                    run_id=run_id or None,
                )
            start_time = event.timestamp
            workflow_type = str(event.payload.get("workflowType", ""))
            continue

        terminal_status = TERMINAL_EVENT_STATUSES.get(event.event_type)
        if terminal_status is not None and not status.is_terminal:
            status = terminal_status
            close_time = event.timestamp

    return HistorySnapshot(
        workflow_id=workflow_id,
        run_id=run_id,
        workflow_type=workflow_type,
        start_time=start_time,
        close_time=close_time,
        status=status,
        history_length=count,
    )


def describe_event(event: HistoryEvent) -> str:
    """Render the fixed human-readable details for an event.

    Unknown event types render as an empty string; new backend versions
    may add event types at any time.
    """
    template = DETAIL_TEMPLATES.get(event.event_type)
    if template is None:
        return ""
    return template.format(
        activityType=event.payload.get("activityType", ""),
        reason=event.payload.get("reason", ""),
    )


def _decimal(value: int, unit: int) -> str:
    whole, fraction = divmod(value, unit)
    if not fraction:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{fraction:0{width}d}".rstrip("0")


def format_duration(value: timedelta) -> str:
    """Render a duration the way Go's ``time.Duration`` prints it.

    ``1h2m3.5s``, ``1m0s``, ``2.5s``, ``1.5ms``, ``250µs``, ``0s``. Below one
    second the largest fitting sub-second unit is used; resolution is one
    microsecond.
    """
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_decimal(micros, 1_000)}ms"

    hours, rest = divmod(micros, 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    text = f"{_decimal(rest, 1_000_000)}s"
    if hours:
        text = f"{hours}h{minutes}m{text}"
    elif minutes:
        text = f"{minutes}m{text}"
    return sign + text


def project_event(event: HistoryEvent) -> HistoryEventView:
    return HistoryEventView(
        event_id=event.event_id,
        event_type=event.event_type,
        timestamp=event.timestamp,
        details=describe_event(event),
    )


def project_timeline(events: Iterable[HistoryEvent]) -> list[HistoryEventView]:
    """Map each event onto its display record, preserving order."""
    return [project_event(event) for event in events]


def project_execution(execution: Execution, now: datetime) -> ExecutionView:
    """Build the caller view of an execution.

    ``executionTime`` is recomputed against ``now`` on every call.
    """
    return ExecutionView(
        workflow_id=execution.id,
        run_id=execution.run_id,
        workflow_type=execution.workflow_type,
        start_time=execution.start_time,
        close_time=execution.close_time,
        status=execution.status,
        execution_time=format_duration(execution.execution_time(now)),
        history_length=execution.history_length,
    )


def project_snapshot(snapshot: HistorySnapshot, now: datetime) -> ExecutionView:
    elapsed = snapshot.execution_time(now)
    return ExecutionView(
        workflow_id=snapshot.workflow_id,
        run_id=snapshot.run_id,
        workflow_type=snapshot.workflow_type,
        start_time=snapshot.start_time,
        close_time=snapshot.close_time,
        status=snapshot.status,
        execution_time=format_duration(elapsed or timedelta(0)),
        history_length=snapshot.history_length,
    )


def project_pending_activities(attempts: Iterable[ActivityAttempt]) -> list[PendingActivityView]:
    """Views for the attempts that have not yet reached a terminal state."""
    return [
        PendingActivityView(
            activity_id=attempt.activity_id,
            activity_type=attempt.activity_type,
            state=attempt.state,
            attempt=attempt.attempt_number,
            scheduled_time=attempt.scheduled_time,
            last_started_time=attempt.last_started_time,
        )
        for attempt in attempts
        if not attempt.state.is_terminal
    ]
