"""Execution record model.

Executions, activity attempts and history events as the backend reports
them, plus the caller-facing views the projector produces. History is the
only source of truth; nothing here is persisted by FlowBridge.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ExecutionStatus(str, Enum):
    """Lifecycle status of one workflow run."""

    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"
    CANCELED = "CANCELED"
    TERMINATED = "TERMINATED"
    CONTINUED_AS_NEW = "CONTINUED_AS_NEW"

    @property
    def is_terminal(self) -> bool:
        return self is not ExecutionStatus.RUNNING


class ActivityState(str, Enum):
    """State of a single activity attempt."""

    SCHEDULED = "SCHEDULED"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"
    CANCELED = "CANCELED"

    @property
    def is_terminal(self) -> bool:
        return self not in (ActivityState.SCHEDULED, ActivityState.STARTED)


class ListPartition(str, Enum):
    """Visibility partition queried when listing executions."""

    OPEN = "open"
    CLOSED = "closed"


class Execution(BaseModel):
    """One workflow run, identified by ``(id, run_id)``."""

    model_config = ConfigDict(frozen=True)

    id: str
    run_id: str
    workflow_type: str = ""
    start_time: datetime
    close_time: datetime | None = None
    status: ExecutionStatus = ExecutionStatus.RUNNING
    history_length: int = 0

    @model_validator(mode="after")
    def _close_time_matches_status(self) -> "Execution":
        if self.status is ExecutionStatus.RUNNING and self.close_time is not None:
            raise ValueError("a running execution cannot have a close time")
        return self

    def execution_time(self, now: datetime) -> timedelta:
        """Elapsed run time; grows on every call while the run is open."""
        return (self.close_time or now) - self.start_time


class ActivityAttempt(BaseModel):
    """A scheduled, executing or finished activity attempt within an execution."""

    model_config = ConfigDict(frozen=True)

    activity_id: str
    activity_type: str = ""
    state: ActivityState
    attempt_number: int = Field(default=1, ge=1)
    scheduled_time: datetime | None = None
    last_started_time: datetime | None = None


class HistoryEvent(BaseModel):
    """An immutable entry of an execution's event log."""

    model_config = ConfigDict(frozen=True)

    event_id: int = Field(ge=1)
    event_type: str
    timestamp: datetime | None
    payload: dict[str, Any] = Field(default_factory=dict)


class ExecutionDescription(BaseModel):
    """Point-in-time description of an execution and its pending activities."""

    model_config = ConfigDict(frozen=True)

    execution: Execution
    pending_activities: list[ActivityAttempt] = Field(default_factory=list)


class StartedExecution(BaseModel):
    """Identifiers of a freshly started execution."""

    model_config = ConfigDict(frozen=True)

    id: str
    run_id: str


class StartOptions(BaseModel):
    """Bounds submitted with a start request."""

    model_config = ConfigDict(frozen=True)

    task_queue: str
    execution_timeout: timedelta
    task_timeout: timedelta


class TimeWindow(BaseModel):
    """Closed interval of start times used to filter listings."""

    model_config = ConfigDict(frozen=True)

    earliest: datetime
    latest: datetime

    @classmethod
    def trailing(cls, now: datetime, length: timedelta) -> "TimeWindow":
        return cls(earliest=now - length, latest=now)


def utc_now() -> datetime:
    return datetime.now(UTC)


# Caller-facing views


class _View(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExecutionView(_View):
    workflow_id: str
    run_id: str
    workflow_type: str
    start_time: datetime | None
    close_time: datetime | None = None
    status: ExecutionStatus
    execution_time: str = Field(description="Elapsed time as a duration string, e.g. 1m30.5s")
    history_length: int


class PendingActivityView(_View):
    activity_id: str
    activity_type: str
    state: ActivityState
    attempt: int
    scheduled_time: datetime | None = None
    last_started_time: datetime | None = None


class HistoryEventView(_View):
    event_id: int
    event_type: str
    timestamp: datetime | None
    details: str


class HistorySnapshot(BaseModel):
    """Execution state folded from an event sequence."""

    model_config = ConfigDict(frozen=True)

    workflow_id: str = ""
    run_id: str = ""
    workflow_type: str = ""
    start_time: datetime | None = None
    close_time: datetime | None = None
    status: ExecutionStatus = ExecutionStatus.RUNNING
    history_length: int = 0

    def execution_time(self, now: datetime) -> timedelta | None:
        if self.start_time is None:
            return None
        return (self.close_time or now) - self.start_time
