"""Pytest configuration and fixtures for FlowBridge execution tests."""

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from flowbridge_common.config import WorkflowSettings
from flowbridge_execution.backend import ExecutionBackend
from flowbridge_execution.gateway import GatewayContext
from flowbridge_execution.models import HistoryEvent

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def t0() -> datetime:
    return T0


@pytest.fixture
def make_event():
    """Factory for history events spaced one second apart."""

    def _make(event_id: int, event_type: str, **payload) -> HistoryEvent:
        return HistoryEvent(
            event_id=event_id,
            event_type=event_type,
            timestamp=T0 + timedelta(seconds=event_id - 1),
            payload=payload,
        )

    return _make


@pytest.fixture
def completed_history(make_event) -> list[HistoryEvent]:
    """Event log of a run whose activity succeeded."""
    return [
        make_event(1, "WorkflowExecutionStarted", workflowType="HelloWorldWorkflow"),
        make_event(2, "WorkflowTaskScheduled"),
        make_event(3, "WorkflowTaskStarted"),
        make_event(4, "WorkflowTaskCompleted"),
        make_event(5, "ActivityTaskScheduled", activityType="hello_world_activity", activityId="5"),
        make_event(6, "ActivityTaskStarted"),
        make_event(7, "ActivityTaskCompleted"),
        make_event(8, "WorkflowTaskScheduled"),
        make_event(9, "WorkflowTaskStarted"),
        make_event(10, "WorkflowTaskCompleted"),
        make_event(11, "WorkflowExecutionCompleted"),
    ]


@pytest.fixture
def failed_history(make_event) -> list[HistoryEvent]:
    """Event log of a run whose activity failed with "boom"."""
    return [
        make_event(1, "WorkflowExecutionStarted", workflowType="HelloWorldWorkflow"),
        make_event(2, "ActivityTaskScheduled", activityType="hello_world_activity"),
        make_event(3, "ActivityTaskStarted"),
        make_event(4, "ActivityTaskFailed", reason="boom"),
        make_event(5, "WorkflowExecutionFailed", reason="boom"),
    ]


@pytest.fixture
def workflow_settings() -> WorkflowSettings:
    return WorkflowSettings(
        TEMPORAL_SERVER_URL="localhost:7233",
        TEMPORAL_NAMESPACE="test-namespace",
        TEMPORAL_TASK_QUEUE="test-queue",
    )


@pytest.fixture
def mock_backend() -> AsyncMock:
    """Backend double; history streams are configured per test."""
    backend = AsyncMock(spec=ExecutionBackend)
    backend.get_execution_history = MagicMock()
    return backend


@pytest.fixture
def gateway_context(mock_backend, workflow_settings) -> GatewayContext:
    return GatewayContext(backend=mock_backend, settings=workflow_settings, clock=lambda: T0)


@pytest.fixture
def stream():
    """Build a history stream that yields events, then optionally raises."""

    def _stream(events, error: Exception | None = None) -> AsyncIterator[HistoryEvent]:
        async def _gen():
            for event in events:
                yield event
            if error is not None:
                raise error

        return _gen()

    return _stream
