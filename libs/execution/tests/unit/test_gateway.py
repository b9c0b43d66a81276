"""Unit tests for the execution gateway operations."""

from datetime import timedelta

import pytest
from flowbridge_common.exceptions import (
    BackendError,
    BackendUnavailable,
    ExecutionNotFound,
    ListFailed,
    StartFailed,
    ValidationError,
)
from flowbridge_execution.gateway import (
    get_history,
    list_executions,
    new_workflow_id,
    start_execution,
    validate_workflow_id,
)
from flowbridge_execution.gateway import describe_execution as describe
from flowbridge_execution.models import (
    ActivityAttempt,
    ActivityState,
    Execution,
    ExecutionDescription,
    ExecutionStatus,
    ListPartition,
    StartedExecution,
    TimeWindow,
)


def _execution(t0, workflow_id, status=ExecutionStatus.RUNNING):
    return Execution(
        id=workflow_id,
        run_id=f"{workflow_id}-run",
        workflow_type="HelloWorldWorkflow",
        start_time=t0,
        close_time=None if status is ExecutionStatus.RUNNING else t0 + timedelta(seconds=3),
        status=status,
    )


class TestWorkflowIds:
    def test_id_is_prefix_plus_utc_seconds(self, t0):
        assert new_workflow_id("hello-world-", t0) == "hello-world-20240501-120000"

    @pytest.mark.parametrize("workflow_id", [None, ""])
    def test_missing_id_is_rejected(self, workflow_id):
        with pytest.raises(ValidationError) as exc_info:
            validate_workflow_id(workflow_id)

        assert exc_info.value.field == "workflowId"
        assert exc_info.value.message == "workflowId parameter is required"

    def test_present_id_passes_through(self):
        assert validate_workflow_id("hello-world-1") == "hello-world-1"


class TestStartExecution:
    """Starting hello world executions."""

    @pytest.mark.asyncio
    async def test_start_with_default_name(self, gateway_context, mock_backend):
        mock_backend.start_execution.return_value = StartedExecution(
            id="hello-world-20240501-120000", run_id="run-1"
        )

        started = await start_execution(gateway_context)

        assert started.id == "hello-world-20240501-120000"
        assert started.run_id == "run-1"
        workflow_type, workflow_id, args, options = mock_backend.start_execution.call_args.args
        assert workflow_type == "HelloWorldWorkflow"
        assert workflow_id == "hello-world-20240501-120000"
        assert args == ["World"]
        assert options.task_queue == "test-queue"
        assert options.execution_timeout == timedelta(minutes=10)
        assert options.task_timeout == timedelta(minutes=1)

    @pytest.mark.asyncio
    async def test_start_with_custom_name(self, gateway_context, mock_backend):
        mock_backend.start_execution.return_value = StartedExecution(id="x", run_id="y")

        await start_execution(gateway_context, "Ada")

        assert mock_backend.start_execution.call_args.args[2] == ["Ada"]

    @pytest.mark.asyncio
    async def test_empty_name_falls_back_to_default(self, gateway_context, mock_backend):
        mock_backend.start_execution.return_value = StartedExecution(id="x", run_id="y")

        await start_execution(gateway_context, "")

        assert mock_backend.start_execution.call_args.args[2] == ["World"]

    @pytest.mark.asyncio
    async def test_rejected_start_propagates(self, gateway_context, mock_backend):
        mock_backend.start_execution.side_effect = StartFailed(
            "Failed to start workflow: already started"
        )

        with pytest.raises(StartFailed, match="already started"):
            await start_execution(gateway_context)


class TestListExecutions:
    """Merging the open and closed partitions."""

    @pytest.mark.asyncio
    async def test_open_before_closed(self, gateway_context, mock_backend, t0):
        open_runs = [_execution(t0, "hello-world-a")]
        closed_runs = [
            _execution(t0, "hello-world-b", ExecutionStatus.COMPLETED),
            _execution(t0, "hello-world-c", ExecutionStatus.FAILED),
        ]
        mock_backend.list_executions.side_effect = [open_runs, closed_runs]

        executions = await list_executions(gateway_context)

        assert [e.id for e in executions] == ["hello-world-a", "hello-world-b", "hello-world-c"]
        first, second = mock_backend.list_executions.call_args_list
        assert first.args[1] is ListPartition.OPEN
        assert second.args[1] is ListPartition.CLOSED
        assert first.args[2] == 100

    @pytest.mark.asyncio
    async def test_default_window_is_trailing_day(self, gateway_context, mock_backend, t0):
        mock_backend.list_executions.side_effect = [[], []]

        await list_executions(gateway_context)

        window = mock_backend.list_executions.call_args_list[0].args[0]
        assert window == TimeWindow(earliest=t0 - timedelta(hours=24), latest=t0)

    @pytest.mark.asyncio
    async def test_empty_backend(self, gateway_context, mock_backend):
        mock_backend.list_executions.side_effect = [[], []]

        assert await list_executions(gateway_context) == []

    @pytest.mark.asyncio
    async def test_closed_partition_failure_discards_everything(
        self, gateway_context, mock_backend, t0
    ):
        mock_backend.list_executions.side_effect = [
            [_execution(t0, "hello-world-a")],
            BackendError("visibility store down", original_error="rpc error"),
        ]

        with pytest.raises(ListFailed) as exc_info:
            await list_executions(gateway_context)

        assert exc_info.value.message == "Failed to list closed workflows: visibility store down"
        assert exc_info.value.original_error == "rpc error"

    @pytest.mark.asyncio
    async def test_open_partition_failure_skips_closed_query(self, gateway_context, mock_backend):
        mock_backend.list_executions.side_effect = BackendUnavailable("connection refused")

        with pytest.raises(ListFailed, match="Failed to list open workflows"):
            await list_executions(gateway_context)

        assert mock_backend.list_executions.await_count == 1


class TestDescribeExecution:
    @pytest.mark.asyncio
    async def test_returns_backend_description(self, gateway_context, mock_backend, t0):
        description = ExecutionDescription(
            execution=_execution(t0, "hello-world-a"),
            pending_activities=[
                ActivityAttempt(activity_id="5", state=ActivityState.SCHEDULED),
            ],
        )
        mock_backend.describe_execution.return_value = description

        result = await describe(gateway_context, "hello-world-a")

        assert result == description
        mock_backend.describe_execution.assert_awaited_once_with("hello-world-a", None)

    @pytest.mark.asyncio
    async def test_empty_run_id_means_latest_run(self, gateway_context, mock_backend, t0):
        mock_backend.describe_execution.return_value = ExecutionDescription(
            execution=_execution(t0, "hello-world-a")
        )

        await describe(gateway_context, "hello-world-a", "")

        mock_backend.describe_execution.assert_awaited_once_with("hello-world-a", None)

    @pytest.mark.asyncio
    async def test_not_found_propagates_unchanged(self, gateway_context, mock_backend):
        mock_backend.describe_execution.side_effect = ExecutionNotFound(
            "workflow not found", workflow_id="nope"
        )

        with pytest.raises(ExecutionNotFound):
            await describe(gateway_context, "nope")

    @pytest.mark.asyncio
    async def test_backend_failure_is_wrapped(self, gateway_context, mock_backend):
        mock_backend.describe_execution.side_effect = BackendError("deadline exceeded")

        with pytest.raises(BackendError) as exc_info:
            await describe(gateway_context, "hello-world-a", "run-1")

        assert exc_info.value.message == "Failed to get workflow status: deadline exceeded"
        assert exc_info.value.workflow_id == "hello-world-a"
        assert exc_info.value.run_id == "run-1"


class TestGetHistory:
    """Draining the history stream."""

    @pytest.mark.asyncio
    async def test_drains_every_event_in_order(
        self, gateway_context, mock_backend, stream, completed_history
    ):
        mock_backend.get_execution_history.return_value = stream(completed_history)

        events = await get_history(gateway_context, "hello-world-a", "run-1")

        assert events == completed_history
        mock_backend.get_execution_history.assert_called_once_with(
            "hello-world-a", "run-1", page_size=None
        )

    @pytest.mark.asyncio
    async def test_failure_mid_stream_returns_prefix(
        self, gateway_context, mock_backend, stream, completed_history
    ):
        mock_backend.get_execution_history.return_value = stream(
            completed_history[:4], BackendError("page fetch failed")
        )

        events = await get_history(gateway_context, "hello-world-a")

        assert events == completed_history[:4]

    @pytest.mark.asyncio
    async def test_unknown_execution_yields_empty_history(
        self, gateway_context, mock_backend, stream
    ):
        mock_backend.get_execution_history.return_value = stream(
            [], ExecutionNotFound("workflow not found", workflow_id="nope")
        )

        assert await get_history(gateway_context, "nope") == []
