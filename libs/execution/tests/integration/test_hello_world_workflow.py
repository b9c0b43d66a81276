"""End-to-end runs of the hello world workflow on a time-skipping test server."""

import uuid

import pytest
import pytest_asyncio
from flowbridge_execution.activities import make_hello_world_activities
from flowbridge_execution.backend import TemporalExecutionBackend
from flowbridge_execution.models import ExecutionStatus, StartOptions
from flowbridge_execution.projector import fold_history, project_timeline
from flowbridge_execution.workflows import WORKFLOW_NAME, HelloWorldActivities, HelloWorldWorkflow
from temporalio import activity
from temporalio.client import WorkflowFailureError
from temporalio.exceptions import ApplicationError
from temporalio.testing import WorkflowEnvironment
from temporalio.worker import Worker

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def env():
    try:
        environment = await WorkflowEnvironment.start_time_skipping()
    except Exception as e:  # test server binary download or launch failed
        pytest.skip(f"Temporal test server unavailable: {e}")
    async with environment:
        yield environment


@pytest.fixture
def task_queue() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def start_options(task_queue, workflow_settings) -> StartOptions:
    return StartOptions(
        task_queue=task_queue,
        execution_timeout=workflow_settings.execution_timeout,
        task_timeout=workflow_settings.task_timeout,
    )


async def _collect(backend, workflow_id, run_id):
    return [event async for event in backend.get_execution_history(workflow_id, run_id)]


class TestHelloWorldWorkflowIntegration:
    @pytest.mark.asyncio
    async def test_greets_and_completes(self, env, task_queue, start_options):
        backend = TemporalExecutionBackend(env.client)
        workflow_id = f"hello-world-{uuid.uuid4()}"

        async with Worker(
            env.client,
            task_queue=task_queue,
            workflows=[HelloWorldWorkflow],
            activities=make_hello_world_activities(),
        ):
            started = await backend.start_execution(
                WORKFLOW_NAME, workflow_id, ["Ada"], start_options
            )
            result = await env.client.get_workflow_handle(workflow_id).result()

        assert result == "Hello Ada!"

        events = await _collect(backend, started.id, started.run_id)
        snapshot = fold_history(events, started.id, started.run_id)
        timeline = project_timeline(events)

        assert snapshot.status == ExecutionStatus.COMPLETED
        assert snapshot.workflow_type == WORKFLOW_NAME
        assert snapshot.history_length == len(events)
        assert timeline[0].details == "Workflow started with input"
        assert "Activity: hello_world_activity" in [view.details for view in timeline]
        assert timeline[-1].details == "Workflow completed successfully"

        description = await backend.describe_execution(started.id, started.run_id)
        assert description.execution.status == ExecutionStatus.COMPLETED
        assert description.pending_activities == []

    @pytest.mark.asyncio
    async def test_activity_failure_fails_run_without_retry(self, env, task_queue, start_options):
        attempts = 0

        @activity.defn(name=HelloWorldActivities.say_hello)
        async def failing_activity(name: str) -> str:
            nonlocal attempts
            attempts += 1
            raise ApplicationError("boom")

        backend = TemporalExecutionBackend(env.client)
        workflow_id = f"hello-world-{uuid.uuid4()}"

        async with Worker(
            env.client,
            task_queue=task_queue,
            workflows=[HelloWorldWorkflow],
            activities=[failing_activity],
        ):
            started = await backend.start_execution(
                WORKFLOW_NAME, workflow_id, ["Ada"], start_options
            )
            with pytest.raises(WorkflowFailureError):
                await env.client.get_workflow_handle(workflow_id).result()

        assert attempts == 1

        events = await _collect(backend, started.id, started.run_id)
        details = [view.details for view in project_timeline(events)]

        assert fold_history(events).status == ExecutionStatus.FAILED
        assert details.index("Activity failed: boom") < details.index("Workflow failed: boom")
        assert details[-1] == "Workflow failed: boom"
