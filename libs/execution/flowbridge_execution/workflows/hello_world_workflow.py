"""Hello world workflow.

Schedules exactly one greeting activity, waits for it and finishes with its
result. Activity failures fail the run with the activity's own message.
"""

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError, ApplicationError, FailureError

from .constants import (
    ACTIVITY_HEARTBEAT_TIMEOUT,
    ACTIVITY_MAXIMUM_ATTEMPTS,
    ACTIVITY_SCHEDULE_TO_START_TIMEOUT,
    ACTIVITY_START_TO_CLOSE_TIMEOUT,
    WORKFLOW_NAME,
    HelloWorldActivities,
)


def _failure_reason(error: ActivityError) -> str:
    """Message of the error raised inside the activity, not the wrapper."""
    cause = error.cause
    if isinstance(cause, FailureError) and cause.message:
        return cause.message
    return error.message or str(error)


@workflow.defn(name=WORKFLOW_NAME)
class HelloWorldWorkflow:
    """Greets ``name`` through a single activity call."""

    @workflow.run
    async def run(self, name: str) -> str:
        workflow.logger.info("helloworld workflow started")

        try:
            result: str = await workflow.execute_activity(
                HelloWorldActivities.say_hello,
                name,
                schedule_to_start_timeout=ACTIVITY_SCHEDULE_TO_START_TIMEOUT,
                start_to_close_timeout=ACTIVITY_START_TO_CLOSE_TIMEOUT,
                heartbeat_timeout=ACTIVITY_HEARTBEAT_TIMEOUT,
                retry_policy=RetryPolicy(maximum_attempts=ACTIVITY_MAXIMUM_ATTEMPTS),
            )
        except ActivityError as e:
            reason = _failure_reason(e)
            workflow.logger.error(f"Activity failed. error={reason}")
            raise ApplicationError(reason, non_retryable=True) from e

        workflow.logger.info(f"Workflow completed. Result={result}")
        return result
