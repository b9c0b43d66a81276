"""Constants for the hello world workflow."""

from datetime import timedelta

WORKFLOW_NAME = "HelloWorldWorkflow"
DEFAULT_NAME = "World"


class HelloWorldActivities:
    """Activity function references to avoid hardcoded strings."""

    say_hello = "hello_world_activity"


# Activity options
ACTIVITY_SCHEDULE_TO_START_TIMEOUT = timedelta(minutes=1)
ACTIVITY_START_TO_CLOSE_TIMEOUT = timedelta(minutes=1)
ACTIVITY_HEARTBEAT_TIMEOUT = timedelta(seconds=20)

# A single attempt: activity errors fail the run instead of being retried
ACTIVITY_MAXIMUM_ATTEMPTS = 1
