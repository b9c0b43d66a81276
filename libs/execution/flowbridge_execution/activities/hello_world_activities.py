"""Greeting activity for the hello world workflow."""

from temporalio import activity

from ..workflows.constants import HelloWorldActivities


def format_greeting(name: str) -> str:
    return "Hello " + name + "!"


@activity.defn(name=HelloWorldActivities.say_hello)
async def hello_world_activity(name: str) -> str:
    """Return a greeting for ``name``. Pure, never fails."""
    activity.logger.info("helloworld activity started")
    return format_greeting(name)


def make_hello_world_activities() -> list:
    """Activities to register on the worker."""
    return [hello_world_activity]
