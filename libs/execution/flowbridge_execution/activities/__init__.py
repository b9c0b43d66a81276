"""Activity definitions for FlowBridge."""

from .hello_world_activities import (
    format_greeting,
    hello_world_activity,
    make_hello_world_activities,
)

__all__ = [
    "format_greeting",
    "hello_world_activity",
    "make_hello_world_activities",
]
