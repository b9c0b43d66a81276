"""Workflow definitions registered by the FlowBridge worker."""

from .constants import DEFAULT_NAME, WORKFLOW_NAME, HelloWorldActivities
from .hello_world_workflow import HelloWorldWorkflow

__all__ = [
    "DEFAULT_NAME",
    "WORKFLOW_NAME",
    "HelloWorldActivities",
    "HelloWorldWorkflow",
]
