"""Workflow API endpoints: start, list, status and history."""

from typing import Any

from fastapi import APIRouter, Query
from flowbridge_execution import gateway
from flowbridge_execution.projector import (
    fold_history,
    project_execution,
    project_pending_activities,
    project_snapshot,
    project_timeline,
)
from flowbridge_execution.workflows.constants import DEFAULT_NAME
from pydantic import BaseModel

from ..deps import GatewayContextDep

router = APIRouter(prefix="/api/workflows", tags=["workflows"])


class StartWorkflowRequest(BaseModel):
    name: str | None = None


@router.post("/start")
async def start_workflow(
    context: GatewayContextDep, payload: StartWorkflowRequest | None = None
) -> dict[str, str]:
    """Start a new hello world workflow execution."""
    name = (payload.name if payload else None) or DEFAULT_NAME
    started = await gateway.start_execution(context, name)
    return {
        "workflowId": started.id,
        "runId": started.run_id,
        "message": "Workflow started successfully",
    }


@router.get("/list")
async def list_workflows(context: GatewayContextDep) -> dict[str, Any]:
    """List open and closed workflow executions from the trailing window."""
    executions = await gateway.list_executions(context)
    now = context.now()
    workflows = [
        project_execution(execution, now).model_dump(by_alias=True, mode="json")
        for execution in executions
    ]
    return {"workflows": workflows, "count": len(workflows)}


@router.get("/status")
async def get_workflow_status(
    context: GatewayContextDep,
    workflow_id: str | None = Query(default=None, alias="workflowId"),
    run_id: str | None = Query(default=None, alias="runId"),
) -> dict[str, Any]:
    """Get the current status of a workflow execution and its pending activities."""
    workflow_id = gateway.validate_workflow_id(workflow_id)
    description = await gateway.describe_execution(context, workflow_id, run_id)

    response = project_execution(description.execution, context.now()).model_dump(
        by_alias=True, mode="json"
    )
    pending = project_pending_activities(description.pending_activities)
    if pending:
        response["pendingActivities"] = [
            activity.model_dump(by_alias=True, mode="json", exclude_none=True)
            for activity in pending
        ]
    return response


@router.get("/history")
async def get_workflow_history(
    context: GatewayContextDep,
    workflow_id: str | None = Query(default=None, alias="workflowId"),
    run_id: str | None = Query(default=None, alias="runId"),
) -> dict[str, Any]:
    """Get the complete event history of a workflow execution."""
    workflow_id = gateway.validate_workflow_id(workflow_id)
    events = await gateway.get_history(context, workflow_id, run_id)
    snapshot = project_snapshot(
        fold_history(events, workflow_id=workflow_id, run_id=run_id or ""), context.now()
    )

    return {
        "workflowId": workflow_id,
        "runId": run_id or "",
        "events": [
            event.model_dump(by_alias=True, mode="json") for event in project_timeline(events)
        ],
        "count": len(events),
        "status": snapshot.status.value,
        "executionTime": snapshot.execution_time,
        "historyLength": snapshot.history_length,
    }
