"""Abstract execution backend interface.

The gateway consumes exactly these four operations, so any durable-execution
engine that implements them can sit behind FlowBridge.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from ..models import (
    Execution,
    ExecutionDescription,
    HistoryEvent,
    ListPartition,
    StartedExecution,
    StartOptions,
    TimeWindow,
)


class ExecutionBackend(ABC):
    """Abstract interface for workflow execution backends."""

    @abstractmethod
    async def start_execution(
        self,
        workflow_type: str,
        workflow_id: str,
        args: list[Any],
        options: StartOptions,
    ) -> StartedExecution:
        """Start a workflow execution.

        Args:
            workflow_type: Registered name of the workflow to run
            workflow_id: Unique identifier for this execution
            args: Positional workflow arguments
            options: Task queue and timeout bounds

        Returns:
            Identifiers of the started run

        Raises:
            StartFailed: If the backend rejects the request
        """

    @abstractmethod
    async def list_executions(
        self, window: TimeWindow, partition: ListPartition, limit: int
    ) -> list[Execution]:
        """List executions started within ``window`` from one partition.

        Raises:
            BackendError: If the visibility query fails
        """

    @abstractmethod
    async def describe_execution(
        self, workflow_id: str, run_id: str | None = None
    ) -> ExecutionDescription:
        """Describe one execution, including its pending activity attempts.

        Raises:
            ExecutionNotFound: If the backend has no such execution
            BackendError: On any other failure
        """

    @abstractmethod
    def get_execution_history(
        self, workflow_id: str, run_id: str | None = None, page_size: int | None = None
    ) -> AsyncIterator[HistoryEvent]:
        """Stream the execution's history in ``event_id`` order.

        The stream is lazy and forward-only; pages are fetched as it is
        consumed and a failing page raises from the iterator.
        """
