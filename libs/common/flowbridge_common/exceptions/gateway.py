"""Gateway-related exception classes."""


class GatewayError(Exception):
    """Base exception for errors raised while serving an execution request.

    Carries the execution identifiers, when known, for better error tracking.
    """

    error_code = "GATEWAY_ERROR"

    def __init__(
        self,
        message: str,
        workflow_id: str | None = None,
        run_id: str | None = None,
    ):
        """Initialize gateway error.

        Args:
            message: Error message
            workflow_id: ID of the workflow execution involved
            run_id: Run ID of the workflow execution involved
        """
        super().__init__(message)
        self.message = message
        self.workflow_id = workflow_id
        self.run_id = run_id

    def __str__(self) -> str:
        """Return string representation with context."""
        context_parts = []
        if self.workflow_id:
            context_parts.append(f"workflow_id={self.workflow_id}")
        if self.run_id:
            context_parts.append(f"run_id={self.run_id}")

        if context_parts:
            return f"{self.message} ({', '.join(context_parts)})"
        return self.message


class ValidationError(GatewayError):
    """Raised when a required request field is missing or malformed."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"{field} parameter is required")
        self.field = field


class ExecutionNotFound(GatewayError):  # noqa: N818
    """Raised when the backend reports no such workflow execution."""

    error_code = "EXECUTION_NOT_FOUND"


class BackendError(GatewayError):
    """Raised when a backend call fails."""

    error_code = "BACKEND_ERROR"

    def __init__(
        self,
        message: str,
        workflow_id: str | None = None,
        run_id: str | None = None,
        original_error: str | None = None,
    ):
        super().__init__(message, workflow_id=workflow_id, run_id=run_id)
        self.original_error = original_error


class BackendUnavailable(BackendError):  # noqa: N818
    """Raised when the backend cannot be reached at all."""

    error_code = "BACKEND_UNAVAILABLE"


class StartFailed(BackendError):  # noqa: N818
    """Raised when the backend rejects a start request (e.g. duplicate id)."""

    error_code = "START_FAILED"


class ListFailed(BackendError):  # noqa: N818
    """Raised when either list partition query fails."""

    error_code = "LIST_FAILED"


class ProjectionError(GatewayError):
    """Raised when a history event is missing a field the projection requires.

    This indicates a malformed event stream and should not occur in practice.
    """

    error_code = "PROJECTION_ERROR"
