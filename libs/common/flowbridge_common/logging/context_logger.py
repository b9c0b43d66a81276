"""Context-aware logger that automatically includes execution context."""

import logging
from typing import Any


class ContextLogger:
    """Logger wrapper that adds workflow/run identifiers to every record."""

    def __init__(
        self,
        logger: logging.Logger,
        workflow_id: str | None = None,
        run_id: str | None = None,
    ):
        """Initialize context logger.

        Args:
            logger: The underlying logger to wrap
            workflow_id: Workflow execution id to include in logs
            run_id: Run id to include in logs
        """
        self.logger = logger
        self.workflow_id = workflow_id
        self.run_id = run_id

    def _get_extra_context(self, extra: dict[str, Any] | None = None) -> dict[str, Any]:
        context = extra.copy() if extra else {}
        if self.workflow_id:
            context.setdefault("workflow_id", self.workflow_id)
        if self.run_id:
            context.setdefault("run_id", self.run_id)
        return context

    def bind(self, workflow_id: str | None = None, run_id: str | None = None) -> "ContextLogger":
        """Return a new logger carrying the given execution identifiers."""
        return ContextLogger(
            self.logger,
            workflow_id=workflow_id or self.workflow_id,
            run_id=run_id or self.run_id,
        )

    def debug(
        self, msg: str, *args: Any, extra: dict[str, Any] | None = None, **kwargs: Any
    ) -> None:
        self.logger.debug(msg, *args, extra=self._get_extra_context(extra), **kwargs)

    def info(
        self, msg: str, *args: Any, extra: dict[str, Any] | None = None, **kwargs: Any
    ) -> None:
        self.logger.info(msg, *args, extra=self._get_extra_context(extra), **kwargs)

    def warning(
        self, msg: str, *args: Any, extra: dict[str, Any] | None = None, **kwargs: Any
    ) -> None:
        self.logger.warning(msg, *args, extra=self._get_extra_context(extra), **kwargs)

    def error(
        self, msg: str, *args: Any, extra: dict[str, Any] | None = None, **kwargs: Any
    ) -> None:
        self.logger.error(msg, *args, extra=self._get_extra_context(extra), **kwargs)

    def exception(
        self, msg: str, *args: Any, extra: dict[str, Any] | None = None, **kwargs: Any
    ) -> None:
        self.logger.exception(msg, *args, extra=self._get_extra_context(extra), **kwargs)


def get_context_logger(
    name: str, workflow_id: str | None = None, run_id: str | None = None
) -> ContextLogger:
    """Get a context-aware logger.

    Args:
        name: Logger name
        workflow_id: Workflow execution id
        run_id: Run id

    Returns:
        Context-aware logger instance
    """
    return ContextLogger(logging.getLogger(name), workflow_id=workflow_id, run_id=run_id)
