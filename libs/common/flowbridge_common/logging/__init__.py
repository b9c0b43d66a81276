"""Logging setup with execution context."""

from .config import ExecutionContextFormatter, setup_logging
from .context_logger import ContextLogger, get_context_logger
from .middleware import RequestLoggingMiddleware

__all__ = [
    "ContextLogger",
    "ExecutionContextFormatter",
    "RequestLoggingMiddleware",
    "get_context_logger",
    "setup_logging",
]
