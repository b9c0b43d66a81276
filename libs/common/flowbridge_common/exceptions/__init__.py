"""Exception classes for FlowBridge.

Every error the gateway surfaces to an HTTP caller derives from
``GatewayError``; handlers map each class onto a status code.
"""

from .gateway import (
    BackendError,
    BackendUnavailable,
    ExecutionNotFound,
    GatewayError,
    ListFailed,
    ProjectionError,
    StartFailed,
    ValidationError,
)
from .handlers import (
    GATEWAY_ERROR_HANDLERS,
    execution_not_found_handler,
    gateway_error_handler,
    request_validation_error_handler,
    validation_error_handler,
)
from .registration import register_gateway_error_handlers

__all__ = [
    "GATEWAY_ERROR_HANDLERS",
    "BackendError",
    "BackendUnavailable",
    "ExecutionNotFound",
    # Exception classes
    "GatewayError",
    "ListFailed",
    "ProjectionError",
    "StartFailed",
    "ValidationError",
    # Error handlers
    "execution_not_found_handler",
    "gateway_error_handler",
    # Registration utilities
    "register_gateway_error_handlers",
    "request_validation_error_handler",
    "validation_error_handler",
]
