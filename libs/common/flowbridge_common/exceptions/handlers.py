"""Error handlers for gateway exceptions."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .gateway import (
    BackendError,
    ExecutionNotFound,
    GatewayError,
    ProjectionError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _log_gateway_error(exc: GatewayError, request: Request) -> None:
    """Log gateway error with request context.

    Args:
        exc: The gateway exception
        request: FastAPI request object
    """
    log_context = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
        "request_method": request.method,
        "request_path": request.url.path,
    }
    if exc.workflow_id:
        log_context["workflow_id"] = exc.workflow_id
    if exc.run_id:
        log_context["run_id"] = exc.run_id
    if isinstance(exc, BackendError) and exc.original_error:
        log_context["original_error"] = exc.original_error

    if isinstance(exc, ValidationError):
        # Client errors, log at WARNING level
        logger.warning("Invalid request", extra=log_context)
    elif isinstance(exc, ExecutionNotFound):
        logger.info("Workflow execution not found", extra=log_context)
    else:
        logger.error("Gateway error occurred", extra=log_context)


def _error_response(status_code: int, exc: GatewayError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "error_code": exc.error_code},
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle missing or malformed request fields.

    Returns:
        JSONResponse with 400 status
    """
    _log_gateway_error(exc, request)
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


async def execution_not_found_handler(request: Request, exc: ExecutionNotFound) -> JSONResponse:
    """Handle unknown workflow executions.

    Unknown executions are reported as server errors, not 404.

    Returns:
        JSONResponse with 500 status
    """
    _log_gateway_error(exc, request)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Handle backend and projection errors.

    This is a catch-all handler for GatewayError instances that
    don't have more specific handlers.

    Returns:
        JSONResponse with 500 status
    """
    _log_gateway_error(exc, request)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render body decoding failures as a plain 400."""
    logger.warning(
        "Invalid request body",
        extra={"request_path": request.url.path, "errors": str(exc.errors())},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "error_code": ValidationError.error_code},
    )


GATEWAY_ERROR_HANDLERS = {
    ValidationError: validation_error_handler,
    ExecutionNotFound: execution_not_found_handler,
    BackendError: gateway_error_handler,
    ProjectionError: gateway_error_handler,
    GatewayError: gateway_error_handler,
    RequestValidationError: request_validation_error_handler,
}
