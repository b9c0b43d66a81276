"""Request logging middleware for FastAPI."""

from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .context_logger import get_context_logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware that logs every request and its outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log it.

        Args:
            request: The incoming request
            call_next: The next middleware/handler in the chain

        Returns:
            The response from the handler
        """
        logger = get_context_logger(
            "flowbridge.request", workflow_id=request.query_params.get("workflowId")
        )
        logger.info(
            f"{request.method} {request.url.path}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params),
                "client_ip": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed: {e!s}",
                extra={
                    "error": str(e),
                    "method": request.method,
                    "path": request.url.path,
                    "exception_type": type(e).__name__,
                },
            )
            raise

        logger.info(
            f"Response {response.status_code}",
            extra={
                "status_code": response.status_code,
                "method": request.method,
                "path": request.url.path,
            },
        )
        return response
