"""Utility functions for registering gateway error handlers."""

from fastapi import FastAPI

from .handlers import GATEWAY_ERROR_HANDLERS


def register_gateway_error_handlers(app: FastAPI) -> None:
    """Register all gateway error handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    for exception_class, handler in GATEWAY_ERROR_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
