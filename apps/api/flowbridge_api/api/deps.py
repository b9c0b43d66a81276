"""Dependencies for FastAPI endpoints."""

from typing import Annotated

from fastapi import Depends, Request
from flowbridge_execution.gateway import GatewayContext


def get_gateway_context(request: Request) -> GatewayContext:
    """Gateway context built by the application lifespan."""
    context: GatewayContext | None = getattr(request.app.state, "gateway_context", None)
    if context is None:
        raise RuntimeError("Gateway context is not initialized")
    return context


GatewayContextDep = Annotated[GatewayContext, Depends(get_gateway_context)]
