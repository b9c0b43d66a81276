"""Execution backends consumed by the gateway."""

from .base import ExecutionBackend
from .temporal_backend import TemporalExecutionBackend, connect_temporal_client

__all__ = [
    "ExecutionBackend",
    "TemporalExecutionBackend",
    "connect_temporal_client",
]
