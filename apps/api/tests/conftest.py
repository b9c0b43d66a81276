"""Fixtures for FlowBridge API tests."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from flowbridge_api.main import create_app
from flowbridge_common.config import AppSettings, Settings, WorkflowSettings
from flowbridge_execution.backend import ExecutionBackend
from flowbridge_execution.gateway import GatewayContext

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def t0() -> datetime:
    return T0


@pytest.fixture
def mock_backend() -> AsyncMock:
    backend = AsyncMock(spec=ExecutionBackend)
    backend.get_execution_history = MagicMock()
    return backend


@pytest.fixture
def client(mock_backend) -> TestClient:
    """Test client for an app wired to the mock backend, no Temporal involved."""
    settings = Settings(
        app=AppSettings(RUN_WORKER=False),
        workflow=WorkflowSettings(TEMPORAL_TASK_QUEUE="test-queue"),
    )
    context = GatewayContext(backend=mock_backend, settings=settings.workflow, clock=lambda: T0)
    return TestClient(create_app(settings=settings, gateway_context=context))
