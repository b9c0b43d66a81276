"""Workflow backend and execution configuration."""

from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkflowSettings(BaseSettings):
    """Workflow execution configuration."""

    # Temporal-specific settings
    TEMPORAL_SERVER_URL: str = "127.0.0.1:7233"
    TEMPORAL_NAMESPACE: str = "default"
    TEMPORAL_TASK_QUEUE: str = "hello-world-worker"

    # Worker settings
    TEMPORAL_MAX_CONCURRENT_ACTIVITIES: int = 10
    TEMPORAL_MAX_CONCURRENT_WORKFLOWS: int = 5

    # Start options
    WORKFLOW_ID_PREFIX: str = "hello-world-"
    EXECUTION_TIMEOUT_MINUTES: int = 10
    TASK_TIMEOUT_MINUTES: int = 1

    # Visibility queries
    LIST_WINDOW_HOURS: int = 24
    LIST_PAGE_SIZE: int = 100
    HISTORY_PAGE_SIZE: int = 0  # 0 lets the server pick

    model_config = SettingsConfigDict(env_prefix="WORKFLOW__", env_file=".env", extra="ignore")

    @property
    def execution_timeout(self) -> timedelta:
        return timedelta(minutes=self.EXECUTION_TIMEOUT_MINUTES)

    @property
    def task_timeout(self) -> timedelta:
        return timedelta(minutes=self.TASK_TIMEOUT_MINUTES)

    @property
    def list_window(self) -> timedelta:
        return timedelta(hours=self.LIST_WINDOW_HOURS)
