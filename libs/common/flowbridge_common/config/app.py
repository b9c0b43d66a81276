"""Application settings configuration."""

from pydantic_settings import SettingsConfigDict

from .base import BaseAppSettings


class AppSettings(BaseAppSettings):
    """General application configuration."""

    APP_NAME: str = "FlowBridge"
    HOST: str = "0.0.0.0"  # noqa: S104
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    STRUCTURED_LOGGING: bool = False

    # The API process also hosts the Temporal worker unless disabled
    RUN_WORKER: bool = True

    model_config = SettingsConfigDict(env_prefix="APP__", env_file=".env", extra="ignore")

