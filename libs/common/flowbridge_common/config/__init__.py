"""Configuration management for FlowBridge.

Settings are grouped per concern and read from the environment
(``APP__*``, ``WORKFLOW__*``) or a local ``.env`` file.
"""

from .app import AppSettings
from .base import BaseAppSettings
from .settings import Settings, get_settings
from .workflow import WorkflowSettings

__all__ = [
    # App
    "AppSettings",
    # Base
    "BaseAppSettings",
    # Main settings
    "Settings",
    # Workflow
    "WorkflowSettings",
    "get_settings",
]
