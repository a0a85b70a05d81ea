"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_int, optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .reconcile import ReconcileConfig, get_reconcile_config
from .workspace import WorkspaceConfig, get_workspace_config

__all__ = [
    "ConfigurationError",
    "ReconcileConfig",
    "WorkspaceConfig",
    "configure_logging",
    "get_reconcile_config",
    "get_workspace_config",
    "optional_env_int",
    "optional_env_var",
]
