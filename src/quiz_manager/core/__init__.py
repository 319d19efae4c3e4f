"""Shared configuration, logging and workspace helpers."""

from __future__ import annotations

from .config import (
    CONFIG_FILENAME,
    ConfigError,
    QuizConfig,
    load_config,
    write_template,
)
from .logging import JsonLogFormatter, configure_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "QuizConfig",
    "load_config",
    "write_template",
    "configure_logger",
    "JsonLogFormatter",
    "ensure_workspace",
    "WorkspaceLayout",
    "WorkspaceError",
    "WORKSPACE_ENV",
]
