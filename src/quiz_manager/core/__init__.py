"""Core shared helpers for quiz-manager commands."""

from __future__ import annotations

from .config import (
    TomlConfigError,
    load_toml,
    merge_defaults,
    with_defaults,
    write_toml_template,
)
from .logging import JsonLogFormatter, configure_logger, release_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "with_defaults",
    "write_toml_template",
    "JsonLogFormatter",
    "configure_logger",
    "release_logger",
    "WORKSPACE_ENV",
    "WorkspaceError",
    "WorkspaceLayout",
    "ensure_workspace",
]
