"""Data models for alpi.

This module exports the core data structures used throughout the application.
"""

from alpi.models.mapping import ConfigMapping, MappingEntry
from alpi.models.mode import ExecutionMode
from alpi.models.results import (
    CheckResult,
    CheckStatus,
    DeployReport,
    RemovalResult,
    RemovalStatus,
    SyncResult,
    SyncStatus,
    UninstallReport,
    VerifyOutcome,
    VerifyReport,
)
from alpi.models.stack import (
    SessionConfig,
    StackConfig,
    default_apps_stack,
    default_desktop_stack,
    default_stacks,
)

__all__ = [
    "CheckResult",
    "CheckStatus",
    "ConfigMapping",
    "DeployReport",
    "ExecutionMode",
    "MappingEntry",
    "RemovalResult",
    "RemovalStatus",
    "SessionConfig",
    "StackConfig",
    "SyncResult",
    "SyncStatus",
    "UninstallReport",
    "VerifyOutcome",
    "VerifyReport",
    "default_apps_stack",
    "default_desktop_stack",
    "default_stacks",
]
