"""
Core modules for the run unblocker.
"""

from .models import (
    Run,
    RunStatus,
    Workspace,
    WorkspaceRecord,
    WorkspaceList,
    RunList,
    Pagination,
    Action,
    DisposalRecord,
    DisposalSummary,
)
from .client import TFEClient, TFEError, NotFoundError, ClientError
from .config import Settings, ConfigError
from .scanner import ScanError, list_waiting_runs, list_workspaces_with_run_status
from .disposer import Disposer, decide
from .log import configure_logging

__all__ = [
    "Run",
    "RunStatus",
    "Workspace",
    "WorkspaceRecord",
    "WorkspaceList",
    "RunList",
    "Pagination",
    "Action",
    "DisposalRecord",
    "DisposalSummary",
    "TFEClient",
    "TFEError",
    "NotFoundError",
    "ClientError",
    "Settings",
    "ConfigError",
    "ScanError",
    "list_waiting_runs",
    "list_workspaces_with_run_status",
    "Disposer",
    "decide",
    "configure_logging",
]
