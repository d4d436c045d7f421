"""
Workspace scanning.

Finds the workspaces whose current run is stuck and assembles the queue of
runs waiting behind it.
"""

from __future__ import annotations

from typing import Any

import structlog

from .client import TFEError
from .models import Run, RunStatus, Workspace, WAITING_STATUSES


log = structlog.get_logger()


class ScanError(Exception):
    """Raised when a paged listing fails part way through a scan."""

    def __init__(self, message: str, partial: list[Any] = None):
        super().__init__(message)
        self.partial = partial or []


def list_waiting_runs(client, workspace_id: str) -> list[Run]:
    """
    Collect the cost-estimated and pending runs of a workspace.

    Runs come back most recent first, so the current run leads the result.
    Paging continues only while the last run on a page is still pending:
    queued runs are assumed to be contiguous, and once a page ends on a run
    that has left the queue nothing older can still be waiting. A pending
    run sitting behind a finished one would not be collected.

    Raises:
        ScanError: if a page can't be fetched. ``partial`` holds the runs
            collected before the failure.
    """
    runs: list[Run] = []
    page = 1

    while True:
        try:
            result = client.list_runs(workspace_id, page=page)
        except TFEError as e:
            raise ScanError(
                f"Failed to list runs for workspace {workspace_id}: {e}", partial=runs
            ) from e

        log.debug("runs_page", workspace_id=workspace_id, page=page, count=len(result.items))

        for run in result.items:
            if run.status in WAITING_STATUSES:
                runs.append(run)

        if (
            result.items
            and result.items[-1].status == RunStatus.PENDING
            and result.pagination.next_page is not None
            and result.pagination.next_page > page
        ):
            page = result.pagination.next_page
        else:
            return runs


def list_workspaces_with_run_status(
    client,
    org: str,
    search: str = "",
    run_status: RunStatus = RunStatus.COST_ESTIMATED,
) -> list[Workspace]:
    """
    Find every workspace whose current run has ``run_status``.

    Each match carries its waiting run queue from list_waiting_runs().

    Raises:
        ScanError: on the first failed listing. ``partial`` holds the
            workspaces assembled before the failure.
    """
    workspaces: list[Workspace] = []
    page = 1

    while True:
        try:
            result = client.list_workspaces(org, search=search, include_current_run=True, page=page)
        except TFEError as e:
            raise ScanError(
                f"Failed to list workspaces for organization {org}: {e}", partial=workspaces
            ) from e

        log.debug("workspaces_page", organization=org, page=page, count=len(result.items))

        for ws in result.items:
            if ws.current_run is None or ws.current_run.status != run_status:
                continue

            try:
                runs = list_waiting_runs(client, ws.id)
            except ScanError as e:
                raise ScanError(str(e), partial=workspaces) from e

            workspaces.append(
                Workspace(
                    id=ws.id,
                    name=ws.name,
                    auto_apply=ws.auto_apply,
                    runs=runs,
                )
            )

        next_page = result.pagination.next_page
        if next_page is not None and next_page > page:
            page = next_page
        else:
            return workspaces
