"""
Run disposal.

Decides what to do with each waiting run based on where it sits in its
workspace's queue, then carries the decision out.
"""

from __future__ import annotations

from typing import Callable, Iterable

import structlog

from .client import TFEError
from .models import (
    Action,
    DisposalRecord,
    DisposalSummary,
    RunStatus,
    Workspace,
)


log = structlog.get_logger()


def decide(position: int, status: str, auto_apply: bool) -> Action:
    """
    Pick the action for the run at ``position`` in a workspace's queue.

    Position 0 is the current run, stuck waiting for confirmation after
    cost estimation. Later positions are runs that queued up behind it.
    """
    if position == 0:
        if status == RunStatus.COST_ESTIMATED:
            return Action.APPLY if auto_apply else Action.NONE
        if status == RunStatus.PENDING:
            # TFE starts it on its own once the queue moves
            return Action.SKIP
        return Action.NONE

    if status == RunStatus.COST_ESTIMATED:
        return Action.DISCARD
    if status == RunStatus.PENDING:
        return Action.CANCEL
    return Action.NONE


class Disposer:
    """
    Applies decide() to every run of every scanned workspace.

    Runs are handled in queue order so the current run is settled before
    anything queued behind it. A failed dispatch is logged and the next run
    is processed anyway.
    """

    def __init__(self, client, noop: bool = False):
        self.client = client
        self.noop = noop

    def _dispatcher(self, action: Action) -> Callable[[str, str], None]:
        return {
            Action.APPLY: self.client.apply_run,
            Action.DISCARD: self.client.discard_run,
            Action.CANCEL: self.client.cancel_run,
        }[action]

    def run_action(self, action: Action, run_id: str, workspace_name: str) -> bool:
        """
        Log a decision and, unless in noop mode, send it to TFE.

        Returns True if an API call was made.

        Raises:
            TFEError: if the API call fails.
        """
        log.info(
            "run_action",
            run_id=run_id,
            workspace_name=workspace_name,
            action=action.value.lower(),
        )

        if self.noop or not action.mutating:
            return False

        self._dispatcher(action)(run_id, action.comment)
        return True

    def dispose_workspace(self, workspace: Workspace, summary: DisposalSummary) -> None:
        for position, run in enumerate(workspace.runs):
            action = decide(position, run.status, workspace.auto_apply)
            if action is Action.NONE:
                continue

            record = DisposalRecord(
                run_id=run.id,
                workspace_name=workspace.name,
                action=action,
            )
            try:
                record.dispatched = self.run_action(action, run.id, workspace.name)
            except TFEError as e:
                record.error = str(e)
                log.error(
                    "run_action_failed",
                    run_id=run.id,
                    workspace_name=workspace.name,
                    action=action.value.lower(),
                    error=str(e),
                )
            summary.add_record(record)

    def dispose(self, workspaces: Iterable[Workspace]) -> DisposalSummary:
        summary = DisposalSummary()
        for workspace in workspaces:
            summary.workspaces += 1
            self.dispose_workspace(workspace, summary)
        return summary
