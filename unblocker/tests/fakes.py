"""
In-memory stand-in for TFEClient.
"""

from __future__ import annotations

from unblocker.core.client import TFEError
from unblocker.core.models import (
    Pagination,
    Run,
    RunList,
    WorkspaceList,
    WorkspaceRecord,
)


def paged(items_per_page: list[list], list_cls):
    """Wrap item lists into numbered pages linked by next_page."""
    pages = []
    for index, items in enumerate(items_per_page):
        last = index == len(items_per_page) - 1
        pages.append(
            list_cls(
                items=items,
                pagination=Pagination(
                    current_page=index + 1,
                    next_page=None if last else index + 2,
                ),
            )
        )
    return pages


def runs(*pairs: tuple[str, str]) -> list[Run]:
    return [Run(id=run_id, status=status) for run_id, status in pairs]


def workspace(ws_id: str, name: str, auto_apply: bool = False, current: Run = None) -> WorkspaceRecord:
    return WorkspaceRecord(id=ws_id, name=name, auto_apply=auto_apply, current_run=current)


class FakeClient:
    """
    Serves canned pages and records every call.

    ``run_pages`` maps a workspace ID to its list of RunList pages. A
    workspace ID or action listed in ``fail`` raises TFEError instead.
    """

    def __init__(self, workspace_pages: list = None, run_pages: dict = None, fail: set = None):
        self.workspace_pages = workspace_pages or [WorkspaceList()]
        self.run_pages = run_pages or {}
        self.fail = fail or set()
        self.calls: list[tuple] = []

    def list_workspaces(self, org, search="", include_current_run=True, page=1):
        self.calls.append(("list_workspaces", org, search, page))
        if "workspaces" in self.fail:
            raise TFEError("boom", 500)
        return self.workspace_pages[page - 1]

    def list_runs(self, workspace_id, page=1):
        self.calls.append(("list_runs", workspace_id, page))
        if workspace_id in self.fail:
            raise TFEError("boom", 500)
        pages = self.run_pages.get(workspace_id) or [RunList()]
        return pages[page - 1]

    def _action(self, name, run_id, comment):
        self.calls.append((name, run_id, comment))
        if run_id in self.fail:
            raise TFEError(f"{name} {run_id} conflict", 409)

    def apply_run(self, run_id, comment):
        self._action("apply", run_id, comment)

    def discard_run(self, run_id, comment):
        self._action("discard", run_id, comment)

    def cancel_run(self, run_id, comment):
        self._action("cancel", run_id, comment)

    def action_calls(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("apply", "discard", "cancel")]

    def fetches(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]
