"""
Core data models for the run unblocker.

These Pydantic models are read-only snapshots of the Terraform Cloud /
Enterprise objects the scanner works with, plus the records the disposer
produces.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


class RunStatus(str, Enum):
    PENDING = "pending"
    FETCHING = "fetching"
    FETCHING_COMPLETED = "fetching_completed"
    PRE_PLAN_RUNNING = "pre_plan_running"
    PRE_PLAN_COMPLETED = "pre_plan_completed"
    QUEUING = "queuing"
    PLAN_QUEUED = "plan_queued"
    PLANNING = "planning"
    PLANNED = "planned"
    COST_ESTIMATING = "cost_estimating"
    COST_ESTIMATED = "cost_estimated"
    POLICY_CHECKING = "policy_checking"
    POLICY_OVERRIDE = "policy_override"
    POLICY_SOFT_FAILED = "policy_soft_failed"
    POLICY_CHECKED = "policy_checked"
    CONFIRMED = "confirmed"
    POST_PLAN_RUNNING = "post_plan_running"
    POST_PLAN_COMPLETED = "post_plan_completed"
    PLANNED_AND_FINISHED = "planned_and_finished"
    PLANNED_AND_SAVED = "planned_and_saved"
    APPLY_QUEUED = "apply_queued"
    APPLYING = "applying"
    APPLIED = "applied"
    DISCARDED = "discarded"
    ERRORED = "errored"
    CANCELED = "canceled"
    FORCE_CANCELED = "force_canceled"


# Statuses the unblocker collects from a run queue
WAITING_STATUSES = frozenset({RunStatus.COST_ESTIMATED.value, RunStatus.PENDING.value})


class Action(str, Enum):
    APPLY = "Apply"
    DISCARD = "Discard"
    CANCEL = "Cancel"
    SKIP = "Skip"
    NONE = "None"

    @property
    def comment(self) -> str:
        return f"{self.value}ing run automatically"

    @property
    def mutating(self) -> bool:
        return self in (Action.APPLY, Action.DISCARD, Action.CANCEL)


# ============================================================================
# API Models
# ============================================================================

class Run(BaseModel):
    id: str
    # Kept as a plain string so statuses newer than RunStatus still parse
    status: str = ""

    class Config:
        frozen = True

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Run:
        attributes = data.get("attributes") or {}
        return cls(id=data["id"], status=attributes.get("status") or "")


class WorkspaceRecord(BaseModel):
    """A workspace as returned by the workspace list endpoint."""
    id: str
    name: str
    auto_apply: bool = False
    current_run: Optional[Run] = None

    class Config:
        frozen = True

    @classmethod
    def from_api(
        cls, data: dict[str, Any], included_runs: dict[str, Run] = None
    ) -> WorkspaceRecord:
        """
        Build a record from a JSON:API workspace resource.

        The current run's status only comes back when the list request
        asked for ``include=current_run``; without it the run is known by
        ID alone and its status is empty.
        """
        attributes = data.get("attributes") or {}
        relationships = data.get("relationships") or {}
        current_run = None

        run_ref = (relationships.get("current-run") or {}).get("data")
        if run_ref:
            included_runs = included_runs or {}
            current_run = included_runs.get(run_ref["id"], Run(id=run_ref["id"]))

        return cls(
            id=data["id"],
            name=attributes.get("name", ""),
            auto_apply=bool(attributes.get("auto-apply", False)),
            current_run=current_run,
        )


class Pagination(BaseModel):
    current_page: int = Field(default=1, alias="current-page")
    next_page: Optional[int] = Field(default=None, alias="next-page")
    total_pages: Optional[int] = Field(default=None, alias="total-pages")
    total_count: Optional[int] = Field(default=None, alias="total-count")

    class Config:
        populate_by_name = True
        frozen = True

    @classmethod
    def from_api(cls, body: dict[str, Any]) -> Pagination:
        meta = (body.get("meta") or {}).get("pagination")
        if not meta:
            return cls()
        return cls(**meta)


class WorkspaceList(BaseModel):
    items: list[WorkspaceRecord] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class RunList(BaseModel):
    items: list[Run] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


# ============================================================================
# Scan Results
# ============================================================================

class Workspace(BaseModel):
    """
    A workspace whose current run is stalled, with its outstanding queue.

    ``runs[0]`` is the current run; everything after it is queued behind it,
    most recent first.
    """
    id: str
    name: str
    auto_apply: bool = False
    runs: tuple[Run, ...] = ()

    class Config:
        frozen = True


# ============================================================================
# Disposal Results
# ============================================================================

class DisposalRecord(BaseModel):
    run_id: str
    workspace_name: str
    action: Action
    dispatched: bool = False
    error: Optional[str] = None


class DisposalSummary(BaseModel):
    workspaces: int = 0
    records: list[DisposalRecord] = Field(default_factory=list)

    def add_record(self, record: DisposalRecord) -> None:
        self.records.append(record)

    def dispatched(self) -> list[DisposalRecord]:
        return [r for r in self.records if r.dispatched]

    def failed(self) -> list[DisposalRecord]:
        return [r for r in self.records if r.error is not None]
