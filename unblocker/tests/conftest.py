import pytest
import structlog

from unblocker.core.models import RunList, WorkspaceList
from unblocker.tests.fakes import FakeClient, paged, runs, workspace


@pytest.fixture(autouse=True)
def reset_structlog():
    """CLI tests point structlog at a captured stream; undo that after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def acme_client():
    """
    Organization with two stalled workspaces and one healthy one.

    net-prod auto-applies and has two runs queued behind its current run;
    net-dev doesn't auto-apply and has nothing queued.
    """
    w1 = workspace("ws-1", "net-prod", auto_apply=True, current=runs(("run-1", "cost_estimated"))[0])
    w2 = workspace("ws-2", "net-dev", auto_apply=False, current=runs(("run-4", "cost_estimated"))[0])
    w3 = workspace("ws-3", "net-stage", auto_apply=True, current=runs(("run-9", "applied"))[0])

    return FakeClient(
        workspace_pages=paged([[w1, w3], [w2]], WorkspaceList),
        run_pages={
            "ws-1": paged(
                [
                    runs(
                        ("run-1", "cost_estimated"),
                        ("run-2", "pending"),
                        ("run-3", "cost_estimated"),
                        ("run-0", "applied"),
                    )
                ],
                RunList,
            ),
            "ws-2": paged([runs(("run-4", "cost_estimated"), ("run-5", "applied"))], RunList),
        },
    )
