"""
Command-line interface for the run unblocker.

Usage:
    TFE_TOKEN=... python -m unblocker.cli -org my-org [-search net-] [-noop]
"""

from __future__ import annotations

import click
import structlog

from . import __version__
from .core.client import TFEClient, ClientError
from .core.config import Settings, ConfigError
from .core.disposer import Disposer
from .core.log import configure_logging
from .core.models import DisposalSummary, RunStatus
from .core.scanner import ScanError, list_workspaces_with_run_status


def unblock(settings: Settings, client) -> DisposalSummary:
    """Scan the organization and dispose of every stalled run queue."""
    workspaces = list_workspaces_with_run_status(
        client,
        settings.organization,
        settings.search,
        RunStatus.COST_ESTIMATED,
    )
    return Disposer(client, noop=settings.noop).dispose(workspaces)


@click.command(context_settings={"help_option_names": ["-h", "-help", "--help"]})
@click.version_option(version=__version__)
@click.option(
    "-org",
    "--org",
    default="",
    help="Terraform Cloud organization name",
)
@click.option(
    "-search",
    "--search",
    default="",
    help="Workspace search term",
)
@click.option(
    "-noop",
    "--noop",
    is_flag=True,
    help="Do not perform any action, only show what would happen",
)
@click.option(
    "-debug",
    "--debug",
    is_flag=True,
    help="Log every page fetched",
)
@click.pass_context
def cli(ctx: click.Context, org: str, search: str, noop: bool, debug: bool):
    """Apply or clear Terraform Cloud runs stuck after cost estimation."""
    if not org:
        click.echo(ctx.get_help(), err=True)
        ctx.exit(1)

    try:
        settings = Settings.from_env(org, search=search, noop=noop, debug=debug)
    except ConfigError as e:
        click.echo(str(e))
        ctx.exit(1)

    configure_logging(settings.debug)
    log = structlog.get_logger()

    if settings.noop:
        log.info("noop", noop=True, message="no action will be taken")

    try:
        client = TFEClient(settings.token, address=settings.address)
    except ClientError as e:
        log.critical("client_failed", message="could not create API client", error=str(e))
        ctx.exit(1)

    try:
        summary = unblock(settings, client)
    except ScanError as e:
        log.critical("scan_failed", message="workspace scan failed", error=str(e))
        ctx.exit(1)

    log.info(
        "summary",
        workspaces=summary.workspaces,
        decisions=len(summary.records),
        dispatched=len(summary.dispatched()),
        failed=len(summary.failed()),
    )


if __name__ == "__main__":
    cli()
