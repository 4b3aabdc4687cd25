"""Cleanup command: close leftover test issues."""

import sys

import click
import structlog

from flowcheck.cleanup import sweep
from flowcheck.exceptions import FlowcheckError
from flowcheck.gh.factory import create_issue_tracker

log = structlog.get_logger(__name__)

EXIT_EXTERNAL_TOOL_ERROR = 2


@click.command("cleanup")
@click.option("--dry-run", is_flag=True, help="List the issues that would be closed without closing them")
@click.pass_context
def cleanup_command(ctx: click.Context, dry_run: bool) -> None:
    """Close every open issue whose title starts with the test prefix.

    Individual failures are reported and do not stop the sweep. Safe to
    run repeatedly.
    """
    settings = ctx.obj["settings"]
    tracker = create_issue_tracker(settings)

    try:
        report = sweep(tracker, comment=settings.cleanup_comment, dry_run=dry_run)
    except FlowcheckError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("cleanup_error", exc_info=True)
        sys.exit(EXIT_EXTERNAL_TOOL_ERROR)

    if not report.found:
        click.echo(f"No {tracker.title_prefix} issues found, nothing to clean up.")
        return

    verb = "Would close" if dry_run else "Closing"
    click.echo(f"Found {len(report.found)} {tracker.title_prefix} issue(s):")
    for issue in report.found:
        click.echo(f"  {verb} #{issue.number}: {issue.title}")
        if issue.number in report.failed:
            click.echo(f"    {click.style('[FAIL]', fg='red')} {report.failed[issue.number]}")

    if dry_run:
        return

    click.echo()
    click.echo(f"Cleanup complete. Closed {len(report.closed)} issue(s), {len(report.failed)} failed.")
