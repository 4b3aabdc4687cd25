"""Build gh-backed clients from settings."""

from flowcheck.config.settings import FlowcheckSettings
from flowcheck.gh.cli import GhCli
from flowcheck.gh.issues import IssueTracker
from flowcheck.gh.runs import WorkflowRuns


def create_cli(settings: FlowcheckSettings) -> GhCli:
    """Create the gh invoker configured by ``settings``."""
    token = settings.token
    return GhCli(
        executable=settings.gh.executable,
        token=token.get_secret_value() if token else None,
        timeout=settings.gh.command_timeout,
    )


def create_issue_tracker(settings: FlowcheckSettings, cli: GhCli | None = None) -> IssueTracker:
    """Create an IssueTracker for the configured repository."""
    return IssueTracker(
        cli or create_cli(settings),
        settings.repository.slug,
        title_prefix=settings.test_title_prefix,
    )


def create_workflow_runs(settings: FlowcheckSettings, cli: GhCli | None = None) -> WorkflowRuns:
    """Create a WorkflowRuns client for the configured repository."""
    return WorkflowRuns(cli or create_cli(settings), settings.repository.slug, settings.polling)
