"""CLI entry point for flowcheck."""

import asyncio
import sys
from pathlib import Path

import click
import structlog

from flowcheck.checks.fixtures import load_epic_fixture
from flowcheck.cli.check_config import check_config
from flowcheck.cli.cleanup import cleanup_command
from flowcheck.config.settings import load_settings
from flowcheck.exceptions import ConfigurationError, FlowcheckError
from flowcheck.gh.factory import create_workflow_runs
from flowcheck.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--config",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional YAML configuration file (environment variables are used otherwise)",
)
@click.option("--log-level", default="WARNING", help="Logging level")
@click.option("--json-logs/--console-logs", default=True, help="Log output format")
@click.pass_context
def cli(ctx: click.Context, config: Path | None, log_level: str, json_logs: bool) -> None:
    """flowcheck: checks for GitHub Actions issue automation."""
    try:
        configure_logging(log_level, json_logs=json_logs)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e

    try:
        settings = load_settings(config)
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("config_error", exc_info=True)
        sys.exit(1)

    ctx.obj = {"settings": settings}


cli.add_command(check_config)
cli.add_command(cleanup_command)


@cli.command("validate-fixture")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
def validate_fixture(path: Path) -> None:
    """Check that a sample epic document has every required section."""
    try:
        load_epic_fixture(path)
    except AssertionError as e:
        click.echo(f"{click.style('[FAIL]', fg='red')} {e}", err=True)
        sys.exit(1)

    click.echo(f"{click.style('[OK]', fg='green')} {path}")


@cli.command("wait-run")
@click.argument("run_id", type=int)
@click.option("--timeout", type=float, default=None, help="Seconds to wait (defaults to configured completion timeout)")
@click.pass_context
def wait_run(ctx: click.Context, run_id: int, timeout: float | None) -> None:
    """Wait for a workflow run to complete and report its conclusion.

    Exits 0 when the run succeeded, 1 for any other conclusion, 2 if the
    run could not be read or did not complete in time.
    """
    runs = create_workflow_runs(ctx.obj["settings"])

    try:
        run = asyncio.run(runs.wait_for_run_completion(run_id, timeout=timeout))
    except FlowcheckError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("wait_run_error", exc_info=True)
        sys.exit(2)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)

    click.echo(f"Run {run.id}: {run.conclusion} ({run.url})")
    if not run.succeeded:
        sys.exit(1)


if __name__ == "__main__":
    cli()
