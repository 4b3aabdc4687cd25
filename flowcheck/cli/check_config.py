"""Static configuration check command for flowcheck."""

import sys
from pathlib import Path

import click
import structlog

from flowcheck.checks.workflow_config import ConfigTree, run_static_checks

log = structlog.get_logger(__name__)


EXIT_SUCCESS = 0
EXIT_CHECK_FAILED = 1


def _print_check(name: str, status: bool, detail: str | None = None) -> None:
    """Print a check result with consistent formatting.

    Args:
        name: Name of the check
        status: True if passed, False if failed
        detail: Optional detail message
    """
    if status:
        click.echo(f"  {click.style('[OK]', fg='green')} {name}")
    else:
        click.echo(f"  {click.style('[FAIL]', fg='red')} {name}")

    if detail:
        click.echo(f"       {detail}")


@click.command("check-config")
@click.option(
    "--root",
    "root",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Repository checkout to check (defaults to the configured target_root)",
)
@click.pass_context
def check_config(ctx: click.Context, root: Path | None) -> None:
    """Validate workflow files, issue templates, ADRs and CLAUDE.md.

    \b
    Checks performed:
      1. epic-evaluation.yml trigger, label filter, permissions and prompt
      2. initiative-intake.yml triggers, inputs, permissions and prompt
      3. claude.yml skips epics and can write issues and PRs
      4. Issue templates carry the required fields
      5. ADR template sections and README index
      6. CLAUDE.md documents issue creation

    \b
    Exit codes:
      0 - All checks passed
      1 - One or more checks failed
    """
    if root is None:
        root = ctx.obj["settings"].target_root

    tree = ConfigTree(root)
    click.echo(click.style(f"flowcheck static checks: {tree.root.resolve()}", bold=True))

    results = run_static_checks(tree)

    current_group = None
    for result in results:
        if result.check.group != current_group:
            current_group = result.check.group
            click.echo()
            click.echo(click.style(f"{current_group}:", bold=True))
        _print_check(result.check.name, result.passed, result.error)

    failed = [result for result in results if not result.passed]
    click.echo()
    if failed:
        click.echo(click.style(f"{len(failed)} of {len(results)} checks failed", fg="red", bold=True))
        sys.exit(EXIT_CHECK_FAILED)

    click.echo(click.style(f"All {len(results)} checks passed", fg="green", bold=True))
