"""CLI commands for flowcheck.

Key Commands:
    check-config (flowcheck.cli.check_config):
        Runs the static configuration checks against a repository
        checkout and prints one line per check.

    cleanup (flowcheck.cli.cleanup):
        Closes issues left behind by live test runs.

Usage Examples::

    $ flowcheck check-config --root ../solution-architect
    $ flowcheck cleanup --dry-run
"""

from flowcheck.cli.check_config import check_config
from flowcheck.cli.cleanup import cleanup_command

__all__ = ["check_config", "cleanup_command"]
