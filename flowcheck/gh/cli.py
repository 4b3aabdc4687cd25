"""Synchronous invoker for the GitHub CLI.

This is the only I/O boundary between flowcheck and GitHub. Commands are
always passed to ``subprocess.run`` as a list of discrete arguments, so
titles, bodies and workflow inputs containing quotes or shell
metacharacters reach ``gh`` untouched.

Example:
    >>> cli = GhCli(token="ghp_...")
    >>> url = cli.run(["issue", "create", "--repo", "owner/repo", "--title", "x", "--body", ""])
    >>> runs = cli.run_json(["run", "list", "--repo", "owner/repo", "--json", "databaseId,status"])
"""

import json
import os
import subprocess  # nosec B404
from collections.abc import Sequence
from typing import Any

import structlog

from flowcheck.exceptions import ExternalToolError, MalformedResponseError

log = structlog.get_logger(__name__)


class GhCli:
    """Runs ``gh`` commands and returns their trimmed standard output.

    No retries happen here; retry and wait policy belongs to callers.
    """

    def __init__(
        self,
        executable: str = "gh",
        token: str | None = None,
        timeout: float | None = 60.0,
    ) -> None:
        """Initialize the invoker.

        Args:
            executable: Name or path of the gh binary
            token: Exported to the child process as GH_TOKEN when given
            timeout: Seconds before a command is killed (None disables)
        """
        self.executable = executable
        self.token = token.strip() if token else None
        self.timeout = timeout

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        if self.token:
            env["GH_TOKEN"] = self.token
        # Keep gh from paging or prompting in CI
        env.setdefault("GH_PROMPT_DISABLED", "1")
        env.setdefault("GH_PAGER", "cat")
        return env

    def run(self, args: Sequence[str]) -> str:
        """Run ``gh`` with the given arguments.

        Args:
            args: Arguments after the executable name, one list item each

        Returns:
            Standard output with surrounding whitespace removed

        Raises:
            ExternalToolError: If gh exits non-zero, is missing, or times out
        """
        command = [self.executable, *[str(arg) for arg in args]]
        log.debug("gh_command", args=command[1:])

        try:
            result = subprocess.run(  # nosec B603
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=self._env(),
                check=False,
            )
        except FileNotFoundError as e:
            raise ExternalToolError(f"Executable not found: {self.executable}", command=command) from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(
                f"Command timed out after {self.timeout}s",
                command=command,
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr),
            ) from e

        if result.returncode != 0:
            log.error(
                "gh_command_failed",
                args=command[1:],
                returncode=result.returncode,
                stderr=result.stderr.strip(),
            )
            raise ExternalToolError(
                "gh command failed",
                command=command,
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        return result.stdout.strip()

    def run_json(self, args: Sequence[str]) -> Any:
        """Run ``gh`` and parse its output as JSON.

        Raises:
            ExternalToolError: If the command fails
            MalformedResponseError: If the output is not valid JSON
        """
        output = self.run(args)
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"gh returned invalid JSON for '{' '.join(args)}': {e}") from e


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
