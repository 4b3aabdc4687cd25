"""Tests for flowcheck/gh/cli.py."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from flowcheck.exceptions import ExternalToolError, MalformedResponseError
from flowcheck.gh.cli import GhCli


def completed(stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess(args=["gh"], returncode=returncode, stdout=stdout, stderr=stderr)


class TestGhCliRun:
    """Tests for GhCli.run."""

    @patch("flowcheck.gh.cli.subprocess.run")
    def test_returns_trimmed_stdout(self, mock_run):
        mock_run.return_value = completed(stdout="https://github.com/o/r/issues/5\n")

        assert GhCli().run(["issue", "create"]) == "https://github.com/o/r/issues/5"

    @patch("flowcheck.gh.cli.subprocess.run")
    def test_arguments_passed_as_list(self, mock_run):
        """Shell metacharacters reach gh as literal arguments."""
        mock_run.return_value = completed()
        title = "[TEST] it's \"quoted\" $(rm -rf /) ; echo"

        GhCli(executable="/usr/bin/gh").run(["issue", "create", "--title", title])

        command = mock_run.call_args.args[0]
        assert command == ["/usr/bin/gh", "issue", "create", "--title", title]
        assert mock_run.call_args.kwargs.get("shell", False) is False
        assert mock_run.call_args.kwargs["capture_output"] is True
        assert mock_run.call_args.kwargs["text"] is True

    @patch("flowcheck.gh.cli.subprocess.run")
    def test_token_exported(self, mock_run):
        mock_run.return_value = completed()

        GhCli(token=" ghp_abc \n").run(["auth", "status"])

        env = mock_run.call_args.kwargs["env"]
        assert env["GH_TOKEN"] == "ghp_abc"
        assert env["GH_PROMPT_DISABLED"] == "1"

    @patch("flowcheck.gh.cli.subprocess.run")
    def test_timeout_passed(self, mock_run):
        mock_run.return_value = completed()

        GhCli(timeout=12.5).run(["run", "list"])

        assert mock_run.call_args.kwargs["timeout"] == 12.5

    @patch("flowcheck.gh.cli.subprocess.run")
    def test_non_zero_exit(self, mock_run):
        mock_run.return_value = completed(stdout="partial", stderr="HTTP 404: Not Found\n", returncode=1)

        with pytest.raises(ExternalToolError) as exc_info:
            GhCli().run(["issue", "view", "999"])

        error = exc_info.value
        assert error.returncode == 1
        assert error.stderr == "HTTP 404: Not Found\n"
        assert error.stdout == "partial"
        assert error.command == ["gh", "issue", "view", "999"]
        assert "HTTP 404" in str(error)

    @patch("flowcheck.gh.cli.subprocess.run")
    def test_executable_missing(self, mock_run):
        mock_run.side_effect = FileNotFoundError("gh")

        with pytest.raises(ExternalToolError, match="Executable not found: gh") as exc_info:
            GhCli().run(["--version"])

        assert exc_info.value.returncode is None

    @patch("flowcheck.gh.cli.subprocess.run")
    def test_command_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["gh"], timeout=60, output=b"", stderr=b"slow")

        with pytest.raises(ExternalToolError, match="timed out") as exc_info:
            GhCli().run(["run", "watch"])

        assert exc_info.value.stderr == "slow"


class TestGhCliRunJson:
    """Tests for GhCli.run_json."""

    def test_parses_output(self):
        cli = GhCli()
        cli.run = MagicMock(return_value='[{"number": 1}]')

        assert cli.run_json(["issue", "list"]) == [{"number": 1}]

    def test_invalid_json(self):
        cli = GhCli()
        cli.run = MagicMock(return_value="not json")

        with pytest.raises(MalformedResponseError, match="invalid JSON"):
            cli.run_json(["issue", "list"])

    def test_tool_error_propagates(self):
        cli = GhCli()
        cli.run = MagicMock(side_effect=ExternalToolError("gh command failed", returncode=4))

        with pytest.raises(ExternalToolError):
            cli.run_json(["issue", "list"])
