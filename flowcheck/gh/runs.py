"""Workflow dispatch and run polling, via ``gh workflow`` and ``gh run``."""

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime

import structlog

from flowcheck.config.settings import PollingConfig
from flowcheck.gh.cli import GhCli
from flowcheck.models.domain import RunRef
from flowcheck.utils.polling import poll_until

log = structlog.get_logger(__name__)

RUN_FIELDS = "databaseId,status,conclusion,createdAt,url"


class WorkflowRuns:
    """Triggers workflows and waits on their runs in one repository."""

    def __init__(
        self,
        cli: GhCli,
        repo: str,
        polling: PollingConfig | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the run client.

        Args:
            cli: Invoker used for every gh call
            repo: Repository slug (``owner/name``)
            polling: Default timeouts and intervals for the waits
            sleep: Coroutine function used between poll attempts
            clock: Monotonic clock used for poll deadlines
        """
        self.cli = cli
        self.repo = repo
        self.polling = polling or PollingConfig()
        self.sleep = sleep
        self.clock = clock

    def trigger(self, workflow_file: str, inputs: Mapping[str, str] | None = None) -> None:
        """Dispatch a ``workflow_dispatch`` event with string inputs."""
        args = ["workflow", "run", workflow_file, "--repo", self.repo]
        for key, value in (inputs or {}).items():
            args.extend(["-f", f"{key}={value}"])

        self.cli.run(args)
        log.info("workflow_triggered", repo=self.repo, workflow=workflow_file, inputs=sorted((inputs or {}).keys()))

    def list_runs(self, workflow_file: str, limit: int = 5) -> list[RunRef]:
        """List the most recent runs of a workflow, newest first."""
        payload = self.cli.run_json(
            [
                "run",
                "list",
                "--repo",
                self.repo,
                "--workflow",
                workflow_file,
                "--limit",
                str(limit),
                "--json",
                RUN_FIELDS,
            ]
        )
        return [RunRef.from_payload(item) for item in payload or []]

    def view_run(self, run_id: int) -> RunRef:
        """Fetch the current state of one run."""
        payload = self.cli.run_json(["run", "view", str(run_id), "--repo", self.repo, "--json", RUN_FIELDS])
        return RunRef.from_payload(payload)

    async def wait_for_run_started(
        self,
        workflow_file: str,
        after: datetime,
        timeout: float | None = None,
        interval: float | None = None,
    ) -> RunRef:
        """Wait until a run of ``workflow_file`` created at or after ``after`` exists.

        Runs created before ``after`` are stale runs from earlier triggers and
        never match.

        Args:
            workflow_file: Workflow file name (e.g. ``epic-evaluation.yml``)
            after: Reference time; naive values are taken as UTC;
                compared at whole-second precision, like gh timestamps
            timeout: Seconds to wait (defaults to ``polling.run_start_timeout``)
            interval: Seconds between fetches (defaults to ``polling.run_start_interval``)

        Returns:
            The matching run

        Raises:
            PollTimeoutError: If no such run appears in time
        """
        if after.tzinfo is None:
            after = after.replace(tzinfo=UTC)
        after = after.replace(microsecond=0)

        def find_new_run() -> RunRef | None:
            for run in self.list_runs(workflow_file):
                if run.created_at >= after:
                    return run
            return None

        run = await poll_until(
            find_new_run,
            lambda found: found is not None,
            timeout=timeout if timeout is not None else self.polling.run_start_timeout,
            interval=interval if interval is not None else self.polling.run_start_interval,
            operation=f"a {workflow_file} run created after {after.isoformat()}",
            sleep=self.sleep,
            clock=self.clock,
        )
        log.info("run_started", workflow=workflow_file, run_id=run.id, url=run.url)
        return run

    async def wait_for_run_completion(
        self,
        run_id: int,
        timeout: float | None = None,
        interval: float | None = None,
    ) -> RunRef:
        """Wait until a run reaches the completed status.

        The conclusion is not interpreted here; a failed or cancelled run is
        returned like a successful one.

        Raises:
            PollTimeoutError: If the run is still active when time runs out
        """
        run = await poll_until(
            lambda: self.view_run(run_id),
            lambda current: current.is_terminal,
            timeout=timeout if timeout is not None else self.polling.run_completion_timeout,
            interval=interval if interval is not None else self.polling.run_completion_interval,
            operation=f"run {run_id} to complete",
            sleep=self.sleep,
            clock=self.clock,
        )
        log.info("run_completed", run_id=run.id, conclusion=str(run.conclusion), url=run.url)
        return run
