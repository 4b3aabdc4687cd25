"""Pytest configuration and shared fixtures."""

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

from flowcheck.config.settings import FlowcheckSettings, PollingConfig
from flowcheck.gh.cli import GhCli
from flowcheck.gh.issues import IssueTracker
from flowcheck.gh.runs import WorkflowRuns

TEST_REPO = "test-owner/test-repo"

Response = str | Exception | Callable[[list[str]], str]


class FakeGhCli(GhCli):
    """GhCli that records arguments and replays scripted responses.

    Each response is consumed in order: a string is returned as stdout, an
    exception is raised, a callable is called with the arguments.
    """

    def __init__(self, responses: Sequence[Response] = ()) -> None:
        super().__init__(executable="gh")
        self.calls: list[list[str]] = []
        self.responses: list[Response] = list(responses)

    def queue(self, *responses: Response) -> None:
        self.responses.extend(responses)

    def queue_json(self, *payloads: Any) -> None:
        self.responses.extend(json.dumps(payload) for payload in payloads)

    def run(self, args: Sequence[str]) -> str:
        self.calls.append([str(arg) for arg in args])
        if not self.responses:
            raise AssertionError(f"Unexpected gh call: {list(args)}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(list(args))
        return response


class FakeClock:
    """Monotonic clock advanced only by the paired sleep coroutine."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def run_payload(
    run_id: int = 1001,
    status: str = "completed",
    conclusion: str = "success",
    created_at: str = "2024-05-01T10:00:00Z",
) -> dict:
    """gh run JSON object as returned by ``gh run list/view``."""
    return {
        "databaseId": run_id,
        "status": status,
        "conclusion": conclusion,
        "createdAt": created_at,
        "url": f"https://github.com/{TEST_REPO}/actions/runs/{run_id}",
    }


def issue_payload(number: int, title: str, labels: Sequence[str] = ()) -> dict:
    """gh issue JSON object as returned by ``gh issue list``."""
    return {
        "number": number,
        "title": title,
        "url": f"https://github.com/{TEST_REPO}/issues/{number}",
        "labels": [{"name": label, "color": "ededed"} for label in labels],
    }


@pytest.fixture
def fake_cli() -> FakeGhCli:
    """Scripted gh invoker."""
    return FakeGhCli()


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock/sleep pair that never really waits."""
    return FakeClock()


@pytest.fixture
def tracker(fake_cli: FakeGhCli) -> IssueTracker:
    """IssueTracker backed by the scripted invoker."""
    return IssueTracker(fake_cli, TEST_REPO)


@pytest.fixture
def runs(fake_cli: FakeGhCli, fake_clock: FakeClock) -> WorkflowRuns:
    """WorkflowRuns backed by the scripted invoker and fake clock."""
    return WorkflowRuns(
        fake_cli,
        TEST_REPO,
        PollingConfig(run_start_timeout=60.0, run_start_interval=5.0, run_completion_timeout=300.0),
        sleep=fake_clock.sleep,
        clock=fake_clock,
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that feed FlowcheckSettings."""
    for name in ("GH_TOKEN", "RUN_LIVE_TRIGGER_TEST", "FLOWCHECK_GH_TOKEN", "FLOWCHECK_RUN_LIVE_TRIGGER_TEST"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(clean_env: None, tmp_path: Path) -> FlowcheckSettings:
    """Settings isolated from the developer's environment."""
    return FlowcheckSettings(
        repository={"owner": "test-owner", "name": "test-repo"},
        target_root=tmp_path,
    )


@pytest.fixture
def make_run() -> Callable[..., dict]:
    """Factory for gh run JSON objects."""
    return run_payload


@pytest.fixture
def make_issue() -> Callable[..., dict]:
    """Factory for gh issue JSON objects."""
    return issue_payload
