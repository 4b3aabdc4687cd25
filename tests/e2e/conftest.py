"""Pytest fixtures for the end-to-end scenarios.

The static checks read the repository named by ``FLOWCHECK_TARGET_ROOT``
(default: the current directory) and skip when it has no
``.github/workflows``. The live scenarios create and close real issues in
the configured repository and run only when both are set:

- RUN_LIVE_TRIGGER_TEST=true
- GH_TOKEN: token with repo, issues and workflow scope

Settings can also come from a YAML file named by ``FLOWCHECK_CONFIG``.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from flowcheck.checks.workflow_config import ConfigTree
from flowcheck.config.settings import FlowcheckSettings, load_settings
from flowcheck.gh.factory import create_cli, create_issue_tracker, create_workflow_runs
from flowcheck.gh.issues import IssueTracker
from flowcheck.gh.runs import WorkflowRuns

FIXTURES_DIR = Path(__file__).parent / "fixtures"

LIVE_SKIP_REASON = "Set RUN_LIVE_TRIGGER_TEST=true and GH_TOKEN to run live tests"


@pytest.fixture(scope="session")
def e2e_settings() -> FlowcheckSettings:
    """Settings from FLOWCHECK_CONFIG or the environment."""
    return load_settings(os.environ.get("FLOWCHECK_CONFIG"))


@pytest.fixture(scope="session")
def config_tree(e2e_settings: FlowcheckSettings) -> ConfigTree:
    """Checkout under test; skips when it has no workflows directory."""
    tree = ConfigTree(e2e_settings.target_root)
    if not tree.has_workflows():
        pytest.skip(f"No .github/workflows under {tree.root.resolve()} (set FLOWCHECK_TARGET_ROOT)")
    return tree


@pytest.fixture(scope="session")
def sample_epic_path() -> Path:
    """Version-controlled sample epic used as the live issue body."""
    return FIXTURES_DIR / "sample-epic.txt"


@pytest.fixture(scope="session")
def live_settings(e2e_settings: FlowcheckSettings) -> FlowcheckSettings:
    """Settings for live scenarios; skips unless live runs are enabled."""
    if not e2e_settings.live_enabled:
        pytest.skip(LIVE_SKIP_REASON)
    return e2e_settings


@pytest.fixture(scope="session")
def issue_tracker(live_settings: FlowcheckSettings) -> IssueTracker:
    """Issue tracker for the configured repository."""
    return create_issue_tracker(live_settings, create_cli(live_settings))


@pytest.fixture(scope="session")
def workflow_runs(live_settings: FlowcheckSettings) -> WorkflowRuns:
    """Workflow run client for the configured repository."""
    return create_workflow_runs(live_settings, create_cli(live_settings))
