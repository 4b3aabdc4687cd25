"""GitHub access through the ``gh`` command-line tool.

Key Components:
    - GhCli: Runs gh commands with discrete arguments
    - IssueTracker: Issue create/label/list/close operations
    - WorkflowRuns: Workflow dispatch and run polling
"""

from flowcheck.gh.cli import GhCli
from flowcheck.gh.issues import IssueTracker
from flowcheck.gh.runs import WorkflowRuns

__all__ = ["GhCli", "IssueTracker", "WorkflowRuns"]
