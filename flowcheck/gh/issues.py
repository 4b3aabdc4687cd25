"""Issue operations on the repository under test, via ``gh issue``."""

from collections.abc import Iterable

import structlog

from flowcheck.gh.cli import GhCli
from flowcheck.models.domain import Comment, IssueRef, IssueSummary, require_field

log = structlog.get_logger(__name__)

DEFAULT_CLOSE_COMMENT = "Closed by automated test cleanup."

ISSUE_LIST_FIELDS = "number,title,url,labels"


class IssueTracker:
    """Creates, labels, lists and closes issues in one repository.

    Every issue created through ``create_test_issue`` carries the title
    prefix so the cleanup sweep can find it later.
    """

    def __init__(self, cli: GhCli, repo: str, title_prefix: str = "[TEST]") -> None:
        """Initialize the tracker.

        Args:
            cli: Invoker used for every gh call
            repo: Repository slug (``owner/name``)
            title_prefix: Prefix added to the titles of created issues
        """
        self.cli = cli
        self.repo = repo
        self.title_prefix = title_prefix

    def create_test_issue(self, title: str, body: str = "", labels: Iterable[str] = ()) -> IssueRef:
        """Create an issue whose title starts with the test prefix.

        Returns:
            Number and URL of the new issue
        """
        full_title = f"{self.title_prefix} {title}"
        args = ["issue", "create", "--repo", self.repo, "--title", full_title, "--body", body]
        for label in labels:
            args.extend(["--label", label])

        issue = IssueRef.from_url(self.cli.run(args))
        log.info("issue_created", repo=self.repo, number=issue.number, url=issue.url)
        return issue

    def add_label(self, number: int, label: str) -> None:
        """Add a label to an existing issue."""
        self.cli.run(["issue", "edit", str(number), "--repo", self.repo, "--add-label", label])
        log.info("issue_labeled", repo=self.repo, number=number, label=label)

    def close_issue(self, number: int, comment: str = DEFAULT_CLOSE_COMMENT) -> None:
        """Close an issue, leaving a comment explaining why."""
        self.cli.run(["issue", "close", str(number), "--repo", self.repo, "--comment", comment])
        log.info("issue_closed", repo=self.repo, number=number)

    def list_open_issues(self, limit: int = 100) -> list[IssueSummary]:
        """List open issues, newest first as gh returns them."""
        payload = self.cli.run_json(
            [
                "issue",
                "list",
                "--repo",
                self.repo,
                "--state",
                "open",
                "--limit",
                str(limit),
                "--json",
                ISSUE_LIST_FIELDS,
            ]
        )
        return [IssueSummary.from_payload(item) for item in payload or []]

    def list_issues_by_title(self, pattern: str, limit: int = 100) -> list[IssueSummary]:
        """List open issues whose title contains ``pattern``."""
        return [issue for issue in self.list_open_issues(limit) if pattern in issue.title]

    def _view(self, number: int, fields: str) -> dict:
        return self.cli.run_json(["issue", "view", str(number), "--repo", self.repo, "--json", fields])

    def get_comments(self, number: int) -> list[Comment]:
        """Get all comments on an issue, oldest first."""
        payload = self._view(number, "comments")
        return [Comment.from_payload(item) for item in require_field(payload, "comments", "IssueView")]

    def get_label_names(self, number: int) -> list[str]:
        """Get the label names on an issue."""
        payload = self._view(number, "labels")
        return [require_field(label, "name", "Label") for label in require_field(payload, "labels", "IssueView")]

    def get_body(self, number: int) -> str:
        """Get the markdown body of an issue."""
        payload = self._view(number, "body")
        return require_field(payload, "body", "IssueView")
