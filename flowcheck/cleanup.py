"""Best-effort sweep that closes issues left behind by test runs.

The sweep lists open issues, closes every one whose title starts with the
test prefix (or that matches a caller-supplied predicate), and keeps going
when an individual close fails. Running it again right after is a no-op:
closed issues no longer show up in the open list.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from flowcheck.exceptions import ExternalToolError
from flowcheck.gh.issues import DEFAULT_CLOSE_COMMENT, IssueTracker
from flowcheck.models.domain import IssueSummary

log = structlog.get_logger(__name__)


@dataclass
class CleanupReport:
    """Outcome of one sweep."""

    found: list[IssueSummary] = field(default_factory=list)
    closed: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def sweep(
    tracker: IssueTracker,
    match: Callable[[IssueSummary], bool] | None = None,
    comment: str = DEFAULT_CLOSE_COMMENT,
    dry_run: bool = False,
) -> CleanupReport:
    """Close leftover test issues.

    Args:
        tracker: Tracker for the repository to clean
        match: Selects issues to close; defaults to titles starting with the
            tracker's test prefix
        comment: Comment left on each closed issue
        dry_run: List what would be closed without closing anything

    Returns:
        The issues found, closed and failed
    """
    prefix = tracker.title_prefix
    selector = match or (lambda issue: issue.title.startswith(prefix))

    report = CleanupReport(found=[issue for issue in tracker.list_open_issues() if selector(issue)])

    if not report.found:
        log.info("cleanup_nothing_to_close", repo=tracker.repo)
        return report

    log.info("cleanup_started", repo=tracker.repo, count=len(report.found), dry_run=dry_run)

    for issue in report.found:
        if dry_run:
            log.info("cleanup_would_close", number=issue.number, title=issue.title)
            continue
        try:
            tracker.close_issue(issue.number, comment)
        except ExternalToolError as e:
            log.error("cleanup_close_failed", number=issue.number, error=str(e))
            report.failed[issue.number] = str(e)
        else:
            report.closed.append(issue.number)

    log.info("cleanup_complete", repo=tracker.repo, closed=len(report.closed), failed=len(report.failed))
    return report
