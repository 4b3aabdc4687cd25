"""Assertions on the evaluation summary Claude posts on an epic issue."""

from collections.abc import Sequence

from flowcheck.checks.content import Fragment, assert_fragments
from flowcheck.models.domain import Comment

SUMMARY_MARKERS = ("Initiative", "Affected product", "Issues created", "Epic Evaluation")

SUMMARY_SECTIONS = (
    Fragment("Initiative", "summary must include an Initiative section"),
    Fragment("product", "summary must mention affected products", alternatives=("Product",)),
    Fragment(
        "Issues created",
        "summary must include a table or list of created issues",
        alternatives=("| Repo |", "github.com"),
    ),
    Fragment("ADR", 'summary must include an ADR section (even if "not required")'),
)


def find_summary_comment(comments: Sequence[Comment]) -> Comment:
    """Find the comment that looks like the evaluation summary.

    Raises:
        AssertionError: If there are no comments, or none mentions any of
            the summary markers
    """
    if not comments:
        raise AssertionError("Claude must post at least one comment on the epic issue")

    for comment in comments:
        if any(marker in comment.body for marker in SUMMARY_MARKERS):
            return comment

    raise AssertionError(
        "Claude must post a summary comment containing evaluation results "
        f"(one of: {', '.join(SUMMARY_MARKERS)}); found {len(comments)} comment(s) without them"
    )


def assert_summary_structure(body: str) -> None:
    """Assert the summary body has every required section."""
    assert_fragments(body, required=SUMMARY_SECTIONS, subject="summary comment")


def assert_epic_evaluation_comment(comments: Sequence[Comment]) -> Comment:
    """Assert the full evaluation summary structure.

    Returns:
        The summary comment
    """
    summary = find_summary_comment(comments)
    assert_summary_structure(summary.body)
    return summary
