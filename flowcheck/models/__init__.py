"""Result records for data returned by the ``gh`` CLI.

Key Models:
    - RunRef: A workflow run (id, status, conclusion, creation time)
    - IssueRef: An issue created by the suite
    - IssueSummary: A listed issue with its label names
    - Comment: An issue comment

Example:
    >>> from flowcheck.models import RunRef
    >>> run = RunRef.from_payload(payload)
    >>> run.is_terminal
"""

from flowcheck.models.domain import Comment, IssueRef, IssueSummary, RunRef, parse_timestamp, require_field

__all__ = ["Comment", "IssueRef", "IssueSummary", "RunRef", "parse_timestamp", "require_field"]
