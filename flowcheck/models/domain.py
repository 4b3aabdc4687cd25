"""
Result records mapped from ``gh`` JSON output.

The ``gh`` CLI returns loosely-typed JSON. Each record here has a
``from_payload`` constructor that validates the fields the suite relies on
and raises MalformedResponseError as soon as one is absent, so a missing
field never travels further as ``None``.

Example:
    Parsing a run from ``gh run list --json databaseId,status,...``::

        run = RunRef.from_payload(
            {
                "databaseId": 123456,
                "status": "completed",
                "conclusion": "success",
                "createdAt": "2024-05-01T10:00:00Z",
                "url": "https://github.com/org/repo/actions/runs/123456",
            }
        )
        assert run.is_terminal and run.succeeded
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from flowcheck.enums import RunConclusion, RunStatus
from flowcheck.exceptions import MalformedResponseError


def require_field(payload: Any, key: str, record: str) -> Any:
    """Return ``payload[key]`` or raise MalformedResponseError."""
    if not isinstance(payload, Mapping):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(payload).__name__}",
            record=record,
        )
    if key not in payload or payload[key] is None:
        raise MalformedResponseError("Required field missing from gh output", record=record, field=key)
    return payload[key]


def parse_timestamp(value: Any, record: str = "timestamp", key: str = "createdAt") -> datetime:
    """Parse an ISO-8601 timestamp as emitted by GitHub into an aware datetime.

    Naive values are taken as UTC.

    Raises:
        MalformedResponseError: If the value is not a valid ISO-8601 string
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        if not isinstance(value, str):
            raise MalformedResponseError(f"Invalid timestamp: {value!r}", record=record, field=key)
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise MalformedResponseError(f"Invalid timestamp: {value!r}", record=record, field=key) from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class RunRef:
    """One execution of a GitHub Actions workflow.

    Observed, never mutated, by flowcheck. A fresh RunRef is built every
    time the run is re-fetched.
    """

    id: int
    """Run identifier (``databaseId`` in gh output)."""

    status: RunStatus
    """Current status; only COMPLETED is terminal."""

    created_at: datetime
    """When the run was created (timezone-aware)."""

    url: str
    """Web URL of the run."""

    conclusion: RunConclusion | None = None
    """Outcome once completed, None while the run is still active."""

    @property
    def is_terminal(self) -> bool:
        """Check if the run has reached a terminal status."""
        return self.status.is_terminal

    @property
    def succeeded(self) -> bool:
        """Check if the run completed with a success conclusion."""
        return self.is_terminal and self.conclusion is RunConclusion.SUCCESS

    @classmethod
    def from_payload(cls, payload: Any) -> "RunRef":
        """Build a RunRef from a ``gh run list/view`` JSON object.

        Raises:
            MalformedResponseError: If a required field is absent or invalid
        """
        record = cls.__name__
        raw_id = require_field(payload, "databaseId", record)
        raw_status = require_field(payload, "status", record)
        created_at = parse_timestamp(require_field(payload, "createdAt", record), record)
        url = require_field(payload, "url", record)

        try:
            run_id = int(raw_id)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(f"Invalid run id: {raw_id!r}", record=record, field="databaseId") from e

        try:
            status = RunStatus(raw_status)
        except ValueError as e:
            raise MalformedResponseError(f"Unknown run status: {raw_status!r}", record=record, field="status") from e

        # gh reports an empty string until the run completes
        raw_conclusion = payload.get("conclusion") or None
        conclusion = None
        if raw_conclusion is not None:
            try:
                conclusion = RunConclusion(raw_conclusion)
            except ValueError as e:
                raise MalformedResponseError(
                    f"Unknown run conclusion: {raw_conclusion!r}", record=record, field="conclusion"
                ) from e

        return cls(id=run_id, status=status, created_at=created_at, url=url, conclusion=conclusion)


@dataclass(frozen=True)
class IssueRef:
    """An issue created by the suite."""

    number: int
    url: str

    @classmethod
    def from_url(cls, url: str) -> "IssueRef":
        """Build an IssueRef from the URL printed by ``gh issue create``.

        Raises:
            MalformedResponseError: If the URL does not end in an issue number
        """
        url = url.strip()
        tail = url.rstrip("/").rsplit("/", 1)[-1]
        if not tail.isdigit():
            raise MalformedResponseError(f"Cannot read issue number from {url!r}", record=cls.__name__, field="number")
        return cls(number=int(tail), url=url)


@dataclass(frozen=True)
class IssueSummary:
    """An issue as returned by ``gh issue list --json number,title,url,labels``."""

    number: int
    title: str
    url: str
    labels: list[str] = field(default_factory=list)
    """Label names only; colors and descriptions are dropped."""

    @classmethod
    def from_payload(cls, payload: Any) -> "IssueSummary":
        """Build an IssueSummary from a ``gh issue list`` JSON object."""
        record = cls.__name__
        number = require_field(payload, "number", record)
        title = require_field(payload, "title", record)
        url = require_field(payload, "url", record)
        labels = [require_field(label, "name", "Label") for label in payload.get("labels") or []]
        try:
            number = int(number)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(f"Invalid issue number: {number!r}", record=record, field="number") from e
        return cls(number=number, title=title, url=url, labels=labels)


@dataclass(frozen=True)
class Comment:
    """A comment on an issue."""

    body: str
    created_at: datetime
    author: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Comment":
        """Build a Comment from one entry of ``gh issue view --json comments``."""
        record = cls.__name__
        body = require_field(payload, "body", record)
        created_at = parse_timestamp(require_field(payload, "createdAt", record), record)
        author = (payload.get("author") or {}).get("login")
        return cls(body=body, created_at=created_at, author=author)
