"""Enumerations for workflow run states reported by ``gh``."""

from enum import Enum


class RunStatus(str, Enum):
    """Status of a GitHub Actions workflow run.

    Values match the ``status`` field of ``gh run list/view --json``.
    Only COMPLETED is terminal.
    """

    QUEUED = "queued"
    PENDING = "pending"
    REQUESTED = "requested"
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    def __str__(self) -> str:
        return self.value

    @property
    def is_terminal(self) -> bool:
        """Check if no further status transition can occur."""
        return self is RunStatus.COMPLETED


class RunConclusion(str, Enum):
    """Outcome recorded once a run reaches COMPLETED."""

    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    TIMED_OUT = "timed_out"
    NEUTRAL = "neutral"
    ACTION_REQUIRED = "action_required"
    STALE = "stale"
    STARTUP_FAILURE = "startup_failure"

    def __str__(self) -> str:
        return self.value
