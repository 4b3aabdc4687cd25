"""Dispatch inputs and result assertions for the initiative intake workflow."""

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, Field

from flowcheck.checks.content import Fragment, assert_fragments
from flowcheck.models.domain import IssueSummary

INTAKE_TITLE_MARKER = "[INITIATIVE]"
INTAKE_LABEL = "initiative"

INTAKE_BODY_SECTIONS = tuple(
    Fragment(section, f"intake issue body must contain section: {section}", ignore_case=True)
    for section in ("Domain fit", "Component repos", "ADR", "next steps")
)


class InitiativeDispatch(BaseModel):
    """Inputs passed to ``initiative-intake.yml`` through workflow_dispatch."""

    initiative_title: str = Field(..., min_length=1, description="Title of the initiative")
    initiative_url: str = Field(default="", description="URL of the initiative's project board")
    created_by: str = Field(default="test-runner", description="Who created the initiative")

    def as_inputs(self) -> dict[str, str]:
        """Render as workflow_dispatch inputs, dropping empty values."""
        return {key: value for key, value in self.model_dump().items() if value}


def find_intake_issue(
    issues: Iterable[IssueSummary],
    initiative_title: str,
    title_prefix: str = "[TEST]",
) -> IssueSummary | None:
    """Find the intake issue Claude opened for an initiative.

    Matches titles that carry the ``[INITIATIVE]`` marker and either the
    initiative title or the test prefix.
    """
    for issue in issues:
        if INTAKE_TITLE_MARKER not in issue.title:
            continue
        if initiative_title in issue.title or title_prefix in issue.title:
            return issue
    return None


def is_test_intake_issue(issue: IssueSummary, title_prefix: str = "[TEST]") -> bool:
    """Check if an issue is an intake issue created during a test run."""
    return INTAKE_TITLE_MARKER in issue.title and title_prefix in issue.title


def assert_intake_labels(labels: Sequence[str]) -> None:
    if INTAKE_LABEL not in labels:
        raise AssertionError(f"Intake issue must have the {INTAKE_LABEL!r} label (labels: {list(labels)})")


def assert_intake_body(body: str) -> None:
    assert_fragments(body, required=INTAKE_BODY_SECTIONS, subject="intake issue body")
