"""Validation of the sample epic document used as a live issue body."""

from pathlib import Path

from flowcheck.checks.content import Fragment, assert_fragments

EPIC_FIXTURE_SECTIONS = (
    Fragment("Business Objective", "fixture must describe a business objective"),
    Fragment("Scope", "fixture must define scope"),
    Fragment("Affected domains", "fixture must list affected domains"),
    Fragment("Constraints", "fixture must list constraints"),
)


def assert_epic_fixture(text: str, subject: str = "sample epic fixture") -> None:
    assert_fragments(text, required=EPIC_FIXTURE_SECTIONS, subject=subject)


def load_epic_fixture(path: Path | str) -> str:
    """Read and validate an epic fixture.

    Returns:
        The fixture text, ready to use as an issue body

    Raises:
        AssertionError: If the file is missing or lacks a required section
    """
    path = Path(path)
    if not path.is_file():
        raise AssertionError(f"Fixture file missing: {path}")
    text = path.read_text(encoding="utf-8")
    assert_epic_fixture(text, subject=path.name)
    return text
