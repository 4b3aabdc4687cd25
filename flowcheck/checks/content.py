"""Substring assertions over text blobs.

Workflow files, issue templates, fixtures and posted comments are all
checked the same way: a list of required fragments that must appear and,
optionally, forbidden fragments that must not. A fragment is a literal
substring, optionally with alternatives (any one of them counts) and
optionally case-insensitive.

Example:
    >>> assert_fragments(
    ...     workflow_text,
    ...     required=[Fragment("types: [labeled]", "trigger on issues: [labeled]")],
    ...     forbidden=[Fragment("types: [opened]", "opened trigger fires before the label is set")],
    ...     subject=".github/workflows/epic-evaluation.yml",
    ... )

A fragment matches anywhere in the blob, YAML comments included.
"""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Fragment:
    """A substring expected in (or forbidden from) a text blob."""

    text: str
    """The literal substring."""

    description: str
    """What the fragment represents, shown when the assertion fails."""

    alternatives: tuple[str, ...] = ()
    """Other substrings that satisfy the fragment equally."""

    ignore_case: bool = False

    @property
    def candidates(self) -> tuple[str, ...]:
        """All substrings that count as a match."""
        return (self.text, *self.alternatives)

    def found_in(self, blob: str) -> bool:
        """Check if the fragment (or one of its alternatives) occurs in ``blob``."""
        if self.ignore_case:
            haystack = blob.lower()
            return any(candidate.lower() in haystack for candidate in self.candidates)
        return any(candidate in blob for candidate in self.candidates)

    def label(self) -> str:
        """Render the fragment for error messages."""
        return " or ".join(repr(candidate) for candidate in self.candidates)


def fragments(*texts: str, ignore_case: bool = False) -> list[Fragment]:
    """Build one fragment per text, each described by its own text."""
    return [Fragment(text, text, ignore_case=ignore_case) for text in texts]


def assert_fragments(
    blob: str,
    required: Iterable[Fragment],
    forbidden: Iterable[Fragment] = (),
    subject: str | None = None,
) -> None:
    """Assert that every required fragment is present and no forbidden one is.

    Required fragments are checked first, in order, then forbidden ones.

    Args:
        blob: The text under test
        required: Fragments that must all be present
        forbidden: Fragments that must all be absent
        subject: What the blob is (file path, "summary comment"), used in
            the failure message

    Raises:
        AssertionError: Naming the first missing required fragment or the
            first present forbidden fragment, with its description
    """
    prefix = f"{subject}: " if subject else ""

    for fragment in required:
        if not fragment.found_in(blob):
            raise AssertionError(f"{prefix}missing {fragment.label()} ({fragment.description})")

    for fragment in forbidden:
        if fragment.found_in(blob):
            raise AssertionError(f"{prefix}must not contain {fragment.label()} ({fragment.description})")
