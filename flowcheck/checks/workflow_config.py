"""
Static checks over the automation repository's configuration files.

These checks read workflow YAML, issue templates, the ADR scaffolding and
``.claude/CLAUDE.md`` from a checkout of the repository under test and
assert on their textual structure. They need no credentials and no network.

Each ``assert_*`` function raises AssertionError naming what is missing or
misconfigured. ``STATIC_CHECKS`` lists them all as named checks so the CLI
can run the whole set and report every failure instead of stopping at the
first one.
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog
import yaml

from flowcheck.checks.content import Fragment, assert_fragments, fragments

log = structlog.get_logger(__name__)

WORKFLOWS_DIR = ".github/workflows"

EPIC_EVALUATION_WORKFLOW = "epic-evaluation.yml"
INITIATIVE_INTAKE_WORKFLOW = "initiative-intake.yml"
CLAUDE_WORKFLOW = "claude.yml"

ISSUE_TEMPLATE_NAMES = ("design.yml", "infra.yml", "service.yml", "ui.yml")
ISSUE_TEMPLATES = tuple(f"templates/issues/{name}" for name in ISSUE_TEMPLATE_NAMES)

ADR_TEMPLATE = "adr/template.md"
ADR_README = "adr/README.md"
CLAUDE_MD = ".claude/CLAUDE.md"

EPIC_EVALUATION_STEPS = (
    "Initiative Mapping",
    "Product Impact",
    "Component Issue Creation",
    "ADR",
    "Summary Comment",
)
INITIATIVE_INTAKE_STEPS = ("Domain Fit", "Product Impact", "ADR", "Intake Issue")
ISSUE_TEMPLATE_FIELDS = ("Originating Epic", "Initiative", "Context", "Acceptance Criteria")
ADR_SECTIONS = ("Context", "Decision", "Options Considered", "Rationale", "Consequences")


class ConfigTree:
    """Read-only view of a repository checkout."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def path(self, relative_path: str) -> Path:
        return self.root / relative_path

    def has_workflows(self) -> bool:
        """Check if the checkout has a workflows directory at all."""
        return self.path(WORKFLOWS_DIR).is_dir()

    def read(self, relative_path: str) -> str:
        """Read a file, failing with its relative path if it is missing."""
        path = self.path(relative_path)
        if not path.is_file():
            raise AssertionError(f"File missing: {relative_path}")
        return path.read_text(encoding="utf-8")

    def read_workflow(self, name: str) -> str:
        return self.read(f"{WORKFLOWS_DIR}/{name}")


def assert_workflow_parses(content: str, subject: str) -> dict:
    """Assert that a workflow is a YAML mapping with a ``jobs`` section.

    Returns:
        The parsed workflow
    """
    try:
        workflow = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise AssertionError(f"{subject}: invalid YAML: {e}") from e

    if not isinstance(workflow, dict):
        raise AssertionError(f"{subject}: must be a YAML mapping")
    if "jobs" not in workflow:
        raise AssertionError(f"{subject}: must define jobs")
    return workflow


def _read_non_empty_workflow(tree: ConfigTree, name: str) -> str:
    content = tree.read_workflow(name)
    if not content.strip():
        raise AssertionError(f"{name} must not be empty")
    return content


# -----------------------------------------------------------------------------
# Epic Evaluation workflow
# -----------------------------------------------------------------------------


def assert_epic_evaluation_workflow_exists(tree: ConfigTree) -> str:
    """Assert the epic evaluation workflow exists and is not empty.

    Returns:
        The workflow file content
    """
    return _read_non_empty_workflow(tree, EPIC_EVALUATION_WORKFLOW)


def assert_epic_evaluation_trigger(content: str) -> None:
    assert_fragments(
        content,
        required=[Fragment("types: [labeled]", "must trigger on issues: [labeled]")],
        forbidden=[Fragment("types: [opened]", "opened trigger would fire before the label is set")],
        subject=EPIC_EVALUATION_WORKFLOW,
    )


def assert_epic_evaluation_label_filter(content: str) -> None:
    assert_fragments(
        content,
        required=[Fragment("github.event.label.name == 'epic'", "job must filter on the epic label")],
        subject=EPIC_EVALUATION_WORKFLOW,
    )


def assert_epic_evaluation_permissions(content: str) -> None:
    assert_fragments(content, required=fragments("issues: write", "id-token: write"), subject=EPIC_EVALUATION_WORKFLOW)


def assert_epic_evaluation_uses_claude_action(content: str) -> None:
    assert_fragments(
        content,
        required=[
            Fragment("anthropics/claude-code-action", "must use the Claude Code action"),
            Fragment("CLAUDE_CODE_OAUTH_TOKEN", "must use the CLAUDE_CODE_OAUTH_TOKEN secret"),
            Fragment("GH_TOKEN", "must pass GH_TOKEN for cross-repo issue creation"),
        ],
        subject=EPIC_EVALUATION_WORKFLOW,
    )


def assert_epic_evaluation_prompt_covers_all_steps(content: str) -> None:
    assert_fragments(
        content,
        required=[Fragment(step, f"prompt must cover step: {step}") for step in EPIC_EVALUATION_STEPS],
        subject=EPIC_EVALUATION_WORKFLOW,
    )


# -----------------------------------------------------------------------------
# Initiative Intake workflow
# -----------------------------------------------------------------------------


def assert_initiative_intake_workflow_exists(tree: ConfigTree) -> str:
    """Assert the initiative intake workflow exists and is not empty.

    Returns:
        The workflow file content
    """
    return _read_non_empty_workflow(tree, INITIATIVE_INTAKE_WORKFLOW)


def assert_initiative_intake_trigger(content: str) -> None:
    assert_fragments(
        content,
        required=[
            Fragment("workflow_dispatch", "must support the workflow_dispatch trigger"),
            Fragment("repository_dispatch", "must support the repository_dispatch trigger"),
            Fragment("initiative-created", "must declare the initiative-created repository_dispatch type"),
        ],
        forbidden=[Fragment("projects_v2", "projects_v2 is not a valid repository-level trigger")],
        subject=INITIATIVE_INTAKE_WORKFLOW,
    )


def assert_initiative_intake_inputs(content: str) -> None:
    assert_fragments(
        content,
        required=[Fragment("initiative_title", "must declare the initiative_title input")],
        subject=INITIATIVE_INTAKE_WORKFLOW,
    )


def assert_initiative_intake_permissions(content: str) -> None:
    assert_fragments(
        content,
        required=fragments("issues: write", "contents: write"),
        forbidden=[Fragment("projects: read", "projects: read is not a valid workflow permission")],
        subject=INITIATIVE_INTAKE_WORKFLOW,
    )


def assert_initiative_intake_prompt_covers_all_steps(content: str) -> None:
    assert_fragments(
        content,
        required=[Fragment(step, f"prompt must cover step: {step}") for step in INITIATIVE_INTAKE_STEPS],
        subject=INITIATIVE_INTAKE_WORKFLOW,
    )


# -----------------------------------------------------------------------------
# General Claude workflow
# -----------------------------------------------------------------------------


def assert_claude_workflow_excludes_epics(tree: ConfigTree) -> None:
    assert_fragments(
        tree.read_workflow(CLAUDE_WORKFLOW),
        required=[
            Fragment(
                "!contains(github.event.issue.labels.*.name, 'epic')",
                "must skip epic-labeled issues so they are not processed twice",
            )
        ],
        subject=CLAUDE_WORKFLOW,
    )


def assert_claude_workflow_has_write_permissions(tree: ConfigTree) -> None:
    assert_fragments(
        tree.read_workflow(CLAUDE_WORKFLOW),
        required=fragments("issues: write", "pull-requests: write"),
        subject=CLAUDE_WORKFLOW,
    )


def assert_workflows_parse(tree: ConfigTree) -> None:
    """Assert every checked workflow is valid YAML with jobs."""
    for name in (EPIC_EVALUATION_WORKFLOW, INITIATIVE_INTAKE_WORKFLOW, CLAUDE_WORKFLOW):
        assert_workflow_parses(tree.read_workflow(name), name)


# -----------------------------------------------------------------------------
# Issue templates
# -----------------------------------------------------------------------------


def assert_issue_templates_exist(tree: ConfigTree) -> None:
    for template in ISSUE_TEMPLATES:
        tree.read(template)


def assert_issue_template_has_required_fields(tree: ConfigTree, template_path: str) -> None:
    assert_fragments(
        tree.read(template_path),
        required=[Fragment(field, f"must contain field: {field}") for field in ISSUE_TEMPLATE_FIELDS],
        subject=template_path,
    )


def assert_design_template_has_spec_type_dropdown(tree: ConfigTree) -> None:
    assert_fragments(
        tree.read("templates/issues/design.yml"),
        required=fragments("Endpoint spec", "Event contract"),
        subject="templates/issues/design.yml",
    )


def assert_infra_template_has_iam_field(tree: ConfigTree) -> None:
    assert_fragments(
        tree.read("templates/issues/infra.yml"),
        required=[Fragment("IAM", "must include the IAM & Security field")],
        subject="templates/issues/infra.yml",
    )


def assert_template_requires_design_spec(tree: ConfigTree, template_path: str) -> None:
    assert_fragments(
        tree.read(template_path),
        required=[Fragment("Design Specification", "must require a link to an approved design spec")],
        subject=template_path,
    )


# -----------------------------------------------------------------------------
# ADR infrastructure and CLAUDE.md
# -----------------------------------------------------------------------------


def assert_adr_template_has_required_sections(tree: ConfigTree) -> None:
    assert_fragments(
        tree.read(ADR_TEMPLATE),
        required=[Fragment(section, f"must contain section: {section}") for section in ADR_SECTIONS],
        subject=ADR_TEMPLATE,
    )


def assert_adr_readme_has_index(tree: ConfigTree) -> None:
    assert_fragments(
        tree.read(ADR_README),
        required=[Fragment("## Index", "must contain an ## Index section")],
        subject=ADR_README,
    )


def assert_claude_md_has_issue_creation_rules(tree: ConfigTree) -> None:
    assert_fragments(
        tree.read(CLAUDE_MD),
        required=[
            Fragment("gh issue create", "must document the gh issue create pattern"),
            Fragment("templates/issues/", "must reference templates/issues/"),
        ],
        subject=CLAUDE_MD,
    )


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class StaticCheck:
    """A named static check over a ConfigTree."""

    group: str
    name: str
    run: Callable[[ConfigTree], object]


@dataclass(frozen=True)
class CheckResult:
    check: StaticCheck
    error: str | None = None

    @property
    def passed(self) -> bool:
        return self.error is None


def _on_workflow(name: str, assertion: Callable[[str], None]) -> Callable[[ConfigTree], None]:
    return lambda tree: assertion(tree.read_workflow(name))


STATIC_CHECKS: tuple[StaticCheck, ...] = (
    StaticCheck(EPIC_EVALUATION_WORKFLOW, "file exists and is not empty", assert_epic_evaluation_workflow_exists),
    StaticCheck(
        EPIC_EVALUATION_WORKFLOW,
        "triggers on issues: labeled (not opened)",
        _on_workflow(EPIC_EVALUATION_WORKFLOW, assert_epic_evaluation_trigger),
    ),
    StaticCheck(
        EPIC_EVALUATION_WORKFLOW,
        "job is filtered to the epic label",
        _on_workflow(EPIC_EVALUATION_WORKFLOW, assert_epic_evaluation_label_filter),
    ),
    StaticCheck(
        EPIC_EVALUATION_WORKFLOW,
        "has issues: write and id-token: write",
        _on_workflow(EPIC_EVALUATION_WORKFLOW, assert_epic_evaluation_permissions),
    ),
    StaticCheck(
        EPIC_EVALUATION_WORKFLOW,
        "uses claude-code-action with CLAUDE_CODE_OAUTH_TOKEN and GH_TOKEN",
        _on_workflow(EPIC_EVALUATION_WORKFLOW, assert_epic_evaluation_uses_claude_action),
    ),
    StaticCheck(
        EPIC_EVALUATION_WORKFLOW,
        "prompt covers all evaluation steps",
        _on_workflow(EPIC_EVALUATION_WORKFLOW, assert_epic_evaluation_prompt_covers_all_steps),
    ),
    StaticCheck(INITIATIVE_INTAKE_WORKFLOW, "file exists and is not empty", assert_initiative_intake_workflow_exists),
    StaticCheck(
        INITIATIVE_INTAKE_WORKFLOW,
        "uses workflow_dispatch and repository_dispatch (not projects_v2)",
        _on_workflow(INITIATIVE_INTAKE_WORKFLOW, assert_initiative_intake_trigger),
    ),
    StaticCheck(
        INITIATIVE_INTAKE_WORKFLOW,
        "declares the initiative_title input",
        _on_workflow(INITIATIVE_INTAKE_WORKFLOW, assert_initiative_intake_inputs),
    ),
    StaticCheck(
        INITIATIVE_INTAKE_WORKFLOW,
        "has issues: write and contents: write, not projects: read",
        _on_workflow(INITIATIVE_INTAKE_WORKFLOW, assert_initiative_intake_permissions),
    ),
    StaticCheck(
        INITIATIVE_INTAKE_WORKFLOW,
        "prompt covers all intake steps",
        _on_workflow(INITIATIVE_INTAKE_WORKFLOW, assert_initiative_intake_prompt_covers_all_steps),
    ),
    StaticCheck(CLAUDE_WORKFLOW, "excludes epic-labeled issues", assert_claude_workflow_excludes_epics),
    StaticCheck(
        CLAUDE_WORKFLOW, "has issues: write and pull-requests: write", assert_claude_workflow_has_write_permissions
    ),
    StaticCheck(WORKFLOWS_DIR, "workflows are valid YAML with jobs", assert_workflows_parse),
    StaticCheck("templates/issues/", "all four templates exist", assert_issue_templates_exist),
    *(
        StaticCheck(
            "templates/issues/",
            f"{template} has Epic, Initiative, Context and Acceptance Criteria fields",
            lambda tree, template=template: assert_issue_template_has_required_fields(tree, template),
        )
        for template in ISSUE_TEMPLATES
    ),
    StaticCheck(
        "templates/issues/",
        "design.yml offers Endpoint spec and Event contract",
        assert_design_template_has_spec_type_dropdown,
    ),
    StaticCheck("templates/issues/", "infra.yml has an IAM & Security field", assert_infra_template_has_iam_field),
    *(
        StaticCheck(
            "templates/issues/",
            f"{template} requires an approved design specification",
            lambda tree, template=template: assert_template_requires_design_spec(tree, template),
        )
        for template in ("templates/issues/service.yml", "templates/issues/ui.yml")
    ),
    StaticCheck("adr/", "template.md exists", lambda tree: tree.read(ADR_TEMPLATE)),
    StaticCheck("adr/", "template.md has all required sections", assert_adr_template_has_required_sections),
    StaticCheck("adr/", "README.md has an ## Index section", assert_adr_readme_has_index),
    StaticCheck(
        CLAUDE_MD,
        "documents gh issue create and references templates/issues/",
        assert_claude_md_has_issue_creation_rules,
    ),
)


def run_static_checks(
    tree: ConfigTree,
    checks: tuple[StaticCheck, ...] = STATIC_CHECKS,
) -> list[CheckResult]:
    """Run every check, collecting failures instead of stopping at the first.

    Only AssertionError counts as a check failure; anything else propagates.
    """
    results = []
    for check in checks:
        try:
            check.run(tree)
        except AssertionError as e:
            log.info("static_check_failed", group=check.group, check=check.name, error=str(e))
            results.append(CheckResult(check, error=str(e)))
        else:
            results.append(CheckResult(check))
    return results
