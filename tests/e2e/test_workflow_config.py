"""Static checks of the automation repository's workflows, templates and ADRs.

No credentials needed. Point FLOWCHECK_TARGET_ROOT at a checkout of the
repository under test.
"""

import pytest

from flowcheck.checks import workflow_config as wc

pytestmark = pytest.mark.e2e


@pytest.fixture(scope="module")
def epic_workflow(config_tree):
    return wc.assert_epic_evaluation_workflow_exists(config_tree)


@pytest.fixture(scope="module")
def intake_workflow(config_tree):
    return wc.assert_initiative_intake_workflow_exists(config_tree)


class TestEpicEvaluationWorkflow:
    """epic-evaluation.yml"""

    def test_file_exists_and_is_not_empty(self, epic_workflow):
        assert epic_workflow.strip()

    def test_triggers_on_labeled_not_opened(self, epic_workflow):
        wc.assert_epic_evaluation_trigger(epic_workflow)

    def test_job_filters_on_epic_label(self, epic_workflow):
        wc.assert_epic_evaluation_label_filter(epic_workflow)

    def test_has_issues_and_id_token_write(self, epic_workflow):
        wc.assert_epic_evaluation_permissions(epic_workflow)

    def test_uses_claude_code_action(self, epic_workflow):
        wc.assert_epic_evaluation_uses_claude_action(epic_workflow)

    def test_prompt_covers_all_steps(self, epic_workflow):
        wc.assert_epic_evaluation_prompt_covers_all_steps(epic_workflow)


class TestInitiativeIntakeWorkflow:
    """initiative-intake.yml"""

    def test_file_exists_and_is_not_empty(self, intake_workflow):
        assert intake_workflow.strip()

    def test_dispatch_triggers(self, intake_workflow):
        wc.assert_initiative_intake_trigger(intake_workflow)

    def test_declares_initiative_title_input(self, intake_workflow):
        wc.assert_initiative_intake_inputs(intake_workflow)

    def test_permissions(self, intake_workflow):
        wc.assert_initiative_intake_permissions(intake_workflow)

    def test_prompt_covers_all_steps(self, intake_workflow):
        wc.assert_initiative_intake_prompt_covers_all_steps(intake_workflow)


class TestClaudeWorkflow:
    """claude.yml"""

    def test_excludes_epic_labeled_issues(self, config_tree):
        wc.assert_claude_workflow_excludes_epics(config_tree)

    def test_has_issue_and_pull_request_write(self, config_tree):
        wc.assert_claude_workflow_has_write_permissions(config_tree)

    def test_workflows_are_valid_yaml(self, config_tree):
        wc.assert_workflows_parse(config_tree)


class TestIssueTemplates:
    """templates/issues/"""

    def test_all_templates_exist(self, config_tree):
        wc.assert_issue_templates_exist(config_tree)

    @pytest.mark.parametrize("template", wc.ISSUE_TEMPLATES)
    def test_template_has_required_fields(self, config_tree, template):
        wc.assert_issue_template_has_required_fields(config_tree, template)

    def test_design_template_offers_spec_types(self, config_tree):
        wc.assert_design_template_has_spec_type_dropdown(config_tree)

    def test_infra_template_has_iam_field(self, config_tree):
        wc.assert_infra_template_has_iam_field(config_tree)

    @pytest.mark.parametrize("template", ["templates/issues/service.yml", "templates/issues/ui.yml"])
    def test_template_requires_design_spec(self, config_tree, template):
        wc.assert_template_requires_design_spec(config_tree, template)


class TestAdrAndClaudeMd:
    """adr/ and .claude/CLAUDE.md"""

    def test_adr_template_exists(self, config_tree):
        config_tree.read(wc.ADR_TEMPLATE)

    def test_adr_template_has_required_sections(self, config_tree):
        wc.assert_adr_template_has_required_sections(config_tree)

    def test_adr_readme_has_index(self, config_tree):
        wc.assert_adr_readme_has_index(config_tree)

    def test_claude_md_documents_issue_creation(self, config_tree):
        wc.assert_claude_md_has_issue_creation_rules(config_tree)
