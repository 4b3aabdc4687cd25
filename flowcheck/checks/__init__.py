"""Content assertions for workflow configuration, comments, fixtures and intake issues.

Key Components:
    - content: Fragment and assert_fragments, the shared substring assertion
    - workflow_config: Static checks over a repository checkout
    - epic_summary: Structure of the epic evaluation summary comment
    - fixtures: Sample epic fixture validation
    - intake: Initiative intake dispatch inputs and result checks
"""

from flowcheck.checks.content import Fragment, assert_fragments, fragments

__all__ = ["Fragment", "assert_fragments", "fragments"]
