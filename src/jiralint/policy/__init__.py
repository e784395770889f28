"""Pull request policy: branch rules, predicates and the evaluator."""

from __future__ import annotations

from .branches import get_hotfix_label, should_skip_branch_lint
from .rules import (
    HIDDEN_MARKER,
    build_labels,
    is_docs_only,
    is_humongous_pr,
    is_issue_status_valid,
    should_update_description,
)
from .evaluator import EvaluationResult, Outcome, PolicyEvaluator, Reason

__all__ = [
    "EvaluationResult",
    "HIDDEN_MARKER",
    "Outcome",
    "PolicyEvaluator",
    "Reason",
    "build_labels",
    "get_hotfix_label",
    "is_docs_only",
    "is_humongous_pr",
    "is_issue_status_valid",
    "should_skip_branch_lint",
    "should_update_description",
]
