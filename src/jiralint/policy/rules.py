"""Small, pure policy predicates shared by the evaluator and the CLI."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from ..comments.render import HIDDEN_MARKER
from ..jira.models import JiraIssueDetails
from ..validation.commits import DOC_COMMIT_PREFIX, Commit, is_doc_commit
from .branches import get_hotfix_label

DEFAULT_PR_ADDITIONS_THRESHOLD = 800


def is_humongous_pr(additions: Any, threshold: Any) -> bool:
    """Return ``True`` when *additions* strictly exceeds *threshold*."""

    try:
        return int(additions) > int(threshold)
    except (TypeError, ValueError):
        return False


def should_update_description(body: str | None) -> bool:
    """Return ``True`` unless *body* already carries the hidden marker."""

    if not body:
        return True
    return HIDDEN_MARKER not in body


def parse_allowed_statuses(raw: str | Sequence[str] | None) -> tuple[str, ...]:
    if raw is None:
        return ()
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return tuple(item.strip() for item in items if item and item.strip())


def is_issue_status_valid(
    should_validate: bool,
    allowed_statuses: Sequence[str],
    details: JiraIssueDetails,
) -> bool:
    """Check *details* against the allow-list when validation is enabled."""

    if not should_validate:
        return True
    return details.status in allowed_statuses


def is_docs_only(commits: Sequence[Commit], prefix: str = DOC_COMMIT_PREFIX) -> bool:
    """Return ``True`` for a non-empty list made only of documentation commits."""

    return bool(commits) and all(is_doc_commit(commit.message, prefix) for commit in commits)


def build_labels(details: JiraIssueDetails, base_branch: str | None) -> list[str]:
    candidates: Iterable[str] = (
        details.project.name,
        get_hotfix_label(base_branch),
        details.type.name,
    )
    return [label for label in candidates if label and label.strip()]


__all__ = [
    "DEFAULT_PR_ADDITIONS_THRESHOLD",
    "HIDDEN_MARKER",
    "build_labels",
    "is_docs_only",
    "is_humongous_pr",
    "is_issue_status_valid",
    "parse_allowed_statuses",
    "should_update_description",
]
